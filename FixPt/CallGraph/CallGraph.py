from collections import defaultdict
from typing import Dict, FrozenSet, Generic, Hashable, List, Set, TypeVar

from ..IR.IRStmts import CallKind, Invoke
from ..IR.JMethod import JMethod

CallSite = TypeVar("CallSite", bound=Hashable)
Method = TypeVar("Method", bound=Hashable)


class Edge(Generic[CallSite, Method]):
    kind: CallKind
    callSite: CallSite
    callee: Method

    def __init__(self, kind: CallKind, callSite: CallSite, callee: Method):
        self.kind = kind
        self.callSite = callSite
        self.callee = callee

    def __eq__(self, other):
        return (isinstance(other, Edge) and self.kind == other.kind
                and self.callSite == other.callSite and self.callee == other.callee)

    def __hash__(self):
        return hash((self.kind, self.callSite, self.callee))

    def __repr__(self):
        return f"[{self.kind.name}]{self.callSite} -> {self.callee}"


class CallGraph(Generic[CallSite, Method]):
    """Call graph over plain call sites (Invoke) and methods (JMethod).
    Subclasses change what a call site and a method are by overriding
    getContainerOf, getCallSitesIn and the two projections used by the fold
    functions."""
    entryMethods: Set[Method]
    reachableMethods: Dict[Method, None]                # ordered set, in order of discovery
    callSiteToEdges: Dict[CallSite, Dict[Edge, None]]
    calleeToEdges: Dict[Method, Dict[Edge, None]]
    edges: Dict[Edge, None]

    def __init__(self):
        self.entryMethods = set()
        self.reachableMethods = {}
        self.callSiteToEdges = defaultdict(dict)
        self.calleeToEdges = defaultdict(dict)
        self.edges = {}

    def addEntryMethod(self, method: Method):
        self.entryMethods.add(method)

    def addReachableMethod(self, method: Method) -> bool:
        if(method in self.reachableMethods):
            return False
        self.reachableMethods[method] = None
        return True

    def addEdge(self, edge: Edge) -> bool:
        if(edge in self.edges):
            return False
        self.edges[edge] = None
        self.callSiteToEdges[edge.callSite][edge] = None
        self.calleeToEdges[edge.callee][edge] = None
        return True

    def getEntryMethods(self) -> FrozenSet[Method]:
        return frozenset(self.entryMethods)

    def getReachableMethods(self) -> List[Method]:
        return list(self.reachableMethods)

    def isReachable(self, method: Method) -> bool:
        return method in self.reachableMethods

    def getEdges(self) -> List[Edge]:
        return list(self.edges)

    def edgesOutOf(self, callSite: CallSite) -> List[Edge]:
        return list(self.callSiteToEdges.get(callSite, ()))

    def edgesInTo(self, callee: Method) -> List[Edge]:
        return list(self.calleeToEdges.get(callee, ()))

    def getCalleesOf(self, callSite: CallSite) -> Set[Method]:
        return {edge.callee for edge in self.edgesOutOf(callSite)}

    def getCallersOf(self, callee: Method) -> Set[CallSite]:
        return {edge.callSite for edge in self.edgesInTo(callee)}

    def getCalleesOfM(self, caller: Method) -> Set[Method]:
        callees = set()
        for callSite in self.getCallSitesIn(caller):
            callees |= self.getCalleesOf(callSite)
        return callees

    def getContainerOf(self, callSite: CallSite) -> Method:
        return callSite.belongsTo

    def getCallSitesIn(self, method: Method) -> List[CallSite]:
        return [stmt for stmt in method.stmts if isinstance(stmt, Invoke)]

    # the plain call site / method behind a (possibly context-qualified) one
    def plainCallSite(self, callSite: CallSite) -> Invoke:
        return callSite

    def plainMethod(self, method: Method) -> JMethod:
        return method

    def foldToMethod(self) -> Dict[JMethod, Set[JMethod]]:
        callgraph = {}
        for edge in self.edges:
            caller = self.plainCallSite(edge.callSite).belongsTo
            if(caller not in callgraph):
                callgraph[caller] = set()
            callgraph[caller].add(self.plainMethod(edge.callee))
        return callgraph

    # return a dict of callgraph, formed with signatures
    def export(self) -> Dict[str, List[str]]:
        callgraph = {}
        for caller, callees in self.foldToMethod().items():
            callgraph[caller.signature] = sorted(callee.signature for callee in callees)
        return callgraph

    def __len__(self):
        return len(self.edges)
