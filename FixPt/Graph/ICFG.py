from collections import defaultdict
from enum import Enum
from typing import Callable, Dict, Hashable, List, Optional, Set
import typing

from ..IR.IRStmts import Invoke
from .CFG import CFG

if typing.TYPE_CHECKING:
    from ..CallGraph.CallGraph import CallGraph
    from ..IR.JMethod import JMethod


class ICFGEdgeKind(Enum):
    NORMAL = 0              # intraprocedural
    CALL_TO_RETURN = 1      # call site -> return site, carries the caller's local facts
    CALL = 2                # call site -> callee entry
    RETURN = 3              # callee exit -> return site


class ICFGEdge:
    kind: ICFGEdgeKind
    source: Hashable
    target: Hashable
    callSite: Optional[Invoke]          # set on CALL, RETURN and CALL_TO_RETURN edges
    callee: Optional['JMethod']         # set on CALL and RETURN edges

    def __init__(self, kind: ICFGEdgeKind, source, target, callSite: Invoke = None, callee: 'JMethod' = None):
        self.kind = kind
        self.source = source
        self.target = target
        self.callSite = callSite
        self.callee = callee

    def __repr__(self):
        return f"{self.kind.name}: {self.source} -> {self.target}"


class ICFG:
    entryMethods: List['JMethod']
    cfgs: Dict['JMethod', CFG]
    containers: Dict[Hashable, 'JMethod']
    inEdges: Dict[Hashable, List[ICFGEdge]]
    outEdges: Dict[Hashable, List[ICFGEdge]]

    def __init__(self, entryMethods: List['JMethod']):
        self.entryMethods = list(entryMethods)
        self.cfgs = {}
        self.containers = {}
        self.inEdges = defaultdict(list)
        self.outEdges = defaultdict(list)

    def addCFG(self, method: 'JMethod', cfg: CFG):
        self.cfgs[method] = cfg
        for node in cfg.getNodes():
            self.containers[node] = method

    def addEdge(self, edge: ICFGEdge):
        self.outEdges[edge.source].append(edge)
        self.inEdges[edge.target].append(edge)

    def getNodes(self) -> List[Hashable]:
        return list(self.containers)

    def getEntryOf(self, method: 'JMethod'):
        return self.cfgs[method].getEntry()

    def getExitOf(self, method: 'JMethod'):
        return self.cfgs[method].getExit()

    def getContainingMethodOf(self, node) -> 'JMethod':
        return self.containers[node]

    def getInEdgesOf(self, node) -> List[ICFGEdge]:
        return self.inEdges.get(node, [])

    def getOutEdgesOf(self, node) -> List[ICFGEdge]:
        return self.outEdges.get(node, [])

    def getSuccsOf(self, node) -> List[Hashable]:
        succs = {}
        for edge in self.getOutEdgesOf(node):
            succs[edge.target] = None
        return list(succs)

    def getPredsOf(self, node) -> List[Hashable]:
        preds = {}
        for edge in self.getInEdgesOf(node):
            preds[edge.source] = None
        return list(preds)

    def getCalleesOf(self, callSite: Invoke) -> Set['JMethod']:
        return {edge.callee for edge in self.getOutEdgesOf(callSite) if edge.kind == ICFGEdgeKind.CALL}

    @staticmethod
    def build(callgraph: 'CallGraph', cfgOf: Callable[['JMethod'], CFG] = CFG.build) -> 'ICFG':
        """Links the CFGs of all reachable methods along the edges of a
        context-insensitive call graph. A call site with resolved callees gets
        a call-to-return edge plus call and return edges per callee; one
        without callees keeps its normal edges."""
        icfg = ICFG(sorted(callgraph.getEntryMethods(), key=str))
        methods = sorted(callgraph.getReachableMethods(), key=str)
        for method in methods:
            icfg.addCFG(method, cfgOf(method))

        for method in methods:
            cfg = icfg.cfgs[method]
            for node in cfg.getNodes():
                callees = []
                if(isinstance(node, Invoke)):
                    callees = [callee for callee in sorted(callgraph.getCalleesOf(node), key=str) if callee in icfg.cfgs]
                for succ in cfg.getSuccsOf(node):
                    if(not callees):
                        icfg.addEdge(ICFGEdge(ICFGEdgeKind.NORMAL, node, succ))
                        continue
                    icfg.addEdge(ICFGEdge(ICFGEdgeKind.CALL_TO_RETURN, node, succ, callSite=node))
                    for callee in callees:
                        icfg.addEdge(ICFGEdge(ICFGEdgeKind.RETURN, icfg.getExitOf(callee), succ,
                                              callSite=node, callee=callee))
                for callee in callees:
                    icfg.addEdge(ICFGEdge(ICFGEdgeKind.CALL, node, icfg.getEntryOf(callee),
                                          callSite=node, callee=callee))
        return icfg
