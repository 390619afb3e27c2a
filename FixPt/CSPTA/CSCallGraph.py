from ..CallGraph.CallGraph import CallGraph, Edge
from ..IR.IRStmts import Invoke
from ..IR.JMethod import JMethod
from . import CSCallSite, CSMethod


class CSCallGraph(CallGraph[CSCallSite, CSMethod]):

    def getContainerOf(self, csCallSite: CSCallSite) -> CSMethod:
        ctx, callSite = csCallSite
        return (ctx, callSite.belongsTo)

    def getCallSitesIn(self, csMethod: CSMethod):
        ctx, method = csMethod
        return [(ctx, callSite) for callSite in super().getCallSitesIn(method)]

    def plainCallSite(self, csCallSite: CSCallSite) -> Invoke:
        return csCallSite[1]

    def plainMethod(self, csMethod: CSMethod) -> JMethod:
        return csMethod[1]

    def toContextInsensitive(self) -> CallGraph[Invoke, JMethod]:
        callgraph = CallGraph()
        for ctx, entry in self.entryMethods:
            callgraph.addEntryMethod(entry)
        for ctx, method in self.reachableMethods:
            callgraph.addReachableMethod(method)
        for edge in self.edges:
            callgraph.addEdge(Edge(edge.kind, self.plainCallSite(edge.callSite), self.plainMethod(edge.callee)))
        return callgraph
