import unittest

from FixPt.CallGraph.CHA import CHABuilder
from FixPt.Dataflow.Analysis import AbstractInterDataflowAnalysis
from FixPt.Dataflow.Fact import MapFact
from FixPt.Dataflow.InterSolver import InterSolver
from FixPt.Graph.ICFG import ICFG, ICFGEdgeKind
from FixPt.IR.IRStmts import CallKind, Copy, Invoke, New, Return

from Programs import ProgramBuilder


# Which classes a variable may hold an instance of, tracked across calls
class AllocTypeAnalysis(AbstractInterDataflowAnalysis):

    def newBoundaryFact(self, entry):
        return MapFact()

    def newInitialFact(self):
        return MapFact()

    def meet(self, fact1, fact2):
        merged = MapFact(fact1.map)
        for var, types in fact2.items():
            merged.update(var, (merged.get(var) or frozenset()) | types)
        return merged

    def transferNonCallNode(self, node, inFact, outFact):
        newOut = inFact.copy()
        if(isinstance(node, New)):
            newOut.update(node.target, frozenset([node.type.name]))
        elif(isinstance(node, Copy)):
            newOut.update(node.target, inFact.get(node.source) or frozenset())
        return outFact.copyFrom(newOut)

    def transferCallNode(self, node, inFact, outFact):
        newOut = inFact.copy()
        if(node.result is not None):
            newOut.remove(node.result)
        return outFact.copyFrom(newOut)

    def transferCallToReturnEdge(self, edge, out):
        return out.copy()

    def transferCallEdge(self, edge, callSiteOut):
        fact = MapFact()
        for arg, param in zip(edge.callSite.args, edge.callee.params):
            if(arg in callSiteOut):
                fact.update(param, callSiteOut.get(arg))
        return fact

    def transferReturnEdge(self, edge, returnOut):
        fact = MapFact()
        result = edge.callSite.result
        if(result is not None):
            types = frozenset()
            for retVar in edge.callee.returnVars:
                types |= returnOut.get(retVar) or frozenset()
            fact.update(result, types)
        return fact


class TestInterSolver(unittest.TestCase):
    def setUp(self):
        builder = ProgramBuilder()
        obj = builder.object
        Main = builder.newClass("Main")
        A = builder.newClass("A")
        B = builder.newClass("B")
        self.main = builder.newMethod(Main, "main", isStatic=True)
        self.id = builder.newMethod(Main, "id", [obj], obj, isStatic=True, paramNames=["p"])
        self.idReturn = Return(self.id.getParam(0), self.id)

        self.a = self.main.getVar("a", A)
        self.b = self.main.getVar("b", B)
        self.r1 = self.main.getVar("r1", obj)
        self.r2 = self.main.getVar("r2", obj)
        New(self.a, A, self.main)
        New(self.b, B, self.main)
        self.call1 = Invoke(CallKind.STATIC, self.id.ref, None, [self.a], self.r1, self.main)
        self.call2 = Invoke(CallKind.STATIC, self.id.ref, None, [self.b], self.r2, self.main)
        self.exit = Return(None, self.main)

        callgraph = CHABuilder(builder.build(self.main)).build()
        self.icfg = ICFG.build(callgraph)

    def testICFGEdges(self):
        kinds = sorted(edge.kind.name for edge in self.icfg.getOutEdgesOf(self.call1))
        self.assertEqual(kinds, ["CALL", "CALL_TO_RETURN"])
        self.assertEqual(self.icfg.getCalleesOf(self.call1), {self.id})
        self.assertEqual(self.icfg.getSuccsOf(self.call1), [self.call2, self.icfg.getEntryOf(self.id)])

        returns = [edge for edge in self.icfg.getInEdgesOf(self.call2) if edge.kind == ICFGEdgeKind.RETURN]
        self.assertEqual(len(returns), 1)
        self.assertIs(returns[0].source, self.icfg.getExitOf(self.id))
        self.assertIs(returns[0].callSite, self.call1)
        self.assertIs(self.icfg.getContainingMethodOf(self.idReturn), self.id)

    def testCallsMergeInCallee(self):
        result = InterSolver(AllocTypeAnalysis(), self.icfg).solve()

        calleeIn = result.getInFact(self.icfg.getEntryOf(self.id))
        self.assertEqual(calleeIn.get(self.id.getParam(0)), frozenset(["A", "B"]))

        atExit = result.getInFact(self.exit)
        self.assertEqual(atExit.get(self.a), frozenset(["A"]))
        self.assertEqual(atExit.get(self.b), frozenset(["B"]))
        self.assertEqual(atExit.get(self.r1), frozenset(["A", "B"]))
        self.assertEqual(atExit.get(self.r2), frozenset(["A", "B"]))
        # the caller's locals do not leak into the callee
        self.assertNotIn(self.a, calleeIn)

    def testFixpointIsStable(self):
        analysis = AllocTypeAnalysis()
        solver = InterSolver(analysis, self.icfg)
        result = solver.solve()
        for node in self.icfg.getNodes():
            inFact = analysis.newBoundaryFact(node) if node in solver.entries else analysis.newInitialFact()
            for edge in self.icfg.getInEdgesOf(node):
                inFact = analysis.meet(inFact, analysis.transferEdge(edge, result.getOutFact(edge.source)))
            self.assertEqual(inFact, result.getInFact(node))
            self.assertFalse(analysis.transferNode(node, inFact, result.getOutFact(node).copy()))


if __name__ == "__main__":
    unittest.main(verbosity=2)
