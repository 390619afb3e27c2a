import unittest

from FixPt.CSPTA.Analysis import Analysis
from FixPt.CSPTA.Context import (CTX_LENGTH, ContextInsensitiveSelector, KCallSelector, KObjSelector,
                                 KTypeSelector, lastK, makeSelector)
from FixPt.Errors import AnalysisException
from FixPt.IR.IRStmts import CallKind, Invoke, LoadField, New, Return, StoreField

from Programs import ProgramBuilder, allocSites


class TestMakeSelector(unittest.TestCase):

    def testNames(self):
        self.assertIsInstance(makeSelector("ci"), ContextInsensitiveSelector)
        selector = makeSelector("1-call")
        self.assertIsInstance(selector, KCallSelector)
        self.assertEqual(selector.k, 1)
        self.assertIsInstance(makeSelector("2-obj"), KObjSelector)
        self.assertIsInstance(makeSelector(" 3-Type "), KTypeSelector)
        self.assertEqual(makeSelector("call").k, CTX_LENGTH)
        self.assertEqual(str(makeSelector("2-obj")), "2-obj")

    def testBadNames(self):
        for name in ["", "0-call", "x-call", "2-foo", "1-ci", "-obj"]:
            with self.assertRaises(AnalysisException, msg=name):
                makeSelector(name)

    def testContextLength(self):
        self.assertEqual(lastK((1, 2, 3), 2), (2, 3))
        self.assertEqual(lastK((1, 2, 3), 0), ())
        self.assertEqual(lastK((1,), 2), (1,))
        selector = KCallSelector(2)
        self.assertEqual(selector.selectHeapContext((("c1", "c2"), None), None), ("c2",))
        self.assertEqual(KCallSelector(1).selectHeapContext((("c1",), None), None), ())


class TestContextSensitivity(unittest.TestCase):
    def setUp(self):
        builder = ProgramBuilder()
        self.builder = builder
        obj = builder.object
        self.Main = builder.newClass("Main")
        self.A = builder.newClass("A")
        self.B = builder.newClass("B")
        self.Item = builder.newClass("Item")
        self.Wrapper = builder.newClass("Wrapper")
        self.main = builder.newMethod(self.Main, "main", isStatic=True)

        # static Object id(Object p) { return p; }
        self.id = builder.newMethod(self.Main, "id", [obj], obj, isStatic=True, paramNames=["p"])
        Return(self.id.getParam(0), self.id)

        # Object Wrapper.id(Object p) { return p; }
        self.wid = builder.newMethod(self.Wrapper, "id", [obj], obj, paramNames=["p"])
        Return(self.wid.getParam(0), self.wid)

        # Object Wrapper.make() { return new Item; }
        self.make = builder.newMethod(self.Wrapper, "make", returnType=obj)
        item = self.make.getVar("item", self.Item)
        self.newItem = New(item, self.Item, self.make)
        Return(item, self.make)

        self.a = self.main.getVar("a", self.A)
        self.b = self.main.getVar("b", self.B)
        self.oa = New(self.a, self.A, self.main)
        self.ob = New(self.b, self.B, self.main)

    def var(self, name):
        return self.main.getVar(name, self.builder.object)

    def staticCalls(self):
        ra, rb = self.var("ra"), self.var("rb")
        Invoke(CallKind.STATIC, self.id.ref, None, [self.a], ra, self.main)
        Invoke(CallKind.STATIC, self.id.ref, None, [self.b], rb, self.main)
        return ra, rb

    def instanceCalls(self):
        w1, w2 = self.main.getVar("w1", self.Wrapper), self.main.getVar("w2", self.Wrapper)
        New(w1, self.Wrapper, self.main)
        New(w2, self.Wrapper, self.main)
        ra, rb = self.var("ra"), self.var("rb")
        Invoke(CallKind.VIRTUAL, self.wid.ref, w1, [self.a], ra, self.main)
        Invoke(CallKind.VIRTUAL, self.wid.ref, w2, [self.b], rb, self.main)
        return ra, rb

    def analyze(self, selectorName):
        return Analysis(makeSelector(selectorName)).analyze(self.builder.build(self.main))

    def assertSeparated(self, result, ra, rb):
        self.assertEqual(allocSites(result.getVarPointsToSet(ra)), {self.oa})
        self.assertEqual(allocSites(result.getVarPointsToSet(rb)), {self.ob})

    def assertMerged(self, result, ra, rb):
        self.assertEqual(allocSites(result.getVarPointsToSet(ra)), {self.oa, self.ob})
        self.assertEqual(allocSites(result.getVarPointsToSet(rb)), {self.oa, self.ob})

    def testInsensitiveMerges(self):
        ra, rb = self.staticCalls()
        self.assertMerged(self.analyze("ci"), ra, rb)

    def testCallSiteSensitivity(self):
        ra, rb = self.staticCalls()
        result = self.analyze("1-call")
        self.assertSeparated(result, ra, rb)

        csCallGraph = result.getCSCallGraph()
        contexts = [ctx for ctx, method in csCallGraph.getReachableMethods() if method is self.id]
        self.assertEqual(len(contexts), 2)
        self.assertEqual(len(result.getCSVarsOf(self.id.getParam(0))), 2)
        callgraph = result.getCallGraph()
        self.assertEqual(len(callgraph.getCallersOf(self.id)), 2)
        self.assertEqual(callgraph.getReachableMethods(), [self.main, self.id])

    def testObjectSensitivity(self):
        ra, rb = self.instanceCalls()
        self.assertSeparated(self.analyze("1-obj"), ra, rb)
        self.assertMerged(self.analyze("ci"), ra, rb)

    def testObjectSensitivityIgnoresStaticCalls(self):
        ra, rb = self.staticCalls()
        self.assertMerged(self.analyze("1-obj"), ra, rb)

    def testTypeSensitivityMergesSameAllocator(self):
        # both wrappers are allocated in Main
        ra, rb = self.instanceCalls()
        self.assertMerged(self.analyze("1-type"), ra, rb)

    def testTypeSensitivitySeparatesAllocators(self):
        wrappers = []
        for name in ["LeftFactory", "RightFactory"]:
            factory = self.builder.newClass(name)
            make = self.builder.newMethod(factory, "make", returnType=self.Wrapper, isStatic=True)
            w = make.getVar("w", self.Wrapper)
            New(w, self.Wrapper, make)
            Return(w, make)
            wrapper = self.main.getVar(f"w{len(wrappers)}", self.Wrapper)
            Invoke(CallKind.STATIC, make.ref, None, [], wrapper, self.main)
            wrappers.append(wrapper)
        ra, rb = self.var("ra"), self.var("rb")
        Invoke(CallKind.VIRTUAL, self.wid.ref, wrappers[0], [self.a], ra, self.main)
        Invoke(CallKind.VIRTUAL, self.wid.ref, wrappers[1], [self.b], rb, self.main)

        result = self.analyze("1-type")
        self.assertSeparated(result, ra, rb)
        contexts = {ctx for ctx, method in result.getCSCallGraph().getReachableMethods() if method is self.wid}
        self.assertEqual({ctx[0].name for ctx in contexts}, {"LeftFactory", "RightFactory"})
        self.assertMerged(self.analyze("ci"), ra, rb)

    def testConstructorUnderObjectSensitivity(self):
        f = self.builder.newField(self.Wrapper, "f")
        init = self.builder.newMethod(self.Wrapper, "<init>", [self.builder.object], paramNames=["q"])
        StoreField(init.this, f, init.getParam(0), init)

        x1, x2 = self.main.getVar("x1", self.Wrapper), self.main.getVar("x2", self.Wrapper)
        z1, z2 = self.var("z1"), self.var("z2")
        New(x1, self.Wrapper, self.main)
        New(x2, self.Wrapper, self.main)
        Invoke(CallKind.SPECIAL, init.ref, x1, [self.a], None, self.main)
        Invoke(CallKind.SPECIAL, init.ref, x2, [self.b], None, self.main)
        LoadField(z1, x1, f, self.main)
        LoadField(z2, x2, f, self.main)

        result = self.analyze("1-obj")
        self.assertSeparated(result, z1, z2)
        contexts = [ctx for ctx, method in result.getCSCallGraph().getReachableMethods() if method is init]
        self.assertEqual(len(contexts), 2)
        for ptr in result.getCSVarsOf(init.this):
            self.assertEqual(len(result.getPointsToSet(ptr)), 1)
        edges = result.getCallGraph().getEdges()
        self.assertEqual({edge.kind for edge in edges}, {CallKind.SPECIAL})

        self.assertMerged(self.analyze("ci"), z1, z2)

    def testHeapContext(self):
        w1, w2 = self.main.getVar("w1", self.Wrapper), self.main.getVar("w2", self.Wrapper)
        New(w1, self.Wrapper, self.main)
        New(w2, self.Wrapper, self.main)
        i1, i2 = self.var("i1"), self.var("i2")
        Invoke(CallKind.VIRTUAL, self.make.ref, w1, [], i1, self.main)
        Invoke(CallKind.VIRTUAL, self.make.ref, w2, [], i2, self.main)

        def items(result):
            return [csObj for csObj in result.getObjects() if csObj.obj.allocSite is self.newItem]

        self.assertEqual(len(items(self.analyze("1-obj"))), 1)
        result = self.analyze("2-obj")
        self.assertEqual(len(items(result)), 2)
        self.assertEqual(allocSites(result.getVarPointsToSet(i1)), {self.newItem})
        for ptr in result.getCSVarsOf(i1):
            self.assertEqual(len(result.getPointsToSet(ptr)), 1)

    def testEntryUsesEmptyContext(self):
        result = self.analyze("2-call")
        self.assertEqual(allocSites(o.obj for o in result.getCSVarPointsToSet((), self.a)), {self.oa})
        self.assertEqual(result.getCSVarPointsToSet(("nowhere",), self.a), frozenset())
        self.assertEqual(result.getCSCallGraph().getEntryMethods(), frozenset([((), self.main)]))


if __name__ == "__main__":
    unittest.main(verbosity=2)
