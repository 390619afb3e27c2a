from collections import deque
import logging
from typing import Callable, Deque, Dict, Optional, Set, Tuple, Type as PyType
import typing

from ..CallGraph.CHA import resolveCallee
from ..CallGraph.CallGraph import Edge
from ..Errors import AnalysisException
from ..IR.IRStmts import (STMT_KINDS, Copy, Invoke, IRStmt, LoadArray, LoadField,
                          New, Nop, Return, StoreArray, StoreField)
from ..IR.Types import isReference
from ..PTA.BindingStmts import BindingStmts
from ..PTA.Objects import HeapModel
from ..PTA.PointToSet import PointToSet
from ..PTA.PointerFlow import PointerFlow
from ..PTA.Pointers import Pointer
from .CSCallGraph import CSCallGraph
from .CSObjects import CSObj
from .CSPointers import CSManager
from .Context import ContextInsensitiveSelector, ContextSelector
from .Result import PointerAnalysisResult

if typing.TYPE_CHECKING:
    from ..IR.Program import Program
    from . import CSCallSite, CSMethod

logger = logging.getLogger(__name__)

CSStmt = Tuple[typing.Hashable, IRStmt]
StmtProcessor = Callable[['CSMethod', IRStmt], None]
DeferredProcessor = Callable[[CSStmt, Set[CSObj]], None]


class Analysis:
    """Context-sensitive Andersen-style pointer analysis that builds the call
    graph on the fly.

    Every entry of the worklist is a pointer with objects that may flow into
    it. Statements reading or writing through a variable, and virtual calls
    on it, are bound to the variable's pointer and processed again whenever
    its points-to set grows.

    An instance analyzes one program.
    """
    selector: ContextSelector
    heapModel: HeapModel
    csManager: CSManager
    pointToSet: PointToSet
    pointerFlow: PointerFlow
    callgraph: CSCallGraph
    bindingStmts: BindingStmts
    workList: Deque[Tuple[Pointer, Set[CSObj]]]
    processors: Dict[PyType[IRStmt], StmtProcessor]
    deferredProcessors: Dict[PyType[IRStmt], DeferredProcessor]

    def __init__(self, selector: Optional[ContextSelector] = None, verbose=False):
        self.selector = selector if selector is not None else ContextInsensitiveSelector()
        self.heapModel = HeapModel()
        self.csManager = CSManager()
        self.pointToSet = PointToSet()
        self.pointerFlow = PointerFlow()
        self.callgraph = CSCallGraph()
        self.bindingStmts = BindingStmts()
        self.workList = deque()
        self.verbose = verbose

        self.processors = self.stmtProcessors()
        missing = [kind.__name__ for kind in STMT_KINDS if kind not in self.processors]
        if(missing):
            raise AnalysisException(f"No processor for statement kinds: {', '.join(missing)}")
        self.deferredProcessors = {
            LoadField: self.processInstanceLoad,
            StoreField: self.processInstanceStore,
            LoadArray: self.processArrayLoad,
            StoreArray: self.processArrayStore,
            Invoke: self.processInstanceCall,
        }

    def stmtProcessors(self) -> Dict[PyType[IRStmt], StmtProcessor]:
        return {
            New: self.processNew,
            Copy: self.processCopy,
            LoadField: self.processLoadField,
            StoreField: self.processStoreField,
            LoadArray: self.processLoadArray,
            StoreArray: self.processStoreArray,
            Invoke: self.processInvoke,
            Return: self.processNothing,
            Nop: self.processNothing,
        }

    def lookupProcessor(self, table: Dict[PyType[IRStmt], Callable], stmt: IRStmt) -> Callable:
        for kind in type(stmt).__mro__:
            if(kind in table):
                return table[kind]
        raise AnalysisException(f"No processor for statement: {stmt}")

    def analyze(self, program: 'Program') -> PointerAnalysisResult:
        self.initialize(program)

        while(len(self.workList) > 0):
            if(self.verbose):
                print(f"PTA worklist remains {len(self.workList)} to process.                \r", end="")
            pointer, pts = self.workList.popleft()
            delta = self.propagate(pointer, pts)
            if(not delta or not pointer.isVar()):
                continue
            for csStmt in self.bindingStmts.get(pointer):
                self.lookupProcessor(self.deferredProcessors, csStmt[1])(csStmt, delta)

        logger.info("PTA reaches fixpoint: %d reachable methods, %d call edges, %d pointers, %d objects",
                    len(self.callgraph.reachableMethods), len(self.callgraph),
                    len(self.csManager.pointers), len(self.csManager.csObjs))
        return PointerAnalysisResult(self.csManager, self.pointToSet, self.pointerFlow, self.callgraph)

    def initialize(self, program: 'Program'):
        ctx = self.selector.getEmptyContext()
        for entry in program.entryMethods:
            csEntry = (ctx, entry)
            self.callgraph.addEntryMethod(csEntry)
            self.addReachable(csEntry)

    def addReachable(self, csMethod: 'CSMethod'):
        if(not self.callgraph.addReachableMethod(csMethod)):
            return
        ctx, method = csMethod
        logger.debug("New reachable method: %s under %s", method, ctx)
        for stmt in method.stmts:
            self.lookupProcessor(self.processors, stmt)(csMethod, stmt)

    def addPFGEdge(self, source: Pointer, target: Pointer):
        if(self.pointerFlow.put(source, target)):
            objs = self.pointToSet.get(source)
            if(objs):
                self.workList.append((target, set(objs)))

    # return the objects newly added to pointer
    def propagate(self, pointer: Pointer, pts: Set[CSObj]) -> Set[CSObj]:
        if(len(pts) == 0):
            return set()
        delta = self.pointToSet.putAll(pointer, pts)
        if(delta):
            for succ in self.pointerFlow.successors(pointer):
                self.workList.append((succ, set(delta)))
        return delta

    # bind csStmt to the variable it reads through, and process the objects the variable has already
    def bind(self, csStmt: CSStmt, var):
        ctx, stmt = csStmt
        varPtr = self.csManager.getCSVar(ctx, var)
        self.bindingStmts.bind(varPtr, csStmt)
        objs = self.pointToSet.get(varPtr)
        if(objs):
            self.lookupProcessor(self.deferredProcessors, stmt)(csStmt, set(objs))

    def processNothing(self, csMethod: 'CSMethod', stmt: IRStmt):
        pass

    def processNew(self, csMethod: 'CSMethod', stmt: New):
        ctx, method = csMethod
        obj = self.heapModel.getObj(stmt)
        heapCtx = self.selector.selectHeapContext(csMethod, obj)
        csObj = self.csManager.getCSObj(heapCtx, obj)
        self.workList.append((self.csManager.getCSVar(ctx, stmt.target), {csObj}))

    def processCopy(self, csMethod: 'CSMethod', stmt: Copy):
        if(not isReference(stmt.target.type)):
            return
        ctx, method = csMethod
        self.addPFGEdge(self.csManager.getCSVar(ctx, stmt.source), self.csManager.getCSVar(ctx, stmt.target))

    def processLoadField(self, csMethod: 'CSMethod', stmt: LoadField):
        if(not isReference(stmt.field.type)):
            return
        ctx, method = csMethod
        if(stmt.isStatic()):
            # target <- C.field
            self.addPFGEdge(self.csManager.getStaticField(stmt.field), self.csManager.getCSVar(ctx, stmt.target))
        else:
            self.bind((ctx, stmt), stmt.base)

    def processStoreField(self, csMethod: 'CSMethod', stmt: StoreField):
        if(not isReference(stmt.field.type)):
            return
        ctx, method = csMethod
        if(stmt.isStatic()):
            # C.field <- source
            self.addPFGEdge(self.csManager.getCSVar(ctx, stmt.source), self.csManager.getStaticField(stmt.field))
        else:
            self.bind((ctx, stmt), stmt.base)

    def processLoadArray(self, csMethod: 'CSMethod', stmt: LoadArray):
        if(not isReference(stmt.target.type)):
            return
        ctx, method = csMethod
        self.bind((ctx, stmt), stmt.base)

    def processStoreArray(self, csMethod: 'CSMethod', stmt: StoreArray):
        if(not isReference(stmt.source.type)):
            return
        ctx, method = csMethod
        self.bind((ctx, stmt), stmt.base)

    def processInvoke(self, csMethod: 'CSMethod', stmt: Invoke):
        ctx, method = csMethod
        if(stmt.isStatic()):
            self.processStaticCall((ctx, stmt))
        elif(stmt.isDynamic()):
            logger.debug("Skip dynamic call: %s", stmt)
        else:
            self.bind((ctx, stmt), stmt.receiver)

    def processStaticCall(self, csCallSite: 'CSCallSite'):
        ctx, callSite = csCallSite
        callee = resolveCallee(None, callSite)
        if(callee is None):
            logger.debug("No target for %s", callSite)
            return
        calleeCtx = self.selector.selectContext(csCallSite, callee)
        self.processCallEdge(Edge(callSite.callKind, csCallSite, (calleeCtx, callee)))

    def processCallEdge(self, edge: Edge):
        if(not self.callgraph.addEdge(edge)):
            return
        ctx, callSite = edge.callSite
        calleeCtx, callee = edge.callee
        self.addReachable(edge.callee)

        for arg, param in zip(callSite.args, callee.params):
            if(isReference(param.type)):
                self.addPFGEdge(self.csManager.getCSVar(ctx, arg), self.csManager.getCSVar(calleeCtx, param))

        if(callSite.result is not None and isReference(callSite.result.type)):
            resPtr = self.csManager.getCSVar(ctx, callSite.result)
            for retVar in callee.returnVars:
                self.addPFGEdge(self.csManager.getCSVar(calleeCtx, retVar), resPtr)

    def processInstanceLoad(self, csStmt: CSStmt, objs: Set[CSObj]):
        assert(isinstance(csStmt[1], LoadField))
        ctx, stmt = csStmt
        target = self.csManager.getCSVar(ctx, stmt.target)
        for obj in objs:
            # target <- obj.field
            self.addPFGEdge(self.csManager.getInstanceField(obj, stmt.field), target)

    def processInstanceStore(self, csStmt: CSStmt, objs: Set[CSObj]):
        assert(isinstance(csStmt[1], StoreField))
        ctx, stmt = csStmt
        source = self.csManager.getCSVar(ctx, stmt.source)
        for obj in objs:
            # obj.field <- source
            self.addPFGEdge(source, self.csManager.getInstanceField(obj, stmt.field))

    def processArrayLoad(self, csStmt: CSStmt, objs: Set[CSObj]):
        assert(isinstance(csStmt[1], LoadArray))
        ctx, stmt = csStmt
        target = self.csManager.getCSVar(ctx, stmt.target)
        for obj in objs:
            self.addPFGEdge(self.csManager.getArrayIndex(obj), target)

    def processArrayStore(self, csStmt: CSStmt, objs: Set[CSObj]):
        assert(isinstance(csStmt[1], StoreArray))
        ctx, stmt = csStmt
        source = self.csManager.getCSVar(ctx, stmt.source)
        for obj in objs:
            self.addPFGEdge(source, self.csManager.getArrayIndex(obj))

    def processInstanceCall(self, csStmt: CSStmt, objs: Set[CSObj]):
        assert(isinstance(csStmt[1], Invoke))
        csCallSite: 'CSCallSite' = csStmt
        ctx, callSite = csCallSite
        for obj in objs:
            callee = resolveCallee(obj.obj.type, callSite)
            if(callee is None):
                logger.debug("No target for %s on %s", callSite, obj)
                continue
            calleeCtx = self.selector.selectContext(csCallSite, callee, obj)
            if(callee.this is not None):
                self.workList.append((self.csManager.getCSVar(calleeCtx, callee.this), {obj}))
            self.processCallEdge(Edge(callSite.callKind, csCallSite, (calleeCtx, callee)))
