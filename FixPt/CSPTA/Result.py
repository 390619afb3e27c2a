from types import MappingProxyType
from typing import FrozenSet, List, Mapping, Optional, Tuple
import typing

from ..CallGraph.CallGraph import CallGraph
from ..PTA.PointToSet import PointToSet
from ..PTA.PointerFlow import PointerFlow
from ..PTA.Pointers import Pointer, PtrKind
from .CSCallGraph import CSCallGraph
from .CSObjects import CSObj
from .CSPointers import CSManager

if typing.TYPE_CHECKING:
    from ..IR.IRStmts import Variable
    from ..IR.JClass import JField
    from ..PTA.Objects import Obj
    from . import Context


class PointerAnalysisResult:
    """Read-only view on the fixpoint of a pointer analysis. Sets are handed
    out as frozensets; querying a pointer the analysis never created gives an
    empty set."""
    csManager: CSManager
    pointToSet: PointToSet
    pointerFlow: PointerFlow
    csCallGraph: CSCallGraph
    ciCallGraph: Optional[CallGraph]

    def __init__(self, csManager: CSManager, pointToSet: PointToSet, pointerFlow: PointerFlow, csCallGraph: CSCallGraph):
        self.csManager = csManager
        self.pointToSet = pointToSet
        self.pointerFlow = pointerFlow
        self.csCallGraph = csCallGraph
        self.ciCallGraph = None

    def getPointsToSet(self, pointer: Optional[Pointer]) -> FrozenSet[CSObj]:
        if(pointer is None):
            return frozenset()
        return frozenset(self.pointToSet.get(pointer))

    def getCSVarPointsToSet(self, context: 'Context', var: 'Variable') -> FrozenSet[CSObj]:
        return self.getPointsToSet(self.csManager.lookup(PtrKind.VAR, context=context, var=var))

    # union over all contexts of var, with heap contexts dropped
    def getVarPointsToSet(self, var: 'Variable') -> FrozenSet['Obj']:
        objs = set()
        for ptr in self.csManager.getCSVarsOf(var):
            objs |= {csObj.obj for csObj in self.pointToSet.get(ptr)}
        return frozenset(objs)

    def getStaticFieldPointsToSet(self, field: 'JField') -> FrozenSet[CSObj]:
        return self.getPointsToSet(self.csManager.lookup(PtrKind.STATIC_FIELD, field=field))

    def getInstanceFieldPointsToSet(self, base: CSObj, field: 'JField') -> FrozenSet[CSObj]:
        return self.getPointsToSet(self.csManager.lookup(PtrKind.INSTANCE_FIELD, field=field, base=base))

    def getArrayIndexPointsToSet(self, base: CSObj) -> FrozenSet[CSObj]:
        return self.getPointsToSet(self.csManager.lookup(PtrKind.ARRAY_INDEX, base=base))

    def getCSVarsOf(self, var: 'Variable') -> List[Pointer]:
        return self.csManager.getCSVarsOf(var)

    def getObjects(self) -> List[CSObj]:
        return self.csManager.getCSObjs()

    def getPointsToMap(self) -> Mapping[Pointer, FrozenSet[CSObj]]:
        return MappingProxyType({ptr: frozenset(objs) for ptr, objs in self.pointToSet.ptrSet.items()})

    def getPointerFlowEdges(self) -> List[Tuple[Pointer, Pointer]]:
        return list(self.pointerFlow.edges())

    def getCSCallGraph(self) -> CSCallGraph:
        return self.csCallGraph

    def getCallGraph(self) -> CallGraph:
        if(self.ciCallGraph is None):
            self.ciCallGraph = self.csCallGraph.toContextInsensitive()
        return self.ciCallGraph
