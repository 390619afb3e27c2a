from collections import defaultdict
from typing import Dict, List, Optional, Tuple
import typing

from ..PTA.Pointers import Pointer, PtrKind
from .CSObjects import CSObj

if typing.TYPE_CHECKING:
    from ..IR.IRStmts import Variable
    from ..IR.JClass import JField
    from ..PTA.Objects import Obj
    from . import Context


class CSManager:
    """Interns pointers and context-sensitive objects, asking twice for the
    same pointer or object gives back the same instance."""
    pointers: Dict[Tuple, Pointer]
    csObjs: Dict[Tuple, CSObj]
    csVars: Dict['Variable', List[Pointer]]     # a map from variable to its pointers under all contexts

    def __init__(self):
        self.pointers = {}
        self.csObjs = {}
        self.csVars = defaultdict(list)

    def getPointer(self, kind: PtrKind, context=None, var=None, field=None, base=None) -> Pointer:
        key = (kind, context, var, field, base)
        if(key not in self.pointers):
            ptr = Pointer(kind, context, var, field, base)
            self.pointers[key] = ptr
            if(kind == PtrKind.VAR):
                self.csVars[var].append(ptr)
        return self.pointers[key]

    def lookup(self, kind: PtrKind, context=None, var=None, field=None, base=None) -> Optional[Pointer]:
        return self.pointers.get((kind, context, var, field, base))

    def getCSVar(self, context: 'Context', var: 'Variable') -> Pointer:
        return self.getPointer(PtrKind.VAR, context=context, var=var)

    def getStaticField(self, field: 'JField') -> Pointer:
        return self.getPointer(PtrKind.STATIC_FIELD, field=field)

    def getInstanceField(self, base: CSObj, field: 'JField') -> Pointer:
        return self.getPointer(PtrKind.INSTANCE_FIELD, field=field, base=base)

    def getArrayIndex(self, base: CSObj) -> Pointer:
        return self.getPointer(PtrKind.ARRAY_INDEX, base=base)

    def getCSObj(self, context: 'Context', obj: 'Obj') -> CSObj:
        key = (context, obj)
        if(key not in self.csObjs):
            self.csObjs[key] = CSObj(context, obj)
        return self.csObjs[key]

    def getCSVarsOf(self, var: 'Variable') -> List[Pointer]:
        return list(self.csVars.get(var, ()))

    def getCSObjs(self) -> List[CSObj]:
        return list(self.csObjs.values())
