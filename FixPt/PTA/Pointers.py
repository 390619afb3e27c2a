from enum import Enum
from typing import Hashable, Optional
import typing

from ..CSPTA.Context import contextStr

if typing.TYPE_CHECKING:
    from ..CSPTA.CSObjects import CSObj
    from ..IR.IRStmts import Variable
    from ..IR.JClass import JField


class PtrKind(Enum):
    VAR = "var"
    STATIC_FIELD = "static-field"
    INSTANCE_FIELD = "instance-field"
    ARRAY_INDEX = "array-index"


class Pointer:
    """A node of the pointer flow graph. Which of context, var, field and base
    are set depends on kind:
        VAR             context, var
        STATIC_FIELD    field
        INSTANCE_FIELD  base, field
        ARRAY_INDEX     base
    Pointers are interned by CSManager, so identity is equality."""
    kind: PtrKind
    context: Optional[Hashable]
    var: Optional['Variable']
    field: Optional['JField']
    base: Optional['CSObj']

    def __init__(self, kind: PtrKind, context=None, var=None, field=None, base=None):
        self.kind = kind
        self.context = context
        self.var = var
        self.field = field
        self.base = base

    def isVar(self) -> bool:
        return self.kind == PtrKind.VAR

    def __str__(self):
        if(self.kind == PtrKind.VAR):
            return f"{contextStr(self.context)}{self.var}"
        elif(self.kind == PtrKind.STATIC_FIELD):
            return str(self.field)
        elif(self.kind == PtrKind.INSTANCE_FIELD):
            return f"{self.base}.{self.field.name}"
        else:
            return f"{self.base}[*]"

    def __repr__(self):
        return f"Pointer: {self}"
