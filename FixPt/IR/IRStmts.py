from enum import Enum
from typing import List, Optional, Sequence, Tuple, Type as PyType
import typing

from ..Errors import AnalysisException

if typing.TYPE_CHECKING:
    from .JClass import JClass, JField
    from .JMethod import JMethod
    from .Types import Type


class Variable:
    name: str                           # variable name
    belongsTo: 'JMethod'                # method to which it belongs
    type: 'Type'                        # None if unknown
    qualified_name: str

    def __init__(self, name: str, belongsTo: 'JMethod', type: 'Type' = None):
        self.name = name
        self.belongsTo = belongsTo
        self.type = type
        self.qualified_name = f"<{belongsTo.qualified_name}>{name}"

    def __str__(self):
        return self.qualified_name

    def __repr__(self):
        return f"Variable: {self.qualified_name}"


class CallKind(Enum):
    STATIC = "static"
    SPECIAL = "special"
    VIRTUAL = "virtual"
    INTERFACE = "interface"
    DYNAMIC = "dynamic"


# The statically declared target of a call: the class named at the call site and the subsignature
class MethodRef:
    declaringClass: 'JClass'
    subsignature: str

    def __init__(self, declaringClass: 'JClass', subsignature: str):
        self.declaringClass = declaringClass
        self.subsignature = subsignature

    def __eq__(self, other):
        return (isinstance(other, MethodRef)
                and self.declaringClass == other.declaringClass
                and self.subsignature == other.subsignature)

    def __hash__(self):
        return hash((self.declaringClass, self.subsignature))

    def __str__(self):
        return f"<{self.declaringClass}: {self.subsignature}>"


class IRStmt:
    belongsTo: 'JMethod'                # method to which this statement belongs
    index: int                          # position in belongsTo.stmts

    def __init__(self, belongsTo: 'JMethod'):
        self.belongsTo = belongsTo
        belongsTo.addIR(self)

    def getDef(self) -> Optional[Variable]:
        return None

    def getUses(self) -> List[Variable]:
        return []

    def __repr__(self):
        return f"IRStmt: {str(self)}"


# target = new T
class New(IRStmt):
    target: Variable
    type: 'Type'

    def __init__(self, target: Variable, type: 'Type', belongsTo: 'JMethod'):
        super().__init__(belongsTo)
        self.target = target
        self.type = type

    def getDef(self):
        return self.target

    def __str__(self):
        return f"{self.target} = new {self.type}"


# target = source
class Copy(IRStmt):
    target: Variable
    source: Variable

    def __init__(self, target: Variable, source: Variable, belongsTo: 'JMethod'):
        super().__init__(belongsTo)
        self.target = target
        self.source = source

    def getDef(self):
        return self.target

    def getUses(self):
        return [self.source]

    def __str__(self):
        return f"{self.target} = {self.source}"


# target = base.field, or target = C.field when the field is static
class LoadField(IRStmt):
    target: Variable
    base: Optional[Variable]
    field: 'JField'

    def __init__(self, target: Variable, base: Optional[Variable], field: 'JField', belongsTo: 'JMethod'):
        if(field.isStatic != (base is None)):
            raise AnalysisException(f"Load of {field} needs {'no' if field.isStatic else 'a'} base variable")
        super().__init__(belongsTo)
        self.target = target
        self.base = base
        self.field = field

    def isStatic(self) -> bool:
        return self.field.isStatic

    def getDef(self):
        return self.target

    def getUses(self):
        return [self.base] if self.base else []

    def __str__(self):
        owner = self.base if self.base else self.field.declaringClass
        return f"{self.target} = {owner}.{self.field.name}"


# base.field = source, or C.field = source when the field is static
class StoreField(IRStmt):
    base: Optional[Variable]
    field: 'JField'
    source: Variable

    def __init__(self, base: Optional[Variable], field: 'JField', source: Variable, belongsTo: 'JMethod'):
        if(field.isStatic != (base is None)):
            raise AnalysisException(f"Store to {field} needs {'no' if field.isStatic else 'a'} base variable")
        super().__init__(belongsTo)
        self.base = base
        self.field = field
        self.source = source

    def isStatic(self) -> bool:
        return self.field.isStatic

    def getUses(self):
        return [self.base, self.source] if self.base else [self.source]

    def __str__(self):
        owner = self.base if self.base else self.field.declaringClass
        return f"{owner}.{self.field.name} = {self.source}"


# target = base[*]
class LoadArray(IRStmt):
    target: Variable
    base: Variable

    def __init__(self, target: Variable, base: Variable, belongsTo: 'JMethod'):
        super().__init__(belongsTo)
        self.target = target
        self.base = base

    def getDef(self):
        return self.target

    def getUses(self):
        return [self.base]

    def __str__(self):
        return f"{self.target} = {self.base}[*]"


# base[*] = source
class StoreArray(IRStmt):
    base: Variable
    source: Variable

    def __init__(self, base: Variable, source: Variable, belongsTo: 'JMethod'):
        super().__init__(belongsTo)
        self.base = base
        self.source = source

    def getUses(self):
        return [self.base, self.source]

    def __str__(self):
        return f"{self.base}[*] = {self.source}"


# result = receiver.m(args), receiver is None for static and dynamic calls
class Invoke(IRStmt):
    callKind: CallKind
    methodRef: MethodRef
    receiver: Optional[Variable]
    args: Tuple[Variable, ...]
    result: Optional[Variable]

    def __init__(self, callKind: CallKind, methodRef: MethodRef, receiver: Optional[Variable],
                 args: Sequence[Variable], result: Optional[Variable], belongsTo: 'JMethod'):
        if(methodRef is None):
            raise AnalysisException(f"Call in {belongsTo} has no method reference")
        if(callKind == CallKind.STATIC and receiver is not None):
            raise AnalysisException(f"Static call to {methodRef} has a receiver")
        if(callKind in (CallKind.SPECIAL, CallKind.VIRTUAL, CallKind.INTERFACE) and receiver is None):
            raise AnalysisException(f"{callKind.name.capitalize()} call to {methodRef} has no receiver")
        super().__init__(belongsTo)
        self.callKind = callKind
        self.methodRef = methodRef
        self.receiver = receiver
        self.args = tuple(args)
        self.result = result

    def isStatic(self) -> bool:
        return self.callKind == CallKind.STATIC

    def isDynamic(self) -> bool:
        return self.callKind == CallKind.DYNAMIC

    def getDef(self):
        return self.result

    def getUses(self):
        uses = [self.receiver] if self.receiver else []
        return uses + list(self.args)

    def __str__(self):
        head = f"{self.result} = " if self.result else ""
        recv = f"{self.receiver}." if self.receiver else ""
        args = ", ".join(str(arg) for arg in self.args)
        return f"{head}invoke{self.callKind.value} {recv}{self.methodRef}({args})"


class Return(IRStmt):
    value: Optional[Variable]

    def __init__(self, value: Optional[Variable], belongsTo: 'JMethod'):
        super().__init__(belongsTo)
        self.value = value

    def getUses(self):
        return [self.value] if self.value else []

    def __str__(self):
        return f"return {self.value}" if self.value else "return"


# Any statement that neither moves references nor calls, e.g. arithmetic or branching
class Nop(IRStmt):

    def __str__(self):
        return "nop"


# The closed set of statement kinds, every consumer has to handle all of them
STMT_KINDS: Tuple[PyType[IRStmt], ...] = (New, Copy, LoadField, StoreField, LoadArray, StoreArray, Invoke, Return, Nop)
