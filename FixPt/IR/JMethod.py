from typing import Dict, List, Optional, Sequence

from .IRStmts import IRStmt, MethodRef, Return, Variable
from .JClass import JClass
from .Types import VOID, Type


class JMethod:
    declaringClass: JClass
    name: str
    qualified_name: str
    paramTypes: List[Type]
    returnType: Type
    subsignature: str                   # "<return type> <name>(<param types>)", the key of virtual dispatch
    signature: str                      # subsignature qualified with the declaring class, unique in a program
    isStatic: bool
    isAbstract: bool
    params: List[Variable]
    this: Optional[Variable]            # None for static methods
    stmts: List[IRStmt]
    localVariables: Dict[str, Variable] # a map from name to variable

    def __init__(self, declaringClass: JClass, name: str, paramTypes: Sequence[Type] = (),
                 returnType: Type = VOID, isStatic=False, isAbstract=False,
                 paramNames: Sequence[str] = None):
        self.declaringClass = declaringClass
        self.name = name
        self.qualified_name = f"{declaringClass.name}.{name}"
        self.paramTypes = list(paramTypes)
        self.returnType = returnType
        self.subsignature = f"{returnType} {name}({','.join(str(t) for t in self.paramTypes)})"
        self.signature = f"<{declaringClass.name}: {self.subsignature}>"
        self.isStatic = isStatic
        self.isAbstract = isAbstract
        self.stmts = []
        self.localVariables = {}

        if(paramNames is None):
            paramNames = [f"@param{i}" for i in range(len(self.paramTypes))]
        self.params = [self.getVar(name, type) for name, type in zip(paramNames, self.paramTypes)]
        self.this = None if isStatic else self.getVar("@this", declaringClass)
        declaringClass.addMethod(self)

    def getVar(self, name: str, type: Type = None) -> Variable:
        if(name not in self.localVariables):
            self.localVariables[name] = Variable(name, self, type)
        return self.localVariables[name]

    def addIR(self, ir: IRStmt):
        ir.index = len(self.stmts)
        self.stmts.append(ir)

    def getParam(self, i: int) -> Variable:
        return self.params[i]

    @property
    def returnVars(self) -> List[Variable]:
        return [stmt.value for stmt in self.stmts if isinstance(stmt, Return) and stmt.value]

    @property
    def ref(self) -> MethodRef:
        return MethodRef(self.declaringClass, self.subsignature)

    def __str__(self):
        return self.signature

    def __repr__(self):
        return f"JMethod: {self.signature}"
