from typing import Dict, List, Optional, Sequence
import typing

from .Types import Type

if typing.TYPE_CHECKING:
    from .JMethod import JMethod


class JClass(Type):
    superClass: Optional['JClass']
    interfaces: List['JClass']                  # directly implemented (or, for an interface, extended) interfaces
    isInterface: bool
    isAbstract: bool
    declaredMethods: Dict[str, 'JMethod']       # subsignature -> method
    declaredFields: Dict[str, 'JField']

    def __init__(self, name: str, superClass: 'JClass' = None, interfaces: Sequence['JClass'] = (),
                 isInterface=False, isAbstract=False):
        super().__init__(name)
        self.superClass = superClass
        self.interfaces = list(interfaces)
        self.isInterface = isInterface
        self.isAbstract = isAbstract or isInterface
        self.declaredMethods = {}
        self.declaredFields = {}

    def addMethod(self, method: 'JMethod'):
        self.declaredMethods[method.subsignature] = method

    def getDeclaredMethod(self, subsignature: str) -> Optional['JMethod']:
        return self.declaredMethods.get(subsignature)

    def addField(self, field: 'JField'):
        self.declaredFields[field.name] = field

    def __repr__(self):
        return f"JClass: {self.name}"


class JField:
    declaringClass: JClass
    name: str
    type: Type
    isStatic: bool

    def __init__(self, declaringClass: JClass, name: str, type: Type = None, isStatic=False):
        self.declaringClass = declaringClass
        self.name = name
        self.type = type
        self.isStatic = isStatic
        declaringClass.addField(self)

    def __str__(self):
        return f"<{self.declaringClass}: {self.type} {self.name}>"

    def __repr__(self):
        return f"JField: {self}"
