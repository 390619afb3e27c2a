from typing import Optional


class Type:
    name: str

    def __init__(self, name: str):
        self.name = name

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"Type: {self.name}"


class PrimitiveType(Type):
    pass


class ArrayType(Type):
    elementType: Type

    def __init__(self, elementType: Type):
        super().__init__(f"{elementType}[]")
        self.elementType = elementType

    def __eq__(self, other):
        return isinstance(other, ArrayType) and self.elementType == other.elementType

    def __hash__(self):
        return hash(("array", self.elementType))


INT = PrimitiveType("int")
BOOLEAN = PrimitiveType("boolean")
VOID = PrimitiveType("void")


# None stands for a variable whose type is not known, it is treated as a reference
def isReference(type: Optional[Type]) -> bool:
    return not isinstance(type, PrimitiveType)
