import typing

from .Context import contextStr

if typing.TYPE_CHECKING:
    from ..PTA.Objects import Obj
    from . import Context


# An abstract object qualified by its heap context
class CSObj:
    context: 'Context'
    obj: 'Obj'

    def __init__(self, context: 'Context', obj: 'Obj'):
        self.context = context
        self.obj = obj

    def __eq__(self, other):
        return isinstance(other, CSObj) and self.context == other.context and self.obj == other.obj

    def __hash__(self):
        return hash((self.context, self.obj))

    def __str__(self):
        return f"{contextStr(self.context)}{self.obj}"

    def __repr__(self):
        return self.__str__()
