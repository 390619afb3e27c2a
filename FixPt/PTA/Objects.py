from typing import Dict
import typing

from ..IR.IRStmts import New

if typing.TYPE_CHECKING:
    from ..IR.JMethod import JMethod
    from ..IR.Types import Type


# One abstract object per allocation site
class Obj:
    allocSite: New
    type: 'Type'
    containerMethod: 'JMethod'

    def __init__(self, allocSite: New):
        self.allocSite = allocSite
        self.type = allocSite.type
        self.containerMethod = allocSite.belongsTo

    def __str__(self):
        return f"NewObj{{{self.containerMethod}[{self.allocSite.index}]{self.allocSite}}}"

    def __repr__(self):
        return self.__str__()


class HeapModel:
    objs: Dict[New, Obj]

    def __init__(self):
        self.objs = {}

    def getObj(self, allocSite: New) -> Obj:
        if(allocSite not in self.objs):
            self.objs[allocSite] = Obj(allocSite)
        return self.objs[allocSite]
