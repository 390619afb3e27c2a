from collections import defaultdict
from typing import Dict, Set
import typing

from .Pointers import Pointer

if typing.TYPE_CHECKING:
    from ..CSPTA.CSObjects import CSObj


class PointToSet:
    ptrSet: Dict[Pointer, Set['CSObj']]

    def __init__(self):
        self.ptrSet = defaultdict(set)

    # return the objects that were not in the set before
    def putAll(self, pointer: Pointer, objs: Set['CSObj']) -> Set['CSObj']:
        diff = objs - self.ptrSet[pointer]
        self.ptrSet[pointer] |= diff
        return diff

    def get(self, pointer: Pointer) -> Set['CSObj']:
        if(pointer in self.ptrSet):
            return self.ptrSet[pointer]
        return set()
