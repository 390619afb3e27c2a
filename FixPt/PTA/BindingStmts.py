from collections import defaultdict
from typing import Dict, List, Tuple
import typing

from .Pointers import Pointer

if typing.TYPE_CHECKING:
    from ..IR.IRStmts import IRStmt

# (context, statement)
CSStmt = Tuple[typing.Hashable, 'IRStmt']


# Statements waiting for the objects of a variable: instance field and array
# accesses through it, and virtual calls on it
class BindingStmts:
    bindings: Dict[Pointer, List[CSStmt]]

    def __init__(self):
        self.bindings = defaultdict(list)

    def bind(self, varPtr: Pointer, csStmt: CSStmt):
        self.bindings[varPtr].append(csStmt)

    def get(self, varPtr: Pointer) -> List[CSStmt]:
        if(varPtr in self.bindings):
            return self.bindings[varPtr]
        return []
