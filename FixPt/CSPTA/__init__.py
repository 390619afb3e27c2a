from typing import Hashable, Tuple

from ..IR.IRStmts import Invoke
from ..IR.JMethod import JMethod

Context = Tuple[Hashable, ...]
CSMethod = Tuple[Context, JMethod]
CSCallSite = Tuple[Context, Invoke]
