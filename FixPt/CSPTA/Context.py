import typing
from typing import Optional

from ..Errors import AnalysisException
from ..IR.IRStmts import Invoke
from ..IR.JClass import JClass

if typing.TYPE_CHECKING:
    from ..IR.JMethod import JMethod
    from ..PTA.Objects import Obj
    from . import CSCallSite, CSMethod, Context
    from .CSObjects import CSObj

CTX_LENGTH = 2

# A context is a tuple of elements, the newest is placed at the end, ctx[0] is the oldest.
# When a context is full, the oldest elements are dropped.
# Elements are call sites (k-call), allocated objects (k-obj) or classes (k-type).


def emptyContext() -> 'Context':
    return ()


def lastK(ctx: 'Context', k: int) -> 'Context':
    if(k <= 0):
        return ()
    return tuple(ctx[-k:])


def contextStr(ctx: 'Context') -> str:
    if(not ctx):
        return "[]"
    elements = []
    for e in ctx:
        if(isinstance(e, Invoke)):
            elements.append(f"{e.belongsTo.qualified_name}-{e.index}")
        else:
            elements.append(str(e))
    return f"[{', '.join(elements)}]"


class ContextSelector:
    """Decides the contexts of callees and of newly allocated objects.
    Heap contexts are one element shorter than method contexts."""
    name: str
    k: int

    def __init__(self, k: int = CTX_LENGTH):
        self.k = k

    def getEmptyContext(self) -> 'Context':
        return emptyContext()

    # recvObj is None for static and special calls
    def selectContext(self, csCallSite: 'CSCallSite', callee: 'JMethod', recvObj: Optional['CSObj'] = None) -> 'Context':
        raise NotImplementedError

    def selectHeapContext(self, csMethod: 'CSMethod', obj: 'Obj') -> 'Context':
        ctx, _ = csMethod
        return lastK(ctx, self.k - 1)

    def __str__(self):
        return f"{self.k}-{self.name}"


class ContextInsensitiveSelector(ContextSelector):
    name = "ci"

    def __init__(self):
        super().__init__(0)

    def selectContext(self, csCallSite, callee, recvObj=None):
        return emptyContext()

    def selectHeapContext(self, csMethod, obj):
        return emptyContext()

    def __str__(self):
        return self.name


# k-callsite
class KCallSelector(ContextSelector):
    name = "call"

    def selectContext(self, csCallSite, callee, recvObj=None):
        ctx, callSite = csCallSite
        return lastK((*ctx, callSite), self.k)


# k-object, static calls keep the context of the caller
class KObjSelector(ContextSelector):
    name = "obj"

    def selectContext(self, csCallSite, callee, recvObj=None):
        if(recvObj is None):
            return csCallSite[0]
        return lastK((*recvObj.context, recvObj.obj), self.k)


# k-type, the element of a receiver is the class declaring the method that allocated it
class KTypeSelector(ContextSelector):
    name = "type"

    def selectContext(self, csCallSite, callee, recvObj=None):
        if(recvObj is None):
            return csCallSite[0]
        jclass: JClass = recvObj.obj.containerMethod.declaringClass
        return lastK((*recvObj.context, jclass), self.k)


SELECTORS = {
    "call": KCallSelector,
    "obj": KObjSelector,
    "type": KTypeSelector,
}


def makeSelector(name: str) -> ContextSelector:
    """Builds a selector from its name: "ci" or "<k>-call", "<k>-obj",
    "<k>-type" with k >= 1, e.g. "2-obj". The k may be omitted ("call") to
    use CTX_LENGTH."""
    name = name.strip().lower()
    if(name in ("ci", "insensitive", "context-insensitive")):
        return ContextInsensitiveSelector()

    k, sep, kind = name.rpartition("-")
    if(not sep):
        k, kind = str(CTX_LENGTH), name
    if(kind not in SELECTORS or not k.isdigit() or int(k) < 1):
        raise AnalysisException(f"Unknown context selector: {name}")
    return SELECTORS[kind](int(k))
