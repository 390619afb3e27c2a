import logging
from collections import deque
from typing import Deque, Optional, Set
import typing

from ..IR.IRStmts import CallKind, Invoke
from ..IR.JClass import JClass
from ..IR.JMethod import JMethod
from ..IR.Types import ArrayType, Type
from .CallGraph import CallGraph, Edge

if typing.TYPE_CHECKING:
    from ..IR.Program import Program

logger = logging.getLogger(__name__)


def dispatch(jclass: JClass, subsignature: str) -> Optional[JMethod]:
    """Looks up the method that an object of class jclass runs for the given
    subsignature: the first non-abstract declaration found walking up the
    superclass chain, or None."""
    visited = set()
    while(jclass is not None and jclass not in visited):
        visited.add(jclass)
        method = jclass.getDeclaredMethod(subsignature)
        if(method is not None and not method.isAbstract):
            return method
        jclass = jclass.superClass
    return None


# the top of the superclass chain of jclass, where the methods of arrays are declared
def rootOf(jclass: JClass) -> JClass:
    visited = set()
    while(jclass.superClass is not None and jclass not in visited):
        visited.add(jclass)
        jclass = jclass.superClass
    return jclass


def resolveCallee(recvType: Optional[Type], callSite: Invoke) -> Optional[JMethod]:
    """Resolves the single target of callSite. Static and special calls
    dispatch on the declared class, virtual and interface calls on the
    runtime type of the receiver object. Arrays run the methods of the
    hierarchy root."""
    ref = callSite.methodRef
    if(callSite.callKind == CallKind.STATIC or callSite.callKind == CallKind.SPECIAL):
        return dispatch(ref.declaringClass, ref.subsignature)
    if(callSite.callKind == CallKind.VIRTUAL or callSite.callKind == CallKind.INTERFACE):
        if(isinstance(recvType, JClass)):
            return dispatch(recvType, ref.subsignature)
        if(isinstance(recvType, ArrayType)):
            return dispatch(rootOf(ref.declaringClass), ref.subsignature)
    return None


class CHABuilder:
    program: 'Program'

    def __init__(self, program: 'Program'):
        self.program = program
        self.hierarchy = program.hierarchy

    def build(self) -> CallGraph[Invoke, JMethod]:
        callgraph = CallGraph()
        workList: Deque[JMethod] = deque()
        for entry in self.program.entryMethods:
            callgraph.addEntryMethod(entry)
            workList.append(entry)

        while(len(workList) > 0):
            method = workList.popleft()
            if(not callgraph.addReachableMethod(method)):
                continue
            for callSite in callgraph.getCallSitesIn(method):
                callees = self.resolve(callSite)
                if(not callees):
                    logger.debug("No target for %s", callSite)
                for callee in callees:
                    callgraph.addEdge(Edge(callSite.callKind, callSite, callee))
                    workList.append(callee)
        logger.info("CHA call graph: %d reachable methods, %d edges",
                    len(callgraph.reachableMethods), len(callgraph))
        return callgraph

    def resolve(self, callSite: Invoke) -> Set[JMethod]:
        """Resolves the possible targets of callSite from the class hierarchy."""
        targets = set()
        ref = callSite.methodRef
        if(callSite.callKind == CallKind.STATIC or callSite.callKind == CallKind.SPECIAL):
            method = dispatch(ref.declaringClass, ref.subsignature)
            if(method is not None):
                targets.add(method)

        elif(callSite.callKind == CallKind.VIRTUAL or callSite.callKind == CallKind.INTERFACE):
            queue = deque([ref.declaringClass])
            visited = {ref.declaringClass}
            while(len(queue) > 0):
                jclass = queue.popleft()
                method = dispatch(jclass, ref.subsignature)
                if(method is not None):
                    targets.add(method)
                if(jclass.isInterface):
                    subtypes = (self.hierarchy.getDirectSubinterfacesOf(jclass)
                                + self.hierarchy.getDirectImplementorsOf(jclass))
                else:
                    subtypes = self.hierarchy.getDirectSubclassesOf(jclass)
                for subtype in subtypes:
                    if(subtype not in visited):
                        visited.add(subtype)
                        queue.append(subtype)
        return targets
