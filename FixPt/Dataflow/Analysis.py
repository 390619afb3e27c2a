from typing import Generic, Hashable, TypeVar
import typing

from ..Graph.ICFG import ICFGEdge, ICFGEdgeKind
from ..IR.IRStmts import Invoke

if typing.TYPE_CHECKING:
    from ..Graph.CFG import CFG

Node = TypeVar("Node", bound=Hashable)
Fact = TypeVar("Fact")


class DataflowAnalysis(Generic[Node, Fact]):
    """The lattice and transfer functions of an intraprocedural analysis.

    The solvers only ever combine facts through meet and change them
    through transferNode, so both must depend on nothing but their inputs.
    meet has to be commutative, associative and idempotent, and must return
    a new fact rather than modify either argument.
    """

    def isForward(self) -> bool:
        raise NotImplementedError

    # Fact at the entry (forward) or the exit (backward) of the CFG
    def newBoundaryFact(self, cfg: 'CFG') -> Fact:
        raise NotImplementedError

    def newInitialFact(self) -> Fact:
        raise NotImplementedError

    def meet(self, fact1: Fact, fact2: Fact) -> Fact:
        raise NotImplementedError

    def transferNode(self, node: Node, inFact: Fact, outFact: Fact) -> bool:
        """Updates outFact from inFact (or inFact from outFact for a backward
        analysis) and returns True iff the updated fact changed."""
        raise NotImplementedError


class InterDataflowAnalysis(Generic[Node, Fact]):

    def newBoundaryFact(self, entry: Node) -> Fact:
        raise NotImplementedError

    def newInitialFact(self) -> Fact:
        raise NotImplementedError

    def meet(self, fact1: Fact, fact2: Fact) -> Fact:
        raise NotImplementedError

    def transferNode(self, node: Node, inFact: Fact, outFact: Fact) -> bool:
        raise NotImplementedError

    # Returns a new fact, out must not be modified
    def transferEdge(self, edge: ICFGEdge, out: Fact) -> Fact:
        raise NotImplementedError


class AbstractInterDataflowAnalysis(InterDataflowAnalysis[Node, Fact]):
    """Splits node transfer into call and non-call nodes and edge transfer
    by edge kind. Facts are expected to provide copy()."""

    def transferNode(self, node, inFact, outFact):
        if(isinstance(node, Invoke)):
            return self.transferCallNode(node, inFact, outFact)
        return self.transferNonCallNode(node, inFact, outFact)

    def transferCallNode(self, node: Invoke, inFact: Fact, outFact: Fact) -> bool:
        raise NotImplementedError

    def transferNonCallNode(self, node: Node, inFact: Fact, outFact: Fact) -> bool:
        raise NotImplementedError

    def transferEdge(self, edge, out):
        if(edge.kind == ICFGEdgeKind.NORMAL):
            return self.transferNormalEdge(edge, out)
        elif(edge.kind == ICFGEdgeKind.CALL_TO_RETURN):
            return self.transferCallToReturnEdge(edge, out)
        elif(edge.kind == ICFGEdgeKind.CALL):
            return self.transferCallEdge(edge, out)
        elif(edge.kind == ICFGEdgeKind.RETURN):
            return self.transferReturnEdge(edge, out)
        raise ValueError(f"Unknown ICFG edge kind {edge.kind}")

    def transferNormalEdge(self, edge: ICFGEdge, out: Fact) -> Fact:
        return out.copy()

    def transferCallToReturnEdge(self, edge: ICFGEdge, out: Fact) -> Fact:
        raise NotImplementedError

    # out is the fact after the call site
    def transferCallEdge(self, edge: ICFGEdge, callSiteOut: Fact) -> Fact:
        raise NotImplementedError

    # out is the fact at the callee's exit
    def transferReturnEdge(self, edge: ICFGEdge, returnOut: Fact) -> Fact:
        raise NotImplementedError
