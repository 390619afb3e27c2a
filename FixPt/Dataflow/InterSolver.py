import logging
from typing import Generic, Hashable, Set, TypeVar

from ..Graph.ICFG import ICFG
from .Analysis import InterDataflowAnalysis
from .Fact import DataflowResult
from .WorkListSolver import WorkList

Node = TypeVar("Node", bound=Hashable)
Fact = TypeVar("Fact")

logger = logging.getLogger(__name__)


class InterSolver(Generic[Node, Fact]):
    """Forward worklist solver over an ICFG. IN of a node is the meet, over
    its incoming edges, of the edge-transferred OUT facts of the sources."""
    analysis: InterDataflowAnalysis[Node, Fact]
    icfg: ICFG
    entries: Set[Hashable]

    def __init__(self, analysis: InterDataflowAnalysis[Node, Fact], icfg: ICFG):
        self.analysis = analysis
        self.icfg = icfg
        self.entries = set()

    def solve(self) -> DataflowResult[Node, Fact]:
        result = DataflowResult()
        self.initialize(result)
        self.doSolve(result)
        return result

    def initialize(self, result: DataflowResult[Node, Fact]):
        self.entries = {self.icfg.getEntryOf(method) for method in self.icfg.entryMethods}
        for node in self.icfg.getNodes():
            if(node in self.entries):
                result.setInFact(node, self.analysis.newBoundaryFact(node))
                result.setOutFact(node, self.analysis.newBoundaryFact(node))
            else:
                result.setInFact(node, self.analysis.newInitialFact())
                result.setOutFact(node, self.analysis.newInitialFact())

    def doSolve(self, result: DataflowResult[Node, Fact]):
        workList = WorkList(self.icfg.getNodes())
        visits = 0
        while(len(workList) > 0):
            node = workList.poll()
            visits += 1
            if(node in self.entries):
                inFact = self.analysis.newBoundaryFact(node)
            else:
                inFact = self.analysis.newInitialFact()
            for edge in self.icfg.getInEdgesOf(node):
                inFact = self.analysis.meet(inFact, self.analysis.transferEdge(edge, result.getOutFact(edge.source)))
            result.setInFact(node, inFact)
            if(self.analysis.transferNode(node, inFact, result.getOutFact(node))):
                workList.addAll(self.icfg.getSuccsOf(node))
        logger.debug("Interprocedural solving of %d nodes took %d visits", len(self.icfg.getNodes()), visits)
