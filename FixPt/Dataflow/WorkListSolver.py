import logging
from collections import deque
from typing import Deque, Generic, Hashable, Iterable, Set, TypeVar

from ..Graph.CFG import CFG
from .Analysis import DataflowAnalysis
from .Fact import DataflowResult

Node = TypeVar("Node", bound=Hashable)
Fact = TypeVar("Fact")

logger = logging.getLogger(__name__)


class WorkList(Generic[Node]):
    """FIFO queue that holds each node at most once."""
    queue: Deque[Node]
    queued: Set[Node]

    def __init__(self, nodes: Iterable[Node] = ()):
        self.queue = deque()
        self.queued = set()
        self.addAll(nodes)

    def add(self, node: Node):
        if(node not in self.queued):
            self.queued.add(node)
            self.queue.append(node)

    def addAll(self, nodes: Iterable[Node]):
        for node in nodes:
            self.add(node)

    def poll(self) -> Node:
        node = self.queue.popleft()
        self.queued.discard(node)
        return node

    def __len__(self):
        return len(self.queue)


class WorkListSolver(Generic[Node, Fact]):
    analysis: DataflowAnalysis[Node, Fact]

    def __init__(self, analysis: DataflowAnalysis[Node, Fact]):
        self.analysis = analysis

    def solve(self, cfg: CFG[Node]) -> DataflowResult[Node, Fact]:
        if(self.analysis.isForward()):
            result = self.initializeForward(cfg)
            self.doSolveForward(cfg, result)
        else:
            result = self.initializeBackward(cfg)
            self.doSolveBackward(cfg, result)
        return result

    def initializeForward(self, cfg: CFG[Node]) -> DataflowResult[Node, Fact]:
        result = DataflowResult()
        for node in cfg.getNodes():
            result.setInFact(node, self.analysis.newInitialFact())
            result.setOutFact(node, self.analysis.newInitialFact())
        result.setInFact(cfg.getEntry(), self.analysis.newBoundaryFact(cfg))
        return result

    def initializeBackward(self, cfg: CFG[Node]) -> DataflowResult[Node, Fact]:
        result = DataflowResult()
        for node in cfg.getNodes():
            result.setInFact(node, self.analysis.newInitialFact())
            result.setOutFact(node, self.analysis.newInitialFact())
        result.setOutFact(cfg.getExit(), self.analysis.newBoundaryFact(cfg))
        return result

    def doSolveForward(self, cfg: CFG[Node], result: DataflowResult[Node, Fact]):
        workList = WorkList(cfg.getNodes())
        visits = 0
        while(len(workList) > 0):
            node = workList.poll()
            visits += 1
            # IN of the entry is the boundary fact and stays so
            if(node != cfg.getEntry()):
                inFact = self.analysis.newInitialFact()
                for pred in cfg.getPredsOf(node):
                    inFact = self.analysis.meet(inFact, result.getOutFact(pred))
                result.setInFact(node, inFact)
            if(self.analysis.transferNode(node, result.getInFact(node), result.getOutFact(node))):
                workList.addAll(cfg.getSuccsOf(node))
        logger.debug("Forward solving of %d nodes took %d visits", len(cfg), visits)

    def doSolveBackward(self, cfg: CFG[Node], result: DataflowResult[Node, Fact]):
        workList = WorkList(cfg.getNodes())
        visits = 0
        while(len(workList) > 0):
            node = workList.poll()
            visits += 1
            if(node != cfg.getExit()):
                outFact = self.analysis.newInitialFact()
                for succ in cfg.getSuccsOf(node):
                    outFact = self.analysis.meet(outFact, result.getInFact(succ))
                result.setOutFact(node, outFact)
            if(self.analysis.transferNode(node, result.getInFact(node), result.getOutFact(node))):
                workList.addAll(cfg.getPredsOf(node))
        logger.debug("Backward solving of %d nodes took %d visits", len(cfg), visits)
