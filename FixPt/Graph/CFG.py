from collections import defaultdict
from typing import Dict, Generic, Hashable, List, TypeVar
import typing

from ..IR.IRStmts import Return

if typing.TYPE_CHECKING:
    from ..IR.JMethod import JMethod

Node = TypeVar("Node", bound=Hashable)


# Synthetic entry and exit nodes of a method's CFG
class Boundary:
    kind: str
    method: 'JMethod'

    def __init__(self, kind: str, method: 'JMethod'):
        self.kind = kind
        self.method = method

    def __repr__(self):
        return f"{self.kind}<{self.method}>"


class CFG(Generic[Node]):
    method: 'JMethod'
    entry: Node
    exit: Node
    nodes: Dict[Node, None]             # ordered set
    succs: Dict[Node, List[Node]]
    preds: Dict[Node, List[Node]]

    def __init__(self, entry: Node, exit: Node, method: 'JMethod' = None):
        self.method = method
        self.entry = entry
        self.exit = exit
        self.nodes = {}
        self.succs = defaultdict(list)
        self.preds = defaultdict(list)
        self.addNode(entry)
        self.addNode(exit)

    def addNode(self, node: Node):
        self.nodes[node] = None

    def addEdge(self, source: Node, target: Node):
        self.addNode(source)
        self.addNode(target)
        if(target not in self.succs[source]):
            self.succs[source].append(target)
            self.preds[target].append(source)

    def getEntry(self) -> Node:
        return self.entry

    def getExit(self) -> Node:
        return self.exit

    def getNodes(self) -> List[Node]:
        return list(self.nodes)

    def getSuccsOf(self, node: Node) -> List[Node]:
        return self.succs.get(node, [])

    def getPredsOf(self, node: Node) -> List[Node]:
        return self.preds.get(node, [])

    def __len__(self):
        return len(self.nodes)

    @staticmethod
    def build(method: 'JMethod') -> 'CFG':
        # Statements fall through in order; a return jumps to the exit
        cfg = CFG(Boundary("Entry", method), Boundary("Exit", method), method)
        prev = cfg.entry
        for stmt in method.stmts:
            if(prev is not None):
                cfg.addEdge(prev, stmt)
            else:
                cfg.addNode(stmt)
            if(isinstance(stmt, Return)):
                cfg.addEdge(stmt, cfg.exit)
                prev = None
            else:
                prev = stmt
        if(prev is not None):
            cfg.addEdge(prev, cfg.exit)
        return cfg
