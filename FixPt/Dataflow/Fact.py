from typing import Dict, Generic, Hashable, Iterable, Iterator, Optional, Set, TypeVar

Node = TypeVar("Node", bound=Hashable)
Fact = TypeVar("Fact")
E = TypeVar("E", bound=Hashable)
K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class DataflowResult(Generic[Node, Fact]):
    inFacts: Dict[Node, Fact]
    outFacts: Dict[Node, Fact]

    def __init__(self):
        self.inFacts = {}
        self.outFacts = {}

    def getInFact(self, node: Node) -> Fact:
        return self.inFacts.get(node)

    def setInFact(self, node: Node, fact: Fact):
        self.inFacts[node] = fact

    def getOutFact(self, node: Node) -> Fact:
        return self.outFacts.get(node)

    def setOutFact(self, node: Node, fact: Fact):
        self.outFacts[node] = fact


class SetFact(Generic[E]):
    elements: Set[E]

    def __init__(self, elements: Iterable[E] = ()):
        self.elements = set(elements)

    def add(self, e: E) -> bool:
        if(e in self.elements):
            return False
        self.elements.add(e)
        return True

    def remove(self, e: E) -> bool:
        if(e not in self.elements):
            return False
        self.elements.remove(e)
        return True

    def union(self, other: 'SetFact[E]') -> 'SetFact[E]':
        return SetFact(self.elements | other.elements)

    # Overwrites this fact with other, returns whether anything changed
    def copyFrom(self, other: 'SetFact[E]') -> bool:
        if(self.elements == other.elements):
            return False
        self.elements = set(other.elements)
        return True

    def copy(self) -> 'SetFact[E]':
        return SetFact(self.elements)

    def __contains__(self, e):
        return e in self.elements

    def __iter__(self) -> Iterator[E]:
        return iter(self.elements)

    def __len__(self):
        return len(self.elements)

    def __eq__(self, other):
        return isinstance(other, SetFact) and self.elements == other.elements

    def __repr__(self):
        return "{" + ", ".join(sorted(str(e) for e in self.elements)) + "}"


class MapFact(Generic[K, V]):
    map: Dict[K, V]

    def __init__(self, map: Dict[K, V] = None):
        self.map = dict(map) if map else {}

    def get(self, key: K) -> Optional[V]:
        return self.map.get(key)

    def update(self, key: K, value: V) -> bool:
        if(key in self.map and self.map[key] == value):
            return False
        self.map[key] = value
        return True

    def remove(self, key: K) -> bool:
        if(key not in self.map):
            return False
        del self.map[key]
        return True

    def items(self):
        return self.map.items()

    def copyFrom(self, other: 'MapFact[K, V]') -> bool:
        if(self.map == other.map):
            return False
        self.map = dict(other.map)
        return True

    def copy(self) -> 'MapFact[K, V]':
        return MapFact(self.map)

    def __contains__(self, key):
        return key in self.map

    def __len__(self):
        return len(self.map)

    def __eq__(self, other):
        return isinstance(other, MapFact) and self.map == other.map

    def __repr__(self):
        return "{" + ", ".join(sorted(f"{k}={v}" for k, v in self.map.items())) + "}"
