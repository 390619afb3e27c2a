from collections import defaultdict
from typing import Dict, Iterator, Set, Tuple

from .Pointers import Pointer


class PointerFlow:
    forward: Dict[Pointer, Set[Pointer]]

    def __init__(self):
        self.forward = defaultdict(set)

    def put(self, source: Pointer, target: Pointer) -> bool:
        if(target not in self.forward[source]):
            self.forward[source].add(target)
            return True
        else:
            return False

    def successors(self, source: Pointer) -> Set[Pointer]:
        if(source in self.forward):
            return self.forward[source]
        return set()

    def edges(self) -> Iterator[Tuple[Pointer, Pointer]]:
        for source, targets in self.forward.items():
            for target in targets:
                yield source, target

    def __len__(self):
        return sum(len(targets) for targets in self.forward.values())
