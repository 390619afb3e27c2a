from typing import List, Sequence

from ..Errors import AnalysisException
from .ClassHierarchy import ClassHierarchy
from .JMethod import JMethod


class Program:
    hierarchy: ClassHierarchy
    entryMethods: List[JMethod]

    def __init__(self, hierarchy: ClassHierarchy, entryMethods: Sequence[JMethod]):
        if(not entryMethods):
            raise AnalysisException("No entry method is provided.")
        self.hierarchy = hierarchy
        self.entryMethods = list(entryMethods)
