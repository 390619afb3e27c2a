from collections import defaultdict
from typing import Dict, List

from ..Errors import AnalysisException
from .JClass import JClass


class ClassHierarchy:
    classes: Dict[str, JClass]
    subClasses: Dict[JClass, List[JClass]]
    subInterfaces: Dict[JClass, List[JClass]]
    implementors: Dict[JClass, List[JClass]]

    def __init__(self):
        self.classes = {}
        self.subClasses = defaultdict(list)
        self.subInterfaces = defaultdict(list)
        self.implementors = defaultdict(list)

    def addClass(self, jclass: JClass) -> JClass:
        if(jclass.name in self.classes):
            raise AnalysisException(f"Class {jclass.name} is defined twice")
        self.classes[jclass.name] = jclass

        if(jclass.superClass is not None):
            self.subClasses[jclass.superClass].append(jclass)
        for interface in jclass.interfaces:
            if(jclass.isInterface):
                self.subInterfaces[interface].append(jclass)
            else:
                self.implementors[interface].append(jclass)
        return jclass

    def getDirectSubclassesOf(self, jclass: JClass) -> List[JClass]:
        return list(self.subClasses.get(jclass, ()))

    def getDirectSubinterfacesOf(self, jclass: JClass) -> List[JClass]:
        return list(self.subInterfaces.get(jclass, ()))

    def getDirectImplementorsOf(self, jclass: JClass) -> List[JClass]:
        return list(self.implementors.get(jclass, ()))
