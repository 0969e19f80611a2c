"""
Overpass data models

Data classes for representing OSM nodes, ways, relations and the
decoded result of an Overpass query
"""

from datetime import datetime
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, List, Optional, Union


class ElementType(Enum):
    """OSM element kinds"""
    NODE = "node"
    WAY = "way"
    RELATION = "relation"


class ActionType(Enum):
    """Actions of an augmented diff response"""
    CREATE = "create"
    MODIFY = "modify"
    DELETE = "delete"


@dataclass
class Point:
    """A single lat/lon position"""
    lat: float = 0.0
    lon: float = 0.0


@dataclass
class Box:
    """Bounding box given by its min and max corners"""
    min: Point = field(default_factory=Point)
    max: Point = field(default_factory=Point)


@dataclass
class Meta:
    """Fields common to all OSM element kinds"""
    id: int = 0
    timestamp: Optional[datetime] = None
    version: int = 0
    changeset: int = 0
    user: str = ""
    uid: int = 0
    visible: Optional[bool] = None
    tags: Optional[Dict[str, str]] = None

    def overwrite(self, other: "Meta"):
        """Copy every field of other onto self, keeping self's identity"""
        for f in fields(other):
            setattr(self, f.name, getattr(other, f.name))


@dataclass
class Node(Meta):
    """Represents an OSM node (point)"""
    lat: float = 0.0
    lon: float = 0.0


@dataclass
class Way(Meta):
    """Represents an OSM way (line or polygon)"""
    nodes: List[Node] = field(default_factory=list)
    bounds: Optional[Box] = None
    geometry: List[Optional[Point]] = field(default_factory=list)  # Embedded geometry, positional


@dataclass
class Relation(Meta):
    """Represents an OSM relation"""
    members: List["RelationMember"] = field(default_factory=list)
    bounds: Optional[Box] = None


Element = Union[Node, Way, Relation]


@dataclass(eq=False)
class RelationMember:
    """
    Role-labelled reference from a relation to a node, way or relation

    The referenced element is the shared record of the decode, so it
    reflects the element's definition even when the member was read first.
    """
    type: ElementType
    element: Element
    role: str = ""

    @property
    def ref(self) -> int:
        return self.element.id

    @property
    def node(self) -> Optional[Node]:
        return self.element if self.type is ElementType.NODE else None

    @property
    def way(self) -> Optional[Way]:
        return self.element if self.type is ElementType.WAY else None

    @property
    def relation(self) -> Optional[Relation]:
        return self.element if self.type is ElementType.RELATION else None

    def __eq__(self, other):
        # Compared by reference so relation cycles do not recurse
        if not isinstance(other, RelationMember):
            return NotImplemented
        return (self.type, self.ref, self.role) == (other.type, other.ref, other.role)

    def __repr__(self):
        return f"RelationMember(type={self.type.value!r}, ref={self.ref}, role={self.role!r})"


@dataclass
class Create:
    """Elements introduced by create actions, by kind and id"""
    nodes: Dict[int, Node] = field(default_factory=dict)
    ways: Dict[int, Way] = field(default_factory=dict)
    relations: Dict[int, Relation] = field(default_factory=dict)


@dataclass
class Modify:
    """Old and new revisions of modified elements, keyed "old" and "new" """
    nodes: Dict[int, Dict[str, Node]] = field(default_factory=dict)
    ways: Dict[int, Dict[str, Way]] = field(default_factory=dict)
    relations: Dict[int, Dict[str, Relation]] = field(default_factory=dict)


@dataclass
class Delete:
    """Last known revisions of deleted elements, by kind and id"""
    nodes: Dict[int, Node] = field(default_factory=dict)
    ways: Dict[int, Way] = field(default_factory=dict)
    relations: Dict[int, Relation] = field(default_factory=dict)


@dataclass
class Result:
    """Parsed result of an Overpass query"""
    timestamp: Optional[datetime] = None
    areas_timestamp: Optional[datetime] = None
    count: int = 0
    remark: Optional[str] = None
    nodes: Dict[int, Node] = field(default_factory=dict)
    ways: Dict[int, Way] = field(default_factory=dict)
    relations: Dict[int, Relation] = field(default_factory=dict)

    # Only set for diff responses
    old_nodes: Optional[Dict[int, Node]] = None
    old_ways: Optional[Dict[int, Way]] = None
    old_relations: Optional[Dict[int, Relation]] = None
    create: Optional[Create] = None
    modify: Optional[Modify] = None
    delete: Optional[Delete] = None

    @property
    def is_diff(self) -> bool:
        return self.old_nodes is not None
