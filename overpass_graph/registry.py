"""
Entity registry

Per-decode identity map from (kind, id) to the single shared record
"""

from typing import Dict, Optional

from .models import Element, ElementType, Node, Relation, Way

ELEMENT_CLASSES = {
    ElementType.NODE: Node,
    ElementType.WAY: Way,
    ElementType.RELATION: Relation,
}


class EntityRegistry:
    """
    Get-or-create store for node, way and relation records

    A reference to an id that has not been defined yet creates a
    placeholder record holding only the id. When the definition arrives
    the placeholder is filled in place, so every reference taken earlier
    sees the final record. Records are never replaced in the maps.
    """

    def __init__(
        self,
        nodes: Optional[Dict[int, Node]] = None,
        ways: Optional[Dict[int, Way]] = None,
        relations: Optional[Dict[int, Relation]] = None
    ):
        self.nodes = {} if nodes is None else nodes
        self.ways = {} if ways is None else ways
        self.relations = {} if relations is None else relations
        self._maps = {
            ElementType.NODE: self.nodes,
            ElementType.WAY: self.ways,
            ElementType.RELATION: self.relations,
        }

    def get_or_create(self, kind: ElementType, element_id: int) -> Element:
        """
        Return the record for (kind, element_id), creating a placeholder if needed

        Args:
            kind: Element kind selecting the map
            element_id: OSM id within that kind

        Returns:
            The shared record stored in the registry
        """
        records = self._maps[kind]
        record = records.get(element_id)
        if record is None:
            record = ELEMENT_CLASSES[kind](id=element_id)
            records[element_id] = record
        return record

    def get_node(self, node_id: int) -> Node:
        return self.get_or_create(ElementType.NODE, node_id)

    def get_way(self, way_id: int) -> Way:
        return self.get_or_create(ElementType.WAY, way_id)

    def get_relation(self, relation_id: int) -> Relation:
        return self.get_or_create(ElementType.RELATION, relation_id)

    def define(self, fresh: Element) -> Element:
        """
        Store a fully decoded element, filling the registry's record in place

        A later definition of the same id replaces the content of an
        earlier one; the record object itself is kept.
        """
        kind = element_type_of(fresh)
        record = self.get_or_create(kind, fresh.id)
        record.overwrite(fresh)
        return record


def element_type_of(element: Element) -> ElementType:
    if isinstance(element, Node):
        return ElementType.NODE
    if isinstance(element, Way):
        return ElementType.WAY
    if isinstance(element, Relation):
        return ElementType.RELATION
    raise TypeError(f"Not an OSM element: {element!r}")
