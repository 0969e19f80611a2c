"""
XML response parser

Decodes [out:xml] Overpass responses, both plain snapshots and augmented
diffs (adiff) made of create/modify/delete actions
"""

from typing import Any, Dict, List, Optional

import lxml.etree
from pydantic import ValidationError
from loguru import logger

from .exceptions import DecodeError
from .models import ActionType, Create, Delete, Modify, Node, Point, Relation, RelationMember, Result, Way
from .registry import EntityRegistry
from .wire import XmlAction, XmlMeta, XmlNode, XmlRelation, XmlRevision, XmlWay


def _attributes(el: lxml.etree._Element) -> Dict[str, Any]:
    data: Dict[str, Any] = dict(el.attrib)
    data["tags"] = [dict(tag.attrib) for tag in el.findall("tag")]
    return data


def read_node(el: lxml.etree._Element) -> XmlNode:
    return XmlNode.model_validate(_attributes(el))


def read_way(el: lxml.etree._Element) -> XmlWay:
    data = _attributes(el)
    data["nds"] = [dict(nd.attrib) for nd in el.findall("nd")]
    bounds = el.find("bounds")
    if bounds is not None:
        data["bounds"] = dict(bounds.attrib)
    return XmlWay.model_validate(data)


def read_relation(el: lxml.etree._Element) -> XmlRelation:
    data = _attributes(el)
    data["members"] = [dict(member.attrib) for member in el.findall("member")]
    bounds = el.find("bounds")
    if bounds is not None:
        data["bounds"] = dict(bounds.attrib)
    return XmlRelation.model_validate(data)


def read_revision(el: Optional[lxml.etree._Element]) -> Dict[str, Any]:
    """Collect the node, way and relation directly under el"""
    revision: Dict[str, Any] = {}
    if el is None:
        return revision
    node = el.find("node")
    if node is not None:
        revision["node"] = read_node(node)
    way = el.find("way")
    if way is not None:
        revision["way"] = read_way(way)
    relation = el.find("relation")
    if relation is not None:
        revision["relation"] = read_relation(relation)
    return revision


def read_action(el: lxml.etree._Element) -> XmlAction:
    data = read_revision(el)
    data["type"] = el.get("type")
    data["old"] = read_revision(el.find("old"))
    new = el.find("new")
    if new is not None:
        data["new"] = read_revision(new)
    return XmlAction.model_validate(data)


class XmlResponseParser:
    """
    Parses XML responses into a linked Result

    References from ways and relations always resolve against the
    current-state maps; the old-state maps only receive the elements of
    <old> blocks themselves.
    """

    @staticmethod
    def parse(body: bytes) -> Result:
        """
        Parse an XML response body

        Args:
            body: Raw response bytes

        Returns:
            Result; diff fields are populated when the document holds actions

        Raises:
            DecodeError: If the body is not XML or not an Overpass document
        """
        try:
            parser = lxml.etree.XMLParser(resolve_entities=False, no_network=True)
            root = lxml.etree.fromstring(body, parser=parser)
        except (lxml.etree.XMLSyntaxError, ValueError) as e:
            raise DecodeError(str(e), e) from e

        try:
            meta_el = root.find("meta")
            meta = XmlMeta.model_validate(dict(meta_el.attrib) if meta_el is not None else {})
            result = Result(timestamp=meta.osm_base, areas_timestamp=meta.areas)
            remark = root.findtext("remark")
            if remark is not None:
                result.remark = remark.strip()

            actions = root.findall("action")
            if actions:
                XmlResponseParser._parse_diff(actions, result)
            else:
                XmlResponseParser._parse_snapshot(root, result)
        except ValidationError as e:
            raise DecodeError(f"unexpected response structure: {e}", e) from e
        return result

    @staticmethod
    def _parse_snapshot(root: lxml.etree._Element, result: Result):
        nodes = [read_node(el) for el in root.findall("node")]
        ways = [read_way(el) for el in root.findall("way")]
        relations = [read_relation(el) for el in root.findall("relation")]
        result.count = len(nodes) + len(ways) + len(relations)

        registry = EntityRegistry(result.nodes, result.ways, result.relations)
        for node in nodes:
            registry.define(build_node(node))
        for way in ways:
            registry.define(build_way(way, registry))
        for relation in relations:
            registry.define(build_relation(relation, registry))

        logger.debug(f"Decoded XML snapshot: {len(result.nodes)} nodes, "
                     f"{len(result.ways)} ways, {len(result.relations)} relations")

    @staticmethod
    def _parse_diff(action_elements: List[lxml.etree._Element], result: Result):
        actions = [read_action(el) for el in action_elements]
        result.count = len(actions)
        result.old_nodes = {}
        result.old_ways = {}
        result.old_relations = {}

        current = EntityRegistry(result.nodes, result.ways, result.relations)
        old = EntityRegistry(result.old_nodes, result.old_ways, result.old_relations)

        for action in actions:
            if action.type is ActionType.CREATE:
                if result.create is None:
                    result.create = Create()
                XmlResponseParser._apply_create(action, result.create, current)
            elif action.type is ActionType.MODIFY:
                if result.modify is None:
                    result.modify = Modify()
                XmlResponseParser._apply_modify(action, result.modify, current, old)
            elif action.type is ActionType.DELETE:
                if result.delete is None:
                    result.delete = Delete()
                XmlResponseParser._apply_delete(action, result.delete, current, old)

        logger.debug(f"Decoded XML diff: {len(actions)} actions, "
                     f"{len(result.nodes)} current / {len(result.old_nodes)} old nodes")

    @staticmethod
    def _apply_create(action: XmlAction, create: Create, current: EntityRegistry):
        if action.node is not None:
            create.nodes[action.node.id] = current.define(build_node(action.node))
        if action.way is not None:
            create.ways[action.way.id] = current.define(build_way(action.way, current))
        if action.relation is not None:
            create.relations[action.relation.id] = current.define(build_relation(action.relation, current))

    @staticmethod
    def _apply_modify(action: XmlAction, modify: Modify, current: EntityRegistry, old: EntityRegistry):
        old_side = action.old
        new_side = action.new or XmlRevision()

        if old_side.node is not None:
            modify.nodes[old_side.node.id] = {"old": old.define(build_node(old_side.node))}
        if new_side.node is not None:
            entry = _modify_entry(modify.nodes, new_side.node.id, "node")
            entry["new"] = current.define(build_node(new_side.node))

        if old_side.way is not None:
            modify.ways[old_side.way.id] = {"old": old.define(build_way(old_side.way, current))}
        if new_side.way is not None:
            entry = _modify_entry(modify.ways, new_side.way.id, "way")
            entry["new"] = current.define(build_way(new_side.way, current))

        if old_side.relation is not None:
            modify.relations[old_side.relation.id] = {
                "old": old.define(build_relation(old_side.relation, current))
            }
        if new_side.relation is not None:
            if old_side.relation is None:
                raise DecodeError(
                    f"modify action has a new relation {new_side.relation.id} without an old revision"
                )
            # Filed under the old relation's id, even when the two ids differ
            entry = _modify_entry(modify.relations, old_side.relation.id, "relation")
            entry["new"] = current.define(build_relation(new_side.relation, current))

    @staticmethod
    def _apply_delete(action: XmlAction, delete: Delete, current: EntityRegistry, old: EntityRegistry):
        old_side = action.old

        if old_side.node is not None:
            delete.nodes[old_side.node.id] = old.define(build_node(old_side.node))
        if old_side.way is not None:
            delete.ways[old_side.way.id] = old.define(build_way(old_side.way, current))
        if old_side.relation is not None:
            delete.relations[old_side.relation.id] = old.define(build_relation(old_side.relation, current))

        # The new revision of a delete is a tombstone; only its visibility is kept
        if action.new is None:
            return
        for kind, records, tombstone in (
            ("node", delete.nodes, action.new.node),
            ("way", delete.ways, action.new.way),
            ("relation", delete.relations, action.new.relation),
        ):
            if tombstone is None:
                continue
            record = records.get(tombstone.id)
            if record is None:
                raise DecodeError(f"delete action has a new {kind} {tombstone.id} without an old revision")
            record.visible = tombstone.visible


def _modify_entry(entries: Dict[int, Dict[str, Any]], element_id: int, kind: str) -> Dict[str, Any]:
    entry = entries.get(element_id)
    if entry is None:
        raise DecodeError(f"modify action has a new {kind} {element_id} without an old revision")
    return entry


def _tags(element) -> Optional[Dict[str, str]]:
    if not element.tags:
        return None
    return {tag.k: tag.v for tag in element.tags}


def build_node(element: XmlNode) -> Node:
    return Node(
        **element.meta_fields(),
        tags=_tags(element),
        lat=element.lat,
        lon=element.lon,
    )


def build_way(element: XmlWay, refs: EntityRegistry) -> Way:
    geometry: List[Optional[Point]] = []
    if any(nd.lat is not None and nd.lon is not None for nd in element.nds):
        geometry = [
            Point(lat=nd.lat, lon=nd.lon) if nd.lat is not None and nd.lon is not None else None
            for nd in element.nds
        ]
    return Way(
        **element.meta_fields(),
        tags=_tags(element),
        nodes=[refs.get_node(nd.ref) for nd in element.nds],
        bounds=element.bounds.to_box() if element.bounds is not None else None,
        geometry=geometry,
    )


def build_relation(element: XmlRelation, refs: EntityRegistry) -> Relation:
    members = [
        RelationMember(
            type=member.type,
            element=refs.get_or_create(member.type, member.ref),
            role=member.role,
        )
        for member in element.members
    ]
    return Relation(
        **element.meta_fields(),
        tags=_tags(element),
        members=members,
        bounds=element.bounds.to_box() if element.bounds is not None else None,
    )
