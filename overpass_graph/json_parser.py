"""
JSON response parser

Decodes [out:json] Overpass responses into a linked Result
"""

import json
from pydantic import ValidationError
from loguru import logger

from .exceptions import DecodeError
from .models import ElementType, Node, Relation, RelationMember, Result, Way
from .registry import EntityRegistry
from .wire import JsonElement, JsonResponse


class JsonResponseParser:
    """Parses the flat element array of a JSON response"""

    @staticmethod
    def parse(body: bytes) -> Result:
        """
        Parse a JSON response body

        Handles both 'out body' (node references) and 'out geom' (embedded
        geometry) way formats

        Args:
            body: Raw response bytes

        Returns:
            Result with every element linked through one registry

        Raises:
            DecodeError: If the body is not JSON or not an Overpass document
        """
        try:
            data = json.loads(body)
        except ValueError as e:
            raise DecodeError(str(e), e) from e
        try:
            response = JsonResponse.model_validate(data)
        except ValidationError as e:
            raise DecodeError(f"unexpected response structure: {e}", e) from e

        result = Result(
            timestamp=response.osm3s.timestamp_osm_base,
            areas_timestamp=response.osm3s.timestamp_areas_base,
            count=len(response.elements),
            remark=response.remark,
        )
        registry = EntityRegistry(result.nodes, result.ways, result.relations)

        for element in response.elements:
            if element.type == ElementType.NODE.value:
                registry.define(JsonResponseParser._node(element))
            elif element.type == ElementType.WAY.value:
                registry.define(JsonResponseParser._way(element, registry))
            elif element.type == ElementType.RELATION.value:
                registry.define(JsonResponseParser._relation(element, registry))
            else:
                logger.debug(f"Skipping element of type {element.type!r}")

        logger.debug(f"Decoded JSON response: {len(result.nodes)} nodes, "
                     f"{len(result.ways)} ways, {len(result.relations)} relations")
        return result

    @staticmethod
    def _node(element: JsonElement) -> Node:
        return Node(
            **element.meta_fields(),
            tags=element.tags,
            lat=element.lat,
            lon=element.lon,
        )

    @staticmethod
    def _way(element: JsonElement, registry: EntityRegistry) -> Way:
        return Way(
            **element.meta_fields(),
            tags=element.tags,
            nodes=[registry.get_node(node_id) for node_id in element.nodes],
            bounds=element.bounds.to_box() if element.bounds is not None else None,
            geometry=[point.to_point() if point is not None else None for point in element.geometry],
        )

    @staticmethod
    def _relation(element: JsonElement, registry: EntityRegistry) -> Relation:
        members = [
            RelationMember(
                type=member.type,
                element=registry.get_or_create(member.type, member.ref),
                role=member.role,
            )
            for member in element.members
        ]
        return Relation(
            **element.meta_fields(),
            tags=element.tags,
            members=members,
            bounds=element.bounds.to_box() if element.bounds is not None else None,
        )
