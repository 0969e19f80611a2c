"""
Overpass API client

Modular client with separate components for:
- API client: Overpass API communication
- Models: Data structures (Node, Way, Relation, Result)
- Registry: Shared records for forward references
- Parsers: JSON and XML response decoding, including augmented diffs
- Geometry: Shapely conversion of decoded ways
"""

from .models import (
    ActionType,
    Box,
    Create,
    Delete,
    ElementType,
    Meta,
    Modify,
    Node,
    Point,
    Relation,
    RelationMember,
    Result,
    Way,
)
from .exceptions import DecodeError, OverpassError, ServerError, TransportError
from .parser import decode, detect_output_format
from .api_client import DEFAULT_CLIENT, Client, query

__all__ = [
    "ActionType",
    "Box",
    "Create",
    "Delete",
    "ElementType",
    "Meta",
    "Modify",
    "Node",
    "Point",
    "Relation",
    "RelationMember",
    "Result",
    "Way",
    "DecodeError",
    "OverpassError",
    "ServerError",
    "TransportError",
    "decode",
    "detect_output_format",
    "DEFAULT_CLIENT",
    "Client",
    "query",
]
