"""
Pydantic models for Overpass API responses
Matches the JSON and XML output of the Overpass interpreter
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from .models import ActionType, Box, ElementType, Point


# ============================================================
# Shared Types
# ============================================================

class WireBounds(BaseModel):
    minlat: float = 0.0
    minlon: float = 0.0
    maxlat: float = 0.0
    maxlon: float = 0.0

    def to_box(self) -> Box:
        return Box(
            min=Point(lat=self.minlat, lon=self.minlon),
            max=Point(lat=self.maxlat, lon=self.maxlon),
        )


class WirePoint(BaseModel):
    lat: float = 0.0
    lon: float = 0.0

    def to_point(self) -> Point:
        return Point(lat=self.lat, lon=self.lon)


class WireMember(BaseModel):
    type: ElementType
    ref: int = 0
    role: str = ""


class WireMeta(BaseModel):
    id: int = 0
    timestamp: Optional[datetime] = None
    version: int = 0
    changeset: int = 0
    user: str = ""
    uid: int = 0

    def meta_fields(self) -> Dict[str, Any]:
        """Keyword arguments shared by Node, Way and Relation"""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "version": self.version,
            "changeset": self.changeset,
            "user": self.user,
            "uid": self.uid,
        }


# ============================================================
# JSON Output ([out:json])
# ============================================================

class JsonElement(WireMeta):
    type: str = ""  # node, way, relation; other types (area, count) are skipped
    lat: float = 0.0
    lon: float = 0.0
    nodes: List[int] = Field(default_factory=list)
    members: List[WireMember] = Field(default_factory=list)
    geometry: List[Optional[WirePoint]] = Field(default_factory=list)  # out geom, null outside bbox
    bounds: Optional[WireBounds] = None
    tags: Optional[Dict[str, str]] = None


class JsonOsm3s(BaseModel):
    timestamp_osm_base: Optional[datetime] = None
    timestamp_areas_base: Optional[datetime] = None


class JsonResponse(BaseModel):
    osm3s: JsonOsm3s = Field(default_factory=JsonOsm3s)
    elements: List[JsonElement] = Field(default_factory=list)
    remark: Optional[str] = None


# ============================================================
# XML Output ([out:xml], default)
# ============================================================

class XmlTag(BaseModel):
    k: str = ""
    v: str = ""


class XmlNd(BaseModel):
    ref: int = 0
    lat: Optional[float] = None  # Only present with out geom
    lon: Optional[float] = None


class XmlElement(WireMeta):
    visible: bool = False
    tags: List[XmlTag] = Field(default_factory=list)


class XmlNode(XmlElement):
    lat: float = 0.0
    lon: float = 0.0


class XmlWay(XmlElement):
    bounds: Optional[WireBounds] = None
    nds: List[XmlNd] = Field(default_factory=list)


class XmlRelation(XmlElement):
    bounds: Optional[WireBounds] = None
    members: List[WireMember] = Field(default_factory=list)


class XmlRevision(BaseModel):
    """Content of an <old> or <new> block, or of an action itself"""
    node: Optional[XmlNode] = None
    way: Optional[XmlWay] = None
    relation: Optional[XmlRelation] = None


class XmlAction(XmlRevision):
    type: ActionType
    old: XmlRevision = Field(default_factory=XmlRevision)
    new: Optional[XmlRevision] = None


class XmlMeta(BaseModel):
    osm_base: Optional[datetime] = None
    areas: Optional[datetime] = None
