"""
Geometry helpers

Turn decoded ways and boxes into shapely geometries
"""

from typing import List, Union

from shapely.geometry import LineString, Polygon, box

from .models import Box, Way


def way_coordinates(way: Way) -> List[List[float]]:
    """
    Get way coordinates as [lon, lat] list

    Prefers embedded geometry (from 'out geom'); falls back to the
    referenced nodes. Null points of embedded geometry are skipped.
    """
    if way.geometry:
        return [[p.lon, p.lat] for p in way.geometry if p is not None]
    return [[n.lon, n.lat] for n in way.nodes]


def way_to_shape(way: Way) -> Union[Polygon, LineString]:
    """
    Build a shapely geometry for a way

    Closed ways with at least 4 coordinates become polygons, anything
    else a line string.

    Raises:
        ValueError: If the way has fewer than 2 usable coordinates
    """
    coords = way_coordinates(way)
    if len(coords) < 2:
        raise ValueError(f"Way {way.id} has {len(coords)} usable coordinates")
    if coords[0] == coords[-1] and len(coords) >= 4:
        return Polygon(coords)
    return LineString(coords)


def box_to_polygon(bounds: Box) -> Polygon:
    """Rectangle covering a bounding box, in lon/lat order"""
    return box(bounds.min.lon, bounds.min.lat, bounds.max.lon, bounds.max.lat)
