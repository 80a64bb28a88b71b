"""Codecs for geometries (mxGeometry) and points (mxPoint)."""

from __future__ import annotations

from extradiagram.model import Geometry, Point
from extradiagram.object_codec import ObjectCodec


def create_point_codec() -> ObjectCodec:
    return ObjectCodec(Point(), name="mxPoint")


def create_geometry_codec() -> ObjectCodec:
    return ObjectCodec(
        Geometry(),
        name="mxGeometry",
        mapping={"source_point": "sourcePoint", "target_point": "targetPoint"},
    )
