"""Encoded polyline codec (5-bit groups, zig-zag sign, 1e5 fixed point)."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Coordinate

_PRECISION = 1e5
_OFFSET = 63
_CONTINUATION = 0x20
_CHUNK_MASK = 0x1F


class PolylineDecodeError(ValueError):
    pass


def _read_value(encoded: str, index: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise PolylineDecodeError(f"Truncated polyline at offset {index}")
        chunk = ord(encoded[index]) - _OFFSET
        if chunk < 0 or chunk > 0x3F:
            raise PolylineDecodeError(
                f"Invalid polyline character {encoded[index]!r} at offset {index}"
            )
        index += 1
        result |= (chunk & _CHUNK_MASK) << shift
        shift += 5
        if chunk < _CONTINUATION:
            break
    delta = ~(result >> 1) if result & 1 else result >> 1
    return delta, index


def decode_polyline(encoded: str) -> list[Coordinate]:
    """Decode an encoded polyline into coordinates.

    Raises PolylineDecodeError on malformed input instead of returning the
    points decoded so far.
    """
    points: list[Coordinate] = []
    index = 0
    lat = 0
    lng = 0
    length = len(encoded)
    while index < length:
        dlat, index = _read_value(encoded, index)
        if index >= length:
            raise PolylineDecodeError("Polyline ends with a latitude and no longitude")
        dlng, index = _read_value(encoded, index)
        lat += dlat
        lng += dlng
        latitude = lat / _PRECISION
        longitude = lng / _PRECISION
        if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            raise PolylineDecodeError(
                f"Decoded point ({latitude}, {longitude}) is outside valid range"
            )
        points.append(Coordinate(latitude, longitude))
    return points


def _write_value(value: int, out: list[str]) -> None:
    value = ~(value << 1) if value < 0 else value << 1
    while value >= _CONTINUATION:
        out.append(chr((_CONTINUATION | (value & _CHUNK_MASK)) + _OFFSET))
        value >>= 5
    out.append(chr(value + _OFFSET))


def encode_polyline(points: Iterable[Coordinate]) -> str:
    out: list[str] = []
    prev_lat = 0
    prev_lng = 0
    for point in points:
        lat = int(round(point.latitude * _PRECISION))
        lng = int(round(point.longitude * _PRECISION))
        _write_value(lat - prev_lat, out)
        _write_value(lng - prev_lng, out)
        prev_lat, prev_lng = lat, lng
    return "".join(out)


__all__ = ["PolylineDecodeError", "decode_polyline", "encode_polyline"]
