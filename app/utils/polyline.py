"""
Encoded Polyline Algorithm Format.
ref: https://developers.google.com/maps/documentation/utilities/polylinealgorithm

The Route Optimization API returns route geometry in this format, and the
nearest-neighbor path encodes its straight-line tour the same way so both
paths can be drawn by the same map layer.
"""
from typing import List, Sequence, Tuple

from app.schemas.common import Location

PRECISION = 1e5


def encode_locations(locations: Sequence[Location]) -> str:
    """Encode a sequence of Location objects in visiting order."""
    return encode_polyline([(location.lat, location.lng) for location in locations])


def encode_polyline(points: Sequence[Tuple[float, float]]) -> str:
    """
    Encode a list of (lat, lng) tuples into a polyline string.

    Args:
        points: List of (latitude, longitude) tuples.

    Returns:
        Encoded polyline string.
    """
    result = []
    prev_lat = 0
    prev_lng = 0

    for lat, lng in points:
        lat_e5 = int(round(lat * PRECISION))
        lng_e5 = int(round(lng * PRECISION))

        result.append(_encode_value(lat_e5 - prev_lat))
        result.append(_encode_value(lng_e5 - prev_lng))

        prev_lat = lat_e5
        prev_lng = lng_e5

    return "".join(result)


def decode_polyline(encoded: str) -> List[Tuple[float, float]]:
    """Decode a polyline string into (lat, lng) tuples."""
    points = []
    index = 0
    lat = 0
    lng = 0

    while index < len(encoded):
        d_lat, index = _decode_value(encoded, index)
        d_lng, index = _decode_value(encoded, index)
        lat += d_lat
        lng += d_lng
        points.append((lat / PRECISION, lng / PRECISION))

    return points


def _encode_value(value: int) -> str:
    value = value << 1
    if value < 0:
        value = ~value

    chunks = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1f)) + 63))
        value >>= 5
    chunks.append(chr(value + 63))

    return "".join(chunks)


def _decode_value(encoded: str, index: int) -> Tuple[int, int]:
    result = 0
    shift = 0
    while True:
        byte = ord(encoded[index]) - 63
        index += 1
        result |= (byte & 0x1f) << shift
        shift += 5
        if byte < 0x20:
            break

    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index
