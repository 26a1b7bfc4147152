"""Coordinate parsing, validation and cache-key normalization."""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

# Two decimals is a grid of roughly 1.1 km at the equator.
COORDINATE_QUANTUM = Decimal("0.01")


class CoordinateValidationError(ValueError):
    """Base exception for rejected coordinate input."""


class InvalidCoordinateFormatError(CoordinateValidationError):
    """Raised when latitude or longitude is not a finite number."""

    def __init__(self) -> None:
        super().__init__("Invalid coordinates format")


class LatitudeOutOfRangeError(CoordinateValidationError):
    """Raised when latitude is outside [-90, 90]."""

    def __init__(self) -> None:
        super().__init__("Latitude must be between -90 and 90")


class LongitudeOutOfRangeError(CoordinateValidationError):
    """Raised when longitude is outside [-180, 180]."""

    def __init__(self) -> None:
        super().__init__("Longitude must be between -180 and 180")


@dataclass(frozen=True)
class Coordinate:
    """Geographic point in decimal degrees."""

    latitude: float
    longitude: float


def _parse_number(raw: object) -> float:
    if raw is None:
        raise InvalidCoordinateFormatError()
    text = str(raw).strip()
    # float() also accepts digit separators such as "1_0"
    if "_" in text:
        raise InvalidCoordinateFormatError()
    try:
        value = float(text)
    except ValueError as e:
        raise InvalidCoordinateFormatError() from e
    if not math.isfinite(value):
        raise InvalidCoordinateFormatError()
    return value


def validate_coordinates(lat_raw: object, lon_raw: object) -> Coordinate:
    """Parse raw query values into a validated coordinate.

    Raises:
        InvalidCoordinateFormatError: If either value is missing or not a finite number
        LatitudeOutOfRangeError: If latitude is outside [-90, 90]
        LongitudeOutOfRangeError: If longitude is outside [-180, 180]
    """
    latitude = _parse_number(lat_raw)
    longitude = _parse_number(lon_raw)

    if not -90 <= latitude <= 90:
        raise LatitudeOutOfRangeError()
    if not -180 <= longitude <= 180:
        raise LongitudeOutOfRangeError()

    return Coordinate(latitude=latitude, longitude=longitude)


def _round_value(value: float) -> float:
    """Round to two decimals, half away from zero.

    Rounding works on the shortest decimal form of the float, so 1.005
    becomes 1.01 rather than falling victim to its binary representation.
    """
    rounded = Decimal(repr(value)).quantize(COORDINATE_QUANTUM, rounding=ROUND_HALF_UP)
    # Collapse -0.0 so both sides of the meridian/equator share a key
    return float(rounded) + 0.0


def round_coordinate(coord: Coordinate) -> Coordinate:
    """Snap a coordinate to the two-decimal cache grid."""
    return Coordinate(
        latitude=_round_value(coord.latitude),
        longitude=_round_value(coord.longitude),
    )


def format_coordinate(coord: Coordinate) -> str:
    """Format a rounded coordinate as the upstream location segment."""
    return f"{coord.latitude:.2f},{coord.longitude:.2f}"


def cache_key(coord: Coordinate) -> str:
    """Create cache key from rounded coordinates."""
    return f"weather:{coord.latitude:.2f}:{coord.longitude:.2f}"
