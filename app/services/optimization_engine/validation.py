"""
Input checks run before any optimization path touches the network.
"""

from typing import List, Optional
from app.core.exceptions import ValidationError
from app.schemas.common import Location
from app.schemas.delivery import DeliveryStop


def find_stops_without_coordinates(stops: List[DeliveryStop]) -> List[int]:
    """Positions (0-based) of stops missing lat or lng."""
    return [index for index, stop in enumerate(stops) if not stop.has_coordinates]


def validate_optimization_input(stops: Optional[List[DeliveryStop]], depot: Optional[Location]) -> None:
    """
    Check that a stop list and depot can be optimized.

    Raises:
        ValidationError: If the list is empty, a stop has no coordinates,
            or the depot is missing
    """
    if not stops:
        raise ValidationError("At least one delivery is required")

    missing = find_stops_without_coordinates(stops)
    if missing:
        raise ValidationError(
            "All deliveries must have coordinates (lat, lng)",
            details={
                "count": len(missing),
                "positions": [index + 1 for index in missing],
            }
        )

    if depot is None:
        raise ValidationError("Warehouse location is required")
