"""
Route cost estimate shared by the Google and nearest-neighbor paths.
"""

from decimal import Decimal, ROUND_HALF_UP

DEFAULT_COST_PER_KILOMETER = 1.0
DEFAULT_COST_PER_HOUR = 0.5


def calculate_route_cost(
    distance_meters: float,
    duration_seconds: float,
    cost_per_kilometer: float = DEFAULT_COST_PER_KILOMETER,
    cost_per_hour: float = DEFAULT_COST_PER_HOUR
) -> float:
    """
    Estimate the cost of a route.

    Args:
        distance_meters: Total distance in meters
        duration_seconds: Total duration in seconds
        cost_per_kilometer: Cost per kilometer driven
        cost_per_hour: Cost per hour of work

    Returns:
        Cost rounded half-up to 2 decimals
    """
    distance_cost = (distance_meters / 1000) * cost_per_kilometer
    time_cost = (duration_seconds / 3600) * cost_per_hour

    cost = Decimal(repr(distance_cost + time_cost))
    return float(cost.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
