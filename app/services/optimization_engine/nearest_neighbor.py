"""
Nearest-neighbor route heuristic.

Local fallback when the Route Optimization API is unavailable or not worth
calling. Uses great-circle distances only, no network access. O(n^2) in the
number of stops, which is fine for manifest-sized routes.
"""

import math
from typing import List
from app.core.logging_config import logger
from app.schemas.common import Location
from app.schemas.delivery import DeliveryStop, OptimizedRoute, OptimizedStop
from app.services.optimization_engine.cost_estimator import (
    DEFAULT_COST_PER_HOUR,
    DEFAULT_COST_PER_KILOMETER,
    calculate_route_cost,
)
from app.utils.polyline import encode_locations

EARTH_RADIUS_METERS = 6371000


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def haversine_distance(origin: Location, destination: Location) -> float:
    """Great-circle distance in meters between two points."""
    lat1 = math.radians(origin.lat)
    lat2 = math.radians(destination.lat)
    delta_lat = math.radians(destination.lat - origin.lat)
    delta_lng = math.radians(destination.lng - origin.lng)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


class NearestNeighborOptimizer:
    """Greedy tour: always drive to the closest unvisited stop, then back to the depot."""

    def __init__(
        self,
        service_duration_seconds: int = 300,
        average_speed_kmh: float = 30.0,
        cost_per_kilometer: float = DEFAULT_COST_PER_KILOMETER,
        cost_per_hour: float = DEFAULT_COST_PER_HOUR
    ):
        self.service_duration_seconds = service_duration_seconds
        self.average_speed_kmh = average_speed_kmh
        self.cost_per_kilometer = cost_per_kilometer
        self.cost_per_hour = cost_per_hour

    def optimize(self, stops: List[DeliveryStop], depot: Location) -> OptimizedRoute:
        """
        Order the stops with the nearest-neighbor heuristic.

        Ties go to the stop that comes first in ``stops``. The return leg to
        the depot counts toward the total distance but is not a stop.

        Args:
            stops: Validated stops (all with coordinates)
            depot: Start and end of the route

        Returns:
            OptimizedRoute with ``distance_from_previous`` on every stop
        """
        unvisited = list(stops)
        optimized: List[OptimizedStop] = []
        current = depot
        total_distance = 0.0

        while unvisited:
            nearest_index = 0
            nearest_distance = math.inf

            for index, stop in enumerate(unvisited):
                distance = haversine_distance(current, stop.location)
                if distance < nearest_distance:
                    nearest_distance = distance
                    nearest_index = index

            next_stop = unvisited.pop(nearest_index)
            optimized.append(OptimizedStop(
                **next_stop.model_dump(exclude={"sequence_index", "estimated_arrival", "distance_from_previous"}),
                sequence_index=len(optimized) + 1,
                distance_from_previous=round_half_up(nearest_distance),
            ))

            total_distance += nearest_distance
            current = next_stop.location

        total_distance += haversine_distance(current, depot)

        travel_seconds = (total_distance / 1000 / self.average_speed_kmh) * 3600
        service_seconds = len(optimized) * self.service_duration_seconds
        total_duration_seconds = round_half_up(travel_seconds + service_seconds)

        estimated_cost = calculate_route_cost(
            total_distance,
            total_duration_seconds,
            self.cost_per_kilometer,
            self.cost_per_hour
        )

        polyline = encode_locations([depot] + [stop.location for stop in optimized] + [depot])

        logger.info(
            f"Nearest-neighbor route: {len(optimized)} stops, "
            f"{total_distance / 1000:.1f} km, "
            f"{total_duration_seconds / 60:.0f} min, "
            f"cost {estimated_cost:.2f}"
        )

        return OptimizedRoute(
            stops=optimized,
            total_distance_meters=round_half_up(total_distance),
            total_duration_seconds=total_duration_seconds,
            estimated_cost=estimated_cost,
            polyline=polyline,
        )
