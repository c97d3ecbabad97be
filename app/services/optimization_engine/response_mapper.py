"""
Maps an optimizeTours route back onto the original delivery stops.
"""

from typing import List, Optional
from app.core.exceptions import UpstreamOptimizationError
from app.core.logging_config import logger
from app.schemas.common import Location
from app.schemas.delivery import DeliveryStop, Leg, OptimizedRoute, OptimizedStop
from app.schemas.route_optimization import RouteMetrics, ShipmentRoute, Transition, parse_duration
from app.services.optimization_engine.cost_estimator import (
    DEFAULT_COST_PER_HOUR,
    DEFAULT_COST_PER_KILOMETER,
    calculate_route_cost,
)


class ResponseMapper:
    """Builds an OptimizedRoute from a ShipmentRoute and its metrics."""

    def __init__(
        self,
        cost_per_kilometer: float = DEFAULT_COST_PER_KILOMETER,
        cost_per_hour: float = DEFAULT_COST_PER_HOUR
    ):
        self.cost_per_kilometer = cost_per_kilometer
        self.cost_per_hour = cost_per_hour

    def map(
        self,
        route: ShipmentRoute,
        metrics: Optional[RouteMetrics],
        stops: List[DeliveryStop]
    ) -> OptimizedRoute:
        """
        Map a route to the delivery sequence.

        Visits are taken in the order returned. ``shipment_index`` points into
        ``stops``; visits without one (depot visits) are skipped.

        Args:
            route: First route of the response
            metrics: Metrics of that route (may be missing)
            stops: Stops in the order they were sent

        Returns:
            OptimizedRoute with 1-based sequence indexes

        Raises:
            UpstreamOptimizationError: If a visit references an unknown shipment
        """
        optimized_stops = []
        for visit in route.visits:
            if visit.shipment_index is None:
                continue

            if not 0 <= visit.shipment_index < len(stops):
                raise UpstreamOptimizationError(
                    f"Visit references unknown shipment index {visit.shipment_index}",
                    body={"shipment_count": len(stops)}
                )

            original = stops[visit.shipment_index]
            optimized_stops.append(OptimizedStop(
                **original.model_dump(exclude={"sequence_index", "estimated_arrival", "distance_from_previous"}),
                sequence_index=len(optimized_stops) + 1,
                estimated_arrival=visit.start_time,
            ))

        total_distance_meters = 0
        total_duration_seconds = 0
        if metrics is not None:
            total_distance_meters = int(metrics.total_distance or 0)
            total_duration_seconds = parse_duration(metrics.total_duration)

        estimated_cost = calculate_route_cost(
            total_distance_meters,
            total_duration_seconds,
            self.cost_per_kilometer,
            self.cost_per_hour
        )

        legs = None
        if route.transitions is not None:
            legs = [self._map_transition(transition) for transition in route.transitions]

        polyline = route.route_polyline.encoded_polyline if route.route_polyline else None

        logger.info(
            f"Optimized route: {len(optimized_stops)} stops, "
            f"{total_distance_meters / 1000:.1f} km, "
            f"{total_duration_seconds / 60:.0f} min, "
            f"cost {estimated_cost:.2f}"
        )

        return OptimizedRoute(
            stops=optimized_stops,
            total_distance_meters=total_distance_meters,
            total_duration_seconds=total_duration_seconds,
            estimated_cost=estimated_cost,
            polyline=polyline,
            legs=legs,
        )

    @staticmethod
    def _map_transition(transition: Transition) -> Leg:
        origin = Location(lat=0.0, lng=0.0)
        return Leg(
            start=transition.start_location.to_location() if transition.start_location else origin,
            end=transition.end_location.to_location() if transition.end_location else origin,
            distance_meters=int(round(transition.travel_distance_meters or 0)),
            duration_seconds=parse_duration(transition.travel_duration),
        )
