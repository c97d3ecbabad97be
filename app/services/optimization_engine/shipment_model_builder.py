"""
Builds the Route Optimization shipment model from delivery stops.

One shipment per stop, kept in stop order, so the ``shipmentIndex`` of each
visit in the response points back to the original stop.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from app.core.logging_config import logger
from app.schemas.common import Location
from app.schemas.delivery import DeliveryStop
from app.schemas.route_optimization import ShipmentModel, Shipment, TimeWindow, Vehicle
from app.services.optimization_engine.cost_estimator import (
    DEFAULT_COST_PER_HOUR,
    DEFAULT_COST_PER_KILOMETER,
)


def to_utc_seconds(value: datetime) -> datetime:
    """
    Normalize a datetime to UTC with whole-second precision.

    Naive datetimes are taken as UTC. The optimizer rejects timestamps with
    fractional seconds.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=0)


class ShipmentModelBuilder:
    """Translates stops + depot into a ShipmentModel."""

    def __init__(
        self,
        service_duration_seconds: int = 300,
        cost_per_kilometer: float = DEFAULT_COST_PER_KILOMETER,
        cost_per_hour: float = DEFAULT_COST_PER_HOUR,
        time_window_hours: float = 8
    ):
        self.service_duration_seconds = service_duration_seconds
        self.cost_per_kilometer = cost_per_kilometer
        self.cost_per_hour = cost_per_hour
        self.time_window_hours = time_window_hours

    def build(
        self,
        stops: List[DeliveryStop],
        depot: Location,
        start_time: Optional[datetime] = None
    ) -> ShipmentModel:
        """
        Build the shipment model.

        Stops must already be validated (non-empty, all with coordinates).

        Args:
            stops: Delivery stops in manifest order
            depot: Start and end location of the vehicle
            start_time: Start of the planning window (defaults to now)

        Returns:
            ShipmentModel with one shipment per stop
        """
        if start_time is None:
            start_time = datetime.now(timezone.utc)

        window_start = to_utc_seconds(start_time)
        window_end = to_utc_seconds(window_start + timedelta(hours=self.time_window_hours))
        time_window = TimeWindow(start_time=window_start, end_time=window_end)

        shipments = [
            Shipment(
                delivery_location=stop.location,
                service_duration_seconds=self.service_duration_seconds,
                time_window=time_window,
                label=stop.id or f"Entrega-{position}",
            )
            for position, stop in enumerate(stops, start=1)
        ]

        vehicle = Vehicle(
            start=depot,
            end=depot,
            cost_per_kilometer=self.cost_per_kilometer,
            cost_per_hour=self.cost_per_hour,
        )

        logger.info(
            f"Shipment model built: {len(shipments)} shipments, "
            f"window {window_start.isoformat()} -> {window_end.isoformat()}"
        )

        return ShipmentModel(
            shipments=shipments,
            vehicle=vehicle,
            global_start_time=window_start,
            global_end_time=window_end,
        )
