"""
Schemas for the Google Route Optimization API.

Two groups live here:
- ShipmentModel and its parts: the request model built from delivery stops.
  ``to_request_body()`` renders the exact JSON sent to ``optimizeTours``.
- OptimizeToursResponse and its parts: typed view of the upstream answer,
  parsed at the client boundary so the mapper never touches raw dicts.
"""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from app.schemas.common import Location


DURATION_PATTERN = re.compile(r"^\d+(\.\d+)?s$")


def format_timestamp(value: datetime) -> str:
    """Render a UTC datetime as ``YYYY-MM-DDTHH:MM:SSZ`` (no fractional seconds)."""
    return value.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_duration(seconds: int) -> str:
    """Render a duration the way the API expects it, e.g. ``300s``."""
    return f"{int(seconds)}s"


def parse_duration(value: Optional[str]) -> int:
    """
    Parse an API duration string (``"1234s"``) into whole seconds.

    Fractional parts are dropped. Missing values count as 0.
    """
    if not value:
        return 0
    return int(float(value.rstrip("s")))


def check_duration(value: Optional[str]) -> Optional[str]:
    """Reject durations that are not plain seconds (``"123s"``, ``"1.5s"``)."""
    if value is not None and not DURATION_PATTERN.match(value):
        raise ValueError(f"Invalid duration '{value}', expected seconds such as '123s'")
    return value


def _waypoint(location: Location) -> Dict[str, Any]:
    return {
        "location": {
            "latLng": {
                "latitude": location.lat,
                "longitude": location.lng,
            }
        }
    }


class TimeWindow(BaseModel):
    start_time: datetime
    end_time: datetime

    def to_request_body(self) -> Dict[str, str]:
        return {
            "startTime": format_timestamp(self.start_time),
            "endTime": format_timestamp(self.end_time),
        }


class Shipment(BaseModel):
    delivery_location: Location
    service_duration_seconds: int
    time_window: TimeWindow
    label: str

    def to_request_body(self) -> Dict[str, Any]:
        return {
            "deliveries": [
                {
                    "arrivalWaypoint": _waypoint(self.delivery_location),
                    "duration": format_duration(self.service_duration_seconds),
                    "timeWindows": [self.time_window.to_request_body()],
                }
            ],
            "label": self.label,
        }


class Vehicle(BaseModel):
    start: Location
    end: Location
    cost_per_kilometer: float
    cost_per_hour: float

    def to_request_body(self) -> Dict[str, Any]:
        return {
            "startWaypoint": _waypoint(self.start),
            "endWaypoint": _waypoint(self.end),
            "costPerHour": self.cost_per_hour,
            "costPerKilometer": self.cost_per_kilometer,
        }


class ShipmentModel(BaseModel):
    """One shipment per delivery stop, in stop order, served by a single vehicle."""
    shipments: List[Shipment]
    vehicle: Vehicle
    global_start_time: datetime
    global_end_time: datetime

    def to_request_body(self) -> Dict[str, Any]:
        return {
            "model": {
                "shipments": [shipment.to_request_body() for shipment in self.shipments],
                "vehicles": [self.vehicle.to_request_body()],
                "globalStartTime": format_timestamp(self.global_start_time),
                "globalEndTime": format_timestamp(self.global_end_time),
            }
        }


# Upstream response ---------------------------------------------------------

class _UpstreamModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class LatLng(_UpstreamModel):
    latitude: float = 0.0
    longitude: float = 0.0


class UpstreamLocation(_UpstreamModel):
    lat_lng: Optional[LatLng] = None

    def to_location(self) -> Location:
        lat_lng = self.lat_lng or LatLng()
        return Location(lat=lat_lng.latitude, lng=lat_lng.longitude)


class Visit(_UpstreamModel):
    shipment_index: Optional[int] = None
    start_time: Optional[str] = None


class Transition(_UpstreamModel):
    start_location: Optional[UpstreamLocation] = None
    end_location: Optional[UpstreamLocation] = None
    travel_distance_meters: Optional[float] = None
    travel_duration: Optional[str] = None

    @field_validator("travel_duration")
    @classmethod
    def validate_travel_duration(cls, value: Optional[str]) -> Optional[str]:
        return check_duration(value)


class RoutePolyline(_UpstreamModel):
    encoded_polyline: Optional[str] = None


class ShipmentRoute(_UpstreamModel):
    visits: List[Visit] = []
    transitions: Optional[List[Transition]] = None
    route_polyline: Optional[RoutePolyline] = None


class RouteMetrics(_UpstreamModel):
    total_distance: Optional[float] = None
    total_duration: Optional[str] = None

    @field_validator("total_duration")
    @classmethod
    def validate_total_duration(cls, value: Optional[str]) -> Optional[str]:
        return check_duration(value)


class OptimizeToursResponse(_UpstreamModel):
    routes: List[ShipmentRoute] = []
    metrics: Optional[Union[List[RouteMetrics], RouteMetrics]] = None

    def first_metrics(self) -> Optional[RouteMetrics]:
        """Metrics for the first route. Accepts both a list and a single object."""
        if isinstance(self.metrics, list):
            return self.metrics[0] if self.metrics else None
        return self.metrics
