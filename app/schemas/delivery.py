from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from app.schemas.common import Location


class DeliveryStop(BaseModel):
    """A delivery read from a manifest. Extra manifest columns are kept as-is."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = Field(None, description="Business id of the delivery (manifest code)")
    label: Optional[str] = None
    address: Optional[str] = None
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_numeric_id(cls, value):
        # Spreadsheet manifests often yield numeric codes
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None

    @property
    def location(self) -> Location:
        return Location(lat=self.lat, lng=self.lng)


class OptimizedStop(DeliveryStop):
    """Delivery stop with its position in the optimized sequence."""
    sequence_index: int = Field(..., ge=1, description="1-based position in the route")
    estimated_arrival: Optional[str] = None  # RFC 3339 timestamp from the optimizer
    distance_from_previous: Optional[int] = None  # meters


class Leg(BaseModel):
    """Travel segment between two consecutive points of a route."""
    start: Location
    end: Location
    distance_meters: int = 0
    duration_seconds: int = 0


class OptimizedRoute(BaseModel):
    stops: List[OptimizedStop]
    total_distance_meters: int
    total_duration_seconds: int
    estimated_cost: float
    polyline: Optional[str] = None
    legs: Optional[List[Leg]] = None


class OptimizeRequest(BaseModel):
    """Body of POST /api/optimize and /api/optimize-simple."""
    deliveries: List[DeliveryStop]
    warehouse_location: Optional[Location] = Field(
        None, description="Depot location. Defaults to the configured warehouse"
    )
    start_time: Optional[datetime] = Field(
        None, description="Start of the planning window. Defaults to now"
    )
