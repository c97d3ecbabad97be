from pydantic import BaseModel, Field
from typing import List, Optional


class GeocodeRequest(BaseModel):
    """Addresses to geocode, in manifest order"""
    addresses: List[str] = Field(..., min_length=1)


class GeocodeResult(BaseModel):
    """Result of geocoding an address"""
    address: str
    formatted_address: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    place_id: Optional[str] = None
    error: Optional[str] = None


class GeocodeSummary(BaseModel):
    total: int
    successful: int
    failed: int


class GeocodeResponse(BaseModel):
    """Results keep the order of the request addresses"""
    results: List[GeocodeResult]
    summary: GeocodeSummary
