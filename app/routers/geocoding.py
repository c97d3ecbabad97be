from fastapi import APIRouter, Depends
from app.dependencies import get_geocoding_service
from app.schemas.geocoding import GeocodeRequest, GeocodeResponse
from app.services.geocoding import GeocodingService

router = APIRouter()


@router.post("/geocode", response_model=GeocodeResponse)
def geocode_addresses(
    request_data: GeocodeRequest,
    service: GeocodingService = Depends(get_geocoding_service)
):
    """
    Geocode manifest addresses.

    Results are returned in the same order as ``addresses``. Failed lookups
    carry an ``error`` instead of coordinates and are counted in the summary.
    """
    return service.batch_geocode(request_data.addresses)
