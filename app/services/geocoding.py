import googlemaps
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, List, Optional
from app.core.config import settings
from app.core.logging_config import logger
from app.schemas.geocoding import GeocodeResponse, GeocodeResult, GeocodeSummary

# Manifests are Spanish; bias results to Spain
GEOCODING_LANGUAGE = "es"
GEOCODING_REGION = "es"
GEOCODING_COUNTRY = "España"

STATUS_MESSAGES = {
    "ZERO_RESULTS": "Address not found",
    "INVALID_REQUEST": "Invalid address",
    "OVER_QUERY_LIMIT": "Query limit exceeded",
    "REQUEST_DENIED": "Request denied - check the API key",
}


def is_valid_address(address: Optional[str]) -> bool:
    return bool(address and address.strip())


def format_address_for_spain(address: str) -> str:
    """Append ", España" unless the address already names the country."""
    trimmed = address.strip()
    lowered = trimmed.lower()
    if "españa" in lowered or "spain" in lowered:
        return trimmed
    return f"{trimmed}, {GEOCODING_COUNTRY}"


class GeocodingService:
    """Google Maps Geocoding API integration service"""

    def __init__(self, api_key: Optional[str] = None, client: Optional[Any] = None):
        """
        Args:
            api_key: Google Maps API key (defaults to settings)
            client: Preconfigured googlemaps.Client (used by tests)
        """
        if client is not None:
            self.client = client
        elif api_key or settings.GOOGLE_MAPS_API_KEY:
            self.client = googlemaps.Client(
                key=api_key or settings.GOOGLE_MAPS_API_KEY,
                queries_per_second=50,
                timeout=settings.HTTP_TIMEOUT_SECONDS
            )
            logger.info("Google Maps geocoding client initialized")
        else:
            self.client = None
            logger.warning("Google Maps API key not configured - geocoding disabled")

    def geocode_address(self, address: str) -> GeocodeResult:
        """
        Geocode a single manifest address.

        Errors are reported in the result, never raised, so one bad address
        does not sink a whole manifest.
        """
        if not is_valid_address(address):
            logger.warning(f"Skipping empty address: '{address}'")
            return GeocodeResult(address=address, error="Empty or invalid address")

        formatted_address = format_address_for_spain(address)

        if not self.client:
            return GeocodeResult(
                address=address,
                formatted_address=formatted_address,
                error="Geocoding service not configured"
            )

        try:
            results = self.client.geocode(
                formatted_address,
                language=GEOCODING_LANGUAGE,
                region=GEOCODING_REGION
            )
        except googlemaps.exceptions.ApiError as e:
            logger.warning(f"Geocoding status {e.status} for '{formatted_address}'")
            return GeocodeResult(
                address=address,
                formatted_address=formatted_address,
                error=STATUS_MESSAGES.get(e.status, e.status)
            )
        except (googlemaps.exceptions.HTTPError, googlemaps.exceptions.TransportError,
                googlemaps.exceptions.Timeout) as e:
            logger.error(f"Geocoding request failed for '{formatted_address}': {str(e)}")
            return GeocodeResult(
                address=address,
                formatted_address=formatted_address,
                error=f"Geocoding failed: {str(e)}"
            )

        if not results:
            logger.warning(f"No geocoding results for '{formatted_address}'")
            return GeocodeResult(
                address=address,
                formatted_address=formatted_address,
                error=STATUS_MESSAGES["ZERO_RESULTS"]
            )

        best = results[0]
        location = best.get("geometry", {}).get("location", {})
        lat = location.get("lat")
        lng = location.get("lng")

        if lat is None or lng is None:
            return GeocodeResult(
                address=address,
                formatted_address=formatted_address,
                error="No coordinates found"
            )

        logger.info(f"Geocoded '{formatted_address}' -> ({lat}, {lng})")

        return GeocodeResult(
            address=address,
            formatted_address=best.get("formatted_address", formatted_address),
            lat=lat,
            lng=lng,
            place_id=best.get("place_id")
        )

    def batch_geocode(self, addresses: List[str], max_workers: Optional[int] = None) -> GeocodeResponse:
        """
        Geocode addresses concurrently.

        Lookups finish in any order; each result is written to the slot of
        its address, so the output order always matches the input order.

        Args:
            addresses: Address strings in manifest order
            max_workers: Thread pool size (defaults to settings)

        Returns:
            GeocodeResponse with per-address results and a summary
        """
        max_workers = max_workers or settings.GEOCODING_MAX_WORKERS
        results: List[Optional[GeocodeResult]] = [None] * len(addresses)

        if addresses:
            logger.info(f"Geocoding {len(addresses)} addresses with {max_workers} workers")

            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                future_to_index = {
                    executor.submit(self.geocode_address, address): idx
                    for idx, address in enumerate(addresses)
                }
                for future in as_completed(future_to_index):
                    idx = future_to_index[future]
                    try:
                        results[idx] = future.result()
                    except Exception as e:
                        logger.error(f"Error geocoding address at index {idx}: {str(e)}")
                        results[idx] = GeocodeResult(
                            address=addresses[idx],
                            error=f"Geocoding failed: {str(e)}"
                        )

        successful = sum(1 for result in results if not result.error)
        failed = len(results) - successful

        logger.info(f"Geocoding completed: {successful} successful, {failed} failed of {len(results)}")

        return GeocodeResponse(
            results=results,
            summary=GeocodeSummary(total=len(results), successful=successful, failed=failed)
        )


geocoding_service = GeocodingService()
