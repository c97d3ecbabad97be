from app.services.geocoding import GeocodingService, geocoding_service
from app.services.route_optimization import RouteOptimizationService, route_optimization_service


def get_route_optimization_service() -> RouteOptimizationService:
    """
    Provide the route optimization service.

    Overridden in tests through ``app.dependency_overrides``.
    """
    return route_optimization_service


def get_geocoding_service() -> GeocodingService:
    return geocoding_service
