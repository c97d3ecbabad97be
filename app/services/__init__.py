from .route_optimization import route_optimization_service
from .geocoding import geocoding_service

__all__ = ["route_optimization_service", "geocoding_service"]
