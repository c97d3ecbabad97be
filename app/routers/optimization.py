from fastapi import APIRouter, Depends
from app.dependencies import get_route_optimization_service
from app.schemas.delivery import OptimizeRequest, OptimizedRoute
from app.services.route_optimization import RouteOptimizationService
from app.core.logging_config import logger

router = APIRouter()


@router.post("/optimize", response_model=OptimizedRoute)
def optimize_route(
    request_data: OptimizeRequest,
    service: RouteOptimizationService = Depends(get_route_optimization_service)
):
    """
    Optimize the delivery order with Google Route Optimization.

    The warehouse location defaults to the configured depot when omitted.
    Errors are turned into JSON responses by the handler in main.py.

    Example:
        ```json
        {
            "deliveries": [
                {"id": "A-001", "address": "Calle Mayor 1", "lat": 41.65, "lng": -4.72}
            ],
            "warehouse_location": {"lat": 41.6523, "lng": -4.7245},
            "start_time": "2025-01-15T08:00:00Z"
        }
        ```
    """
    depot = request_data.warehouse_location or service.get_default_depot()
    logger.info(f"Optimize request: {len(request_data.deliveries)} deliveries")
    return service.optimize(
        stops=request_data.deliveries,
        depot=depot,
        start_time=request_data.start_time
    )


@router.post("/optimize-simple", response_model=OptimizedRoute)
def optimize_route_simple(
    request_data: OptimizeRequest,
    service: RouteOptimizationService = Depends(get_route_optimization_service)
):
    """
    Optimize the delivery order locally with the nearest-neighbor heuristic.

    No Google call is made; ``start_time`` is ignored.
    """
    depot = request_data.warehouse_location or service.get_default_depot()
    logger.info(f"Optimize-simple request: {len(request_data.deliveries)} deliveries")
    return service.optimize_simple(stops=request_data.deliveries, depot=depot)
