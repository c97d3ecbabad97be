from datetime import datetime
from typing import List, Optional
import httpx
from app.core.config import Settings, settings as app_settings
from app.core.logging_config import logger
from app.schemas.common import Location
from app.schemas.delivery import DeliveryStop, OptimizedRoute
from app.services.google_auth import GoogleAuthenticator
from app.services.optimization_engine import (
    NearestNeighborOptimizer,
    OptimizationClient,
    ResponseMapper,
    ShipmentModelBuilder,
    validate_optimization_input,
)


class RouteOptimizationService:
    """
    Service layer for delivery route optimization.

    Two paths produce the same OptimizedRoute:
    - optimize(): Google Route Optimization API, authenticated with the
      service account (token -> model -> optimizeTours -> mapping)
    - optimize_simple(): local nearest-neighbor heuristic, no network

    Inputs are validated before anything else runs, so invalid requests never
    reach Google. Errors are raised as RouteOptimizationError subclasses;
    retry or fallback decisions belong to the caller.
    """

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None):
        """
        Initialize the service.

        Args:
            settings: Application settings (credentials, costs, defaults)
            http_client: Optional shared HTTP client for the Google calls
        """
        self.settings = settings
        self.authenticator = GoogleAuthenticator(settings, http_client=http_client)
        self.model_builder = ShipmentModelBuilder(
            service_duration_seconds=settings.DURATION_PER_DELIVERY_SECONDS,
            cost_per_kilometer=settings.COST_PER_KILOMETER,
            cost_per_hour=settings.COST_PER_HOUR,
            time_window_hours=settings.TIME_WINDOW_HOURS
        )
        self.client = OptimizationClient(
            base_url=settings.ROUTE_OPTIMIZATION_BASE_URL,
            http_client=http_client,
            timeout=settings.HTTP_TIMEOUT_SECONDS
        )
        self.mapper = ResponseMapper(
            cost_per_kilometer=settings.COST_PER_KILOMETER,
            cost_per_hour=settings.COST_PER_HOUR
        )
        self.nearest_neighbor = NearestNeighborOptimizer(
            service_duration_seconds=settings.DURATION_PER_DELIVERY_SECONDS,
            average_speed_kmh=settings.AVERAGE_SPEED_KMH,
            cost_per_kilometer=settings.COST_PER_KILOMETER,
            cost_per_hour=settings.COST_PER_HOUR
        )

    def get_default_depot(self) -> Location:
        """Warehouse location from settings."""
        return Location(lat=self.settings.WAREHOUSE_LAT, lng=self.settings.WAREHOUSE_LNG)

    def optimize(
        self,
        stops: List[DeliveryStop],
        depot: Optional[Location],
        start_time: Optional[datetime] = None
    ) -> OptimizedRoute:
        """
        Optimize a route with the Google Route Optimization API.

        Args:
            stops: Delivery stops in manifest order
            depot: Warehouse the vehicle starts and ends at
            start_time: Start of the planning window (defaults to now)

        Returns:
            OptimizedRoute in the order chosen by Google

        Raises:
            ValidationError: Bad input, raised before any network call
            ConfigurationError, CredentialError: Service account problems
            TokenExchangeError: The token endpoint rejected the assertion
            UpstreamOptimizationError, NoRouteFoundError: optimizeTours failures
        """
        validate_optimization_input(stops, depot)

        project_id = self.authenticator.credential_store.get_project_id()

        logger.info(f"Optimizing route for {len(stops)} deliveries with Google Route Optimization")

        access_token = self.authenticator.get_access_token()
        model = self.model_builder.build(stops, depot, start_time)
        response = self.client.optimize_tours(model, access_token, project_id)

        return self.mapper.map(response.routes[0], response.first_metrics(), stops)

    def optimize_simple(self, stops: List[DeliveryStop], depot: Optional[Location]) -> OptimizedRoute:
        """
        Optimize a route locally with the nearest-neighbor heuristic.

        Raises:
            ValidationError: Bad input
        """
        validate_optimization_input(stops, depot)

        logger.info(f"Optimizing route for {len(stops)} deliveries with nearest neighbor")

        return self.nearest_neighbor.optimize(stops, depot)


route_optimization_service = RouteOptimizationService(app_settings)
