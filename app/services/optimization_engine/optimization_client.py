"""
Google Route Optimization API client.

Sends a ShipmentModel to ``projects/{project}:optimizeTours`` and returns the
typed response.
"""

import httpx
from typing import Optional
from pydantic import ValidationError as PydanticValidationError
from app.core.exceptions import NoRouteFoundError, UpstreamOptimizationError
from app.core.logging_config import logger
from app.schemas.route_optimization import OptimizeToursResponse, ShipmentModel


class OptimizationClient:
    """Client for the Route Optimization ``optimizeTours`` method."""

    BASE_URL = "https://routeoptimization.googleapis.com/v1"

    # Only routes and metrics are read back
    FIELD_MASK = "routes,metrics"

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 30.0
    ):
        """
        Initialize the optimization client.

        Args:
            base_url: API base URL (defaults to the public v1 endpoint)
            http_client: Client to reuse (a short-lived one is opened per call otherwise)
            timeout: Request timeout in seconds
        """
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.http_client = http_client
        self.timeout = timeout

    def get_url(self, project_id: str) -> str:
        return f"{self.base_url}/projects/{project_id}:optimizeTours"

    def optimize_tours(
        self,
        model: ShipmentModel,
        access_token: str,
        project_id: str
    ) -> OptimizeToursResponse:
        """
        Run the optimization.

        Args:
            model: Shipment model from ShipmentModelBuilder
            access_token: Bearer token from TokenExchanger
            project_id: Google Cloud project id

        Returns:
            Parsed response with at least one route

        Raises:
            UpstreamOptimizationError: Transport failure, non-2xx status or
                unparseable body (status and body passed through verbatim)
            NoRouteFoundError: The request was accepted but no route came back
        """
        url = self.get_url(project_id)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {access_token}",
            "X-Goog-FieldMask": self.FIELD_MASK,
        }
        payload = model.to_request_body()

        logger.info(f"Calling Route Optimization API: {len(model.shipments)} shipments, project={project_id}")

        try:
            if self.http_client is not None:
                response = self.http_client.post(url, json=payload, headers=headers, timeout=self.timeout)
            else:
                with httpx.Client() as client:
                    response = client.post(url, json=payload, headers=headers, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error(f"Route Optimization API unreachable: {str(e)}")
            raise UpstreamOptimizationError(f"Route Optimization API unreachable: {str(e)}") from e

        if not response.is_success:
            body = _response_body(response)
            logger.error(f"Route Optimization API error {response.status_code}: {body}")
            raise UpstreamOptimizationError(
                f"Route Optimization API failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=body
            )

        try:
            result = OptimizeToursResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"Unexpected Route Optimization API response: {str(e)}")
            raise UpstreamOptimizationError(
                "Route Optimization API returned an unexpected body",
                status_code=response.status_code,
                body=response.text
            ) from e

        logger.info("Route Optimization API response received")

        if not result.routes:
            logger.warning("Route Optimization API returned no routes")
            raise NoRouteFoundError(
                "Route could not be optimized",
                details="The optimizer returned no route for this model"
            )

        return result


def _response_body(response: httpx.Response):
    """JSON body if there is one, raw text otherwise."""
    try:
        return response.json()
    except ValueError:
        return response.text or None
