"""
Error taxonomy for the routing core.

Every failure is raised as a RouteOptimizationError subclass carrying a kind,
a human readable message and, for upstream failures, the upstream payload.
The HTTP layer turns them into JSON responses; callers of the services decide
whether to retry, fall back to the nearest-neighbor path, or surface them.
"""

from typing import Any, Dict, Optional


class RouteOptimizationError(Exception):
    """Base class for all routing core errors."""

    kind = "route_optimization_error"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.kind,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(RouteOptimizationError):
    """Required credential, project or location settings are missing or malformed."""

    kind = "configuration_error"


class CredentialError(RouteOptimizationError):
    """The signing key cannot be used (bad PEM, non-RSA key)."""

    kind = "credential_error"


class UpstreamError(RouteOptimizationError):
    """Non-success answer from an external Google endpoint."""

    kind = "upstream_error"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[Any] = None
    ):
        super().__init__(message, details=body)
        self.status_code = status_code
        self.body = body

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class TokenExchangeError(UpstreamError):
    """The OAuth2 token endpoint rejected the signed assertion."""

    kind = "token_exchange_error"


class UpstreamOptimizationError(UpstreamError):
    """The route optimization endpoint failed or answered with an unusable body."""

    kind = "upstream_optimization_error"


class NoRouteFoundError(RouteOptimizationError):
    """The optimization request was accepted but no feasible route came back."""

    kind = "no_route_found"


class ValidationError(RouteOptimizationError):
    """Stops or depot are not usable for optimization."""

    kind = "validation_error"
