"""
Route optimization engine.

This package provides modular components for:
- Building the Google Route Optimization shipment model from delivery stops
- Calling the optimizeTours API
- Mapping the returned route back onto the delivery stops
- A local nearest-neighbor fallback
- Route cost estimation shared by both paths
"""

from .cost_estimator import calculate_route_cost
from .validation import validate_optimization_input
from .shipment_model_builder import ShipmentModelBuilder
from .optimization_client import OptimizationClient
from .response_mapper import ResponseMapper
from .nearest_neighbor import NearestNeighborOptimizer, haversine_distance

__all__ = [
    "calculate_route_cost",
    "validate_optimization_input",
    "ShipmentModelBuilder",
    "OptimizationClient",
    "ResponseMapper",
    "NearestNeighborOptimizer",
    "haversine_distance",
]
