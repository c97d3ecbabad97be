import pytest

from app.schemas.common import Location
from app.schemas.delivery import DeliveryStop
from app.services.optimization_engine import NearestNeighborOptimizer, haversine_distance
from app.utils.polyline import decode_polyline


def stop(stop_id, lat, lng):
    return DeliveryStop(id=stop_id, label=f"Stop {stop_id}", lat=lat, lng=lng)


def test_closer_stop_is_visited_first():
    depot = Location(lat=0, lng=0)
    a = stop("A", 0, 1)
    b = stop("B", 0, 2)

    route = NearestNeighborOptimizer().optimize([b, a], depot)

    assert [s.id for s in route.stops] == ["A", "B"]
    assert [s.sequence_index for s in route.stops] == [1, 2]


def test_stop_at_depot_costs_only_service_time():
    depot = Location(lat=41.6523, lng=-4.7245)

    route = NearestNeighborOptimizer().optimize([stop("A", 41.6523, -4.7245)], depot)

    assert route.total_distance_meters == 0
    assert route.stops[0].distance_from_previous == 0
    assert route.total_duration_seconds == 300


def test_totals_include_return_leg():
    depot = Location(lat=0, lng=0)
    a = stop("A", 0, 1)
    b = stop("B", 0, 2)

    route = NearestNeighborOptimizer().optimize([a, b], depot)

    one_degree = haversine_distance(depot, a.location)
    expected_distance = 4 * one_degree
    assert route.stops[0].distance_from_previous == round(one_degree)
    assert route.stops[1].distance_from_previous == round(one_degree)
    assert route.total_distance_meters == round(expected_distance)
    assert route.total_duration_seconds == round(expected_distance / 1000 / 30 * 3600 + 2 * 300)


def test_cost_matches_totals():
    depot = Location(lat=0, lng=0)

    route = NearestNeighborOptimizer().optimize([stop("A", 0, 1)], depot)

    distance_km = 2 * haversine_distance(depot, Location(lat=0, lng=1)) / 1000
    expected = distance_km * 1.0 + route.total_duration_seconds / 3600 * 0.5
    assert route.estimated_cost == pytest.approx(expected, abs=0.005)


def test_ties_go_to_first_stop_in_input_order():
    depot = Location(lat=0, lng=0)
    east = stop("east", 0, 1)
    west = stop("west", 0, -1)
    duplicate = stop("east-again", 0, 1)

    route = NearestNeighborOptimizer().optimize([east, west, duplicate], depot)

    assert [s.id for s in route.stops] == ["east", "east-again", "west"]

    route = NearestNeighborOptimizer().optimize([west, east, duplicate], depot)

    assert route.stops[0].id == "west"


def test_is_deterministic(stops, depot):
    optimizer = NearestNeighborOptimizer()

    first = optimizer.optimize(stops, depot)
    second = optimizer.optimize(list(stops), depot)

    assert [s.id for s in first.stops] == [s.id for s in second.stops]
    assert [s.distance_from_previous for s in first.stops] == [s.distance_from_previous for s in second.stops]
    assert first.total_distance_meters == second.total_distance_meters
    assert first.total_duration_seconds == second.total_duration_seconds


def test_output_keeps_every_stop_once(stops, depot):
    route = NearestNeighborOptimizer().optimize(stops, depot)

    assert len(route.stops) == len(stops)
    assert sorted(s.sequence_index for s in route.stops) == list(range(1, len(stops) + 1))
    assert sorted(s.label for s in route.stops) == sorted(s.label for s in stops)
    assert all(s.estimated_arrival is None for s in route.stops)
    assert route.legs is None


def test_polyline_follows_the_tour():
    depot = Location(lat=0, lng=0)

    route = NearestNeighborOptimizer().optimize([stop("B", 0, 2), stop("A", 0, 1)], depot)

    assert decode_polyline(route.polyline) == [(0.0, 0.0), (0.0, 1.0), (0.0, 2.0), (0.0, 0.0)]


def test_custom_speed_and_service_time():
    depot = Location(lat=0, lng=0)

    route = NearestNeighborOptimizer(service_duration_seconds=60, average_speed_kmh=60).optimize(
        [stop("A", 0, 1)], depot
    )

    distance = 2 * haversine_distance(depot, Location(lat=0, lng=1))
    assert route.total_duration_seconds == round(distance / 1000 / 60 * 3600 + 60)


def test_haversine_one_degree_of_longitude_at_equator():
    assert haversine_distance(Location(lat=0, lng=0), Location(lat=0, lng=1)) == pytest.approx(111194.93, abs=0.01)
