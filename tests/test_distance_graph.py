"""Tests for the city distance graph."""

import pytest

from event_scheduler.domain import AUTO_GENERATED_NOTE, CityDistance, CityPair, InvalidEdgeError
from event_scheduler.services import CityDistanceGraph


class TestTravelTime:
    """Tests for travel time lookups."""

    def test_symmetric(self, graph):
        """Lookup works in both directions."""
        assert graph.travel_time(1, 2) == 1.5
        assert graph.travel_time(2, 1) == 1.5

    def test_same_city_is_zero(self, graph):
        assert graph.travel_time(3, 3) == 0.0

    def test_unknown_pair(self, graph):
        assert graph.travel_time(1, 3) is None
        assert graph.get_edge(3, 1) is None


class TestUpsertEdge:
    """Tests for edge upserts."""

    def test_reverse_order_updates_same_edge(self):
        """Upserting (2, 1) after (1, 2) updates instead of duplicating."""
        graph = CityDistanceGraph()

        _, created = graph.upsert_edge(1, 2, 1.5)
        edge, created_again = graph.upsert_edge(2, 1, 1.5)

        assert created is True
        assert created_again is False
        assert len(graph) == 1
        assert (edge.from_city_id, edge.to_city_id) == (1, 2)
        assert graph.find_missing_pairs([1, 2]) == []

    def test_update_keeps_notes_unless_given(self):
        graph = CityDistanceGraph()
        graph.upsert_edge(1, 2, 1.5, notes="Direct flight")

        edge, _ = graph.upsert_edge(1, 2, 2.0)

        assert edge.travel_time_hours == 2.0
        assert edge.notes == "Direct flight"

    def test_self_loop_rejected(self):
        graph = CityDistanceGraph()
        with pytest.raises(InvalidEdgeError):
            graph.upsert_edge(4, 4, 1.0)
        assert len(graph) == 0

    @pytest.mark.parametrize("hours", [-1, 1000, float("nan")])
    def test_out_of_range_rejected(self, hours):
        graph = CityDistanceGraph()
        with pytest.raises(InvalidEdgeError):
            graph.upsert_edge(1, 2, hours)

    def test_registers_cities(self):
        graph = CityDistanceGraph()
        graph.upsert_edge(5, 2, 3.0)
        assert graph.city_ids == [2, 5]

    def test_remove_edge(self, graph):
        assert graph.remove_edge(2, 1) is True
        assert graph.remove_edge(2, 1) is False
        assert graph.travel_time(1, 2) is None


class TestMissingPairs:
    """Tests for gap detection and backfill."""

    def test_find_missing_pairs(self, graph):
        missing = graph.find_missing_pairs([3, 1, 2, 2])
        assert [p.as_tuple() for p in missing] == [(1, 3), (2, 3)]

    def test_single_city_has_no_pairs(self, graph):
        assert graph.find_missing_pairs([1]) == []

    def test_fill_missing_is_idempotent(self, graph):
        created = graph.fill_missing_with_default(5.0)

        assert [e.pair.as_tuple() for e in created] == [(1, 3), (2, 3)]
        assert all(e.is_auto_generated for e in created)
        assert all(e.notes == AUTO_GENERATED_NOTE for e in created)
        assert graph.travel_time(3, 1) == 5.0
        # Recorded edges are left untouched
        assert graph.travel_time(1, 2) == 1.5

        assert graph.fill_missing_with_default(5.0) == []
        assert graph.find_missing_pairs([1, 2, 3]) == []

    def test_fill_missing_limited_to_given_cities(self, graph):
        created = graph.fill_missing_with_default(4.0, active_city_ids=[1, 3])
        assert [e.pair.as_tuple() for e in created] == [(1, 3)]
        assert graph.travel_time(2, 3) is None

    def test_fill_missing_rejects_bad_default(self, graph):
        with pytest.raises(InvalidEdgeError):
            graph.fill_missing_with_default(-2)


class TestGraphConstruction:
    """Tests for building graphs from stored rows."""

    def test_from_distances_folds_reverse_rows(self):
        graph = CityDistanceGraph.from_distances(
            [
                CityDistance(id=1, from_city_id=1, to_city_id=2, travel_time_hours=1.5),
                CityDistance(id=2, from_city_id=3, to_city_id=1, travel_time_hours=4.0),
            ]
        )

        assert len(graph) == 2
        assert CityPair.of(1, 3) in graph
        assert graph.get_edge(1, 3).id == 2
        assert [e.pair.as_tuple() for e in graph.edges()] == [(1, 2), (1, 3)]

    def test_matrix(self, graph):
        assert graph.matrix([1, 2, 3]) == [
            [0.0, 1.5, None],
            [1.5, 0.0, None],
            [None, None, 0.0],
        ]
