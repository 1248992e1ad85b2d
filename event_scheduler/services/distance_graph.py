"""
City distance graph.

Undirected weighted graph over cities where the edge weight is the travel
time in hours. Answers symmetric travel-time lookups and reports which city
pairs have no recorded travel time yet.
"""

from collections.abc import Iterable
from itertools import combinations

from event_scheduler.domain import (
    AUTO_GENERATED_NOTE,
    CityDistance,
    CityPair,
)
from event_scheduler.domain.city import validate_travel_hours


class CityDistanceGraph:
    """
    Symmetric travel-time lookup with one edge per unordered city pair.

    Edges are keyed by canonical ``CityPair`` so (A, B) and (B, A) always
    resolve to the same entry. Same-city travel is 0 hours without an edge.

    Usage:
        graph = CityDistanceGraph(city_ids=[1, 2, 3])
        graph.upsert_edge(1, 2, 1.5)
        graph.travel_time(2, 1)           # 1.5
        graph.find_missing_pairs([1, 2, 3])
    """

    def __init__(self, city_ids: Iterable[int] = ()):
        self._edges: dict[CityPair, CityDistance] = {}
        self._city_ids: list[int] = list(dict.fromkeys(city_ids))

    @classmethod
    def from_distances(
        cls,
        distances: Iterable[CityDistance],
        city_ids: Iterable[int] = (),
    ) -> "CityDistanceGraph":
        """
        Build a graph from loaded distance rows.

        Rows stored in reverse order are folded onto the canonical pair; if
        both directions exist the later row wins.
        """
        graph = cls(city_ids)
        for distance in distances:
            graph.upsert_edge(
                distance.from_city_id,
                distance.to_city_id,
                distance.travel_time_hours,
                notes=distance.notes,
                edge_id=distance.id,
            )
        return graph

    @property
    def city_ids(self) -> list[int]:
        return list(self._city_ids)

    def __len__(self) -> int:
        return len(self._edges)

    def __contains__(self, pair: object) -> bool:
        return pair in self._edges

    def edges(self) -> list[CityDistance]:
        """All edges ordered by canonical pair."""
        return [self._edges[pair] for pair in sorted(self._edges, key=CityPair.as_tuple)]

    def get_edge(self, city_a: int, city_b: int) -> CityDistance | None:
        if city_a == city_b:
            return None
        return self._edges.get(CityPair.of(city_a, city_b))

    def travel_time(self, city_a: int, city_b: int) -> float | None:
        """
        Travel time in hours between two cities, in either order.

        Returns:
            0.0 for the same city, None when no edge is recorded
        """
        if city_a == city_b:
            return 0.0
        edge = self._edges.get(CityPair.of(city_a, city_b))
        return edge.travel_time_hours if edge else None

    def upsert_edge(
        self,
        city_a: int,
        city_b: int,
        hours: float,
        notes: str | None = None,
        edge_id: int | None = None,
    ) -> tuple[CityDistance, bool]:
        """
        Insert or update the edge between two cities.

        Args:
            city_a: First city id
            city_b: Second city id (order does not matter)
            hours: Travel time in hours, 0 to 999.99
            notes: Optional free text
            edge_id: Storage id when the edge comes from the database

        Returns:
            Tuple of (stored edge, True if a new edge was created)

        Raises:
            InvalidEdgeError: If the cities are the same or hours are out of range
        """
        pair = CityPair.of(city_a, city_b)
        value = validate_travel_hours(hours)

        existing = self._edges.get(pair)
        if existing is not None:
            edge = existing.model_copy(
                update={
                    "travel_time_hours": value,
                    "notes": notes if notes is not None else existing.notes,
                    "id": edge_id if edge_id is not None else existing.id,
                }
            )
        else:
            edge = CityDistance(
                from_city_id=pair.first,
                to_city_id=pair.second,
                travel_time_hours=value,
                notes=notes,
                id=edge_id,
            )
        self._edges[pair] = edge

        for city_id in pair.as_tuple():
            if city_id not in self._city_ids:
                self._city_ids.append(city_id)

        return edge, existing is None

    def remove_edge(self, city_a: int, city_b: int) -> bool:
        """Remove an edge. Returns False if there was none."""
        if city_a == city_b:
            return False
        return self._edges.pop(CityPair.of(city_a, city_b), None) is not None

    def find_missing_pairs(self, active_city_ids: Iterable[int]) -> list[CityPair]:
        """
        Every unordered pair of distinct cities without a recorded edge.

        Pairs come back in ascending canonical order; duplicate ids in the
        input are ignored.
        """
        ids = sorted(set(active_city_ids))
        return [
            CityPair(first=a, second=b)
            for a, b in combinations(ids, 2)
            if CityPair(first=a, second=b) not in self._edges
        ]

    def fill_missing_with_default(
        self,
        default_hours: float,
        active_city_ids: Iterable[int] | None = None,
    ) -> list[CityDistance]:
        """
        Create an edge with ``default_hours`` for every missing pair.

        Idempotent: pairs that already have an edge are left untouched, so a
        second run creates nothing.

        Returns:
            The edges created by this call
        """
        value = validate_travel_hours(default_hours)
        ids = self._city_ids if active_city_ids is None else active_city_ids

        created = []
        for pair in self.find_missing_pairs(ids):
            edge, _ = self.upsert_edge(pair.first, pair.second, value, notes=AUTO_GENERATED_NOTE)
            created.append(edge)
        return created

    def matrix(self, city_ids: Iterable[int]) -> list[list[float | None]]:
        """Square travel-time matrix in the given city order (None = unknown)."""
        ids = list(city_ids)
        return [[self.travel_time(a, b) for b in ids] for a in ids]
