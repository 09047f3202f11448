"""
Route synthesis between star systems.

Candidate links are enumerated for every pair of systems with a working
starport, classified into communication, trade and rich-trade routes, and
each class is thinned to a minimum spanning forest with Kruskal's algorithm.
The result is a sparse network: every pair of connected systems keeps exactly
one path per route class.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, List, Mapping, NamedTuple, Tuple

import numpy as np
import structlog

from .geometry import GridGeometry
from .system_generator import StarSystem, Starport, WorldFlag

logger = structlog.get_logger()


class RouteKind(str, Enum):
    """Route classes. Values are the label suffixes."""

    COMMUNICATION = "communication"
    TRADE = "trade"
    RICH = "rich"


class Route(NamedTuple):
    """Candidate or accepted link between two cells."""

    source: int
    target: int
    distance: int
    kind: RouteKind


# Maximum distance per route class.
ROUTE_RANGE: Dict[RouteKind, int] = {
    RouteKind.COMMUNICATION: 2,
    RouteKind.TRADE: 2,
    RouteKind.RICH: 3,
}


@dataclass(frozen=True)
class WorldProfile:
    """What the route rules look at: starport class and classification flags."""

    starport: Starport
    flags: FrozenSet[WorldFlag]

    @classmethod
    def of(cls, system: StarSystem) -> WorldProfile:
        return cls(starport=system.starport, flags=system.flags)


Predicate = Callable[[WorldProfile], bool]
Rule = Tuple[Predicate, Predicate]


def has_any(*flags: WorldFlag) -> Predicate:
    """Predicate: the world carries at least one of ``flags``."""
    wanted = frozenset(flags)
    return lambda world: not wanted.isdisjoint(world.flags)


def has_starport(*classes: Starport) -> Predicate:
    """Predicate: the world's starport is one of ``classes``."""
    wanted = frozenset(classes)
    return lambda world: world.starport in wanted


def either(*predicates: Predicate) -> Predicate:
    """Predicate: any of ``predicates`` holds."""
    return lambda world: any(p(world) for p in predicates)


def matches_symmetric(rule: Rule, a: WorldProfile, b: WorldProfile) -> bool:
    """True if one world satisfies the first half of ``rule`` and the other the second."""
    first, second = rule
    return (first(a) and second(b)) or (second(a) and first(b))


F = WorldFlag

HUB = either(has_starport(Starport.A, Starport.B), has_any(F.NAVAL))

COMMUNICATION_RULE: Rule = (HUB, HUB)

TRADE_RULES: List[Rule] = [
    (
        has_any(F.AGRICULTURE),
        has_any(
            F.AGRICULTURE, F.DESERT, F.HIGH, F.INDUSTRIAL, F.LOW,
            F.NON_AGRICULTURE, F.RICH,
        ),
    ),
    (
        has_any(F.ASTEROID),
        has_any(F.ASTEROID, F.INDUSTRIAL, F.NON_AGRICULTURE, F.RICH, F.VACUUM),
    ),
    (has_any(F.DESERT), has_any(F.DESERT, F.NON_AGRICULTURE)),
    (has_any(F.FLUID), has_any(F.FLUID, F.INDUSTRIAL)),
    (has_any(F.HIGH), has_any(F.HIGH, F.LOW, F.RICH)),
    (has_any(F.ICE), has_any(F.INDUSTRIAL)),
    (
        has_any(F.INDUSTRIAL),
        has_any(
            F.AGRICULTURE, F.DESERT, F.FLUID, F.HIGH, F.INDUSTRIAL,
            F.NON_INDUSTRIAL, F.POOR, F.RICH, F.VACUUM, F.WATER,
        ),
    ),
    (has_any(F.LOW), has_any(F.INDUSTRIAL, F.RICH)),
    (has_any(F.NON_AGRICULTURE), has_any(F.ASTEROID, F.DESERT, F.VACUUM)),
    (has_any(F.NON_INDUSTRIAL), has_any(F.INDUSTRIAL)),
    (
        has_any(F.RICH),
        has_any(F.AGRICULTURE, F.DESERT, F.HIGH, F.INDUSTRIAL, F.NON_AGRICULTURE, F.RICH),
    ),
    (has_any(F.VACUUM), has_any(F.ASTEROID, F.INDUSTRIAL, F.VACUUM)),
    (has_any(F.WATER), has_any(F.INDUSTRIAL, F.RICH, F.WATER)),
]

# subsidized liners only
RICH_TRADE_RULE: Rule = (
    has_any(F.RICH),
    has_any(
        F.AGRICULTURE, F.ASTEROID, F.DESERT, F.HIGH, F.INDUSTRIAL, F.LOW,
        F.NON_AGRICULTURE, F.RICH, F.WATER,
    ),
)


def is_trade_partner(a: WorldProfile, b: WorldProfile) -> bool:
    return any(matches_symmetric(rule, a, b) for rule in TRADE_RULES)


class DisjointSet:
    """Union-find over cell indices with path compression and union by rank."""

    def __init__(self, size: int):
        self.parent = np.arange(size, dtype=np.int64)
        self.rank = np.zeros(size, dtype=np.int8)

    def find(self, i: int) -> int:
        root = i
        while self.parent[root] != root:
            root = int(self.parent[root])
        while self.parent[i] != root:
            next_i = int(self.parent[i])
            self.parent[i] = root
            i = next_i
        return root

    def union(self, a: int, b: int) -> bool:
        """Merge the components of ``a`` and ``b``; False if already merged."""
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return False
        if self.rank[root_a] < self.rank[root_b]:
            root_a, root_b = root_b, root_a
        self.parent[root_b] = root_a
        if self.rank[root_a] == self.rank[root_b]:
            self.rank[root_a] += 1
        return True


def minimum_spanning_forest(edges: Iterable[Route]) -> List[Route]:
    """
    Reduce candidate routes to a minimum spanning forest (Kruskal).

    Edges are considered by ascending distance; equal distances keep their
    input order. An edge is accepted only if it joins two different
    components, so the result never contains a cycle.

    Args:
        edges: Candidate routes of a single class

    Returns:
        Accepted routes in acceptance order
    """
    queue = sorted(edges, key=lambda edge: edge.distance)
    if not queue:
        return []

    size = 1 + max(max(edge.source, edge.target) for edge in queue)
    clusters = DisjointSet(size)
    return [edge for edge in queue if clusters.union(edge.source, edge.target)]


@dataclass
class SubsectorRoutes:
    """Sorted route labels per class."""

    communication: List[str] = field(default_factory=list)
    trade: List[str] = field(default_factory=list)
    rich_trade: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, List[str]]:
        return {
            "communication": self.communication,
            "trade": self.trade,
            "rich_trade": self.rich_trade,
        }

    def all_labels(self) -> List[str]:
        """Labels in output order: rich trade, communication, trade."""
        return self.rich_trade + self.communication + self.trade

    def __len__(self) -> int:
        return len(self.communication) + len(self.trade) + len(self.rich_trade)


class RouteSynthesizer:
    """Builds the three route networks of a subsector."""

    def __init__(self, geometry: GridGeometry):
        self.geometry = geometry

    def candidates(self, systems: Mapping[int, StarSystem]) -> Dict[RouteKind, List[Route]]:
        """Enumerate every qualifying route, per class, before thinning."""
        worlds = {
            cell: WorldProfile.of(system)
            for cell, system in sorted(systems.items())
            if system.has_starport
        }
        positions = {cell: self.geometry.index_to_xy(cell) for cell in worlds}
        cells = list(worlds)

        edges: Dict[RouteKind, List[Route]] = {kind: [] for kind in RouteKind}
        for n, source in enumerate(cells):
            a = worlds[source]
            for target in cells[n + 1:]:
                b = worlds[target]
                d = self.geometry.distance(positions[source], positions[target])
                if d <= ROUTE_RANGE[RouteKind.COMMUNICATION] and matches_symmetric(
                    COMMUNICATION_RULE, a, b
                ):
                    edges[RouteKind.COMMUNICATION].append(
                        Route(source, target, d, RouteKind.COMMUNICATION)
                    )
                if d <= ROUTE_RANGE[RouteKind.TRADE] and is_trade_partner(a, b):
                    edges[RouteKind.TRADE].append(Route(source, target, d, RouteKind.TRADE))
                if d <= ROUTE_RANGE[RouteKind.RICH] and matches_symmetric(
                    RICH_TRADE_RULE, a, b
                ):
                    edges[RouteKind.RICH].append(Route(source, target, d, RouteKind.RICH))
        return edges

    def label(self, route: Route) -> str:
        """Render a route as ``0101-0202 trade``."""
        return (
            f"{self.geometry.label(route.source)}-"
            f"{self.geometry.label(route.target)} {route.kind.value}"
        )

    def synthesize(self, systems: Mapping[int, StarSystem]) -> SubsectorRoutes:
        """
        Compute communication, trade and rich-trade routes.

        Args:
            systems: Star systems keyed by cell index

        Returns:
            SubsectorRoutes with lexicographically sorted labels per class
        """
        logger.info("Synthesizing routes", systems=len(systems))
        candidates = self.candidates(systems)

        labels: Dict[RouteKind, List[str]] = {}
        for kind, edges in candidates.items():
            tree = minimum_spanning_forest(edges)
            labels[kind] = sorted(self.label(route) for route in tree)
            logger.debug(
                "Route class reduced", kind=kind.value, candidates=len(edges), kept=len(tree)
            )

        routes = SubsectorRoutes(
            communication=labels[RouteKind.COMMUNICATION],
            trade=labels[RouteKind.TRADE],
            rich_trade=labels[RouteKind.RICH],
        )
        logger.info(
            "Routes synthesized",
            communication=len(routes.communication),
            trade=len(routes.trade),
            rich_trade=len(routes.rich_trade),
        )
        return routes
