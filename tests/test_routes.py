"""Tests for route synthesis and the spanning forest reduction."""

import itertools

import pytest

from py_subsector.core.alea_prng import AleaPRNG
from py_subsector.core.geometry import HexGeometry, SquareGeometry
from py_subsector.core.routes import (
    COMMUNICATION_RULE,
    TRADE_RULES,
    DisjointSet,
    Route,
    RouteKind,
    RouteSynthesizer,
    WorldProfile,
    has_any,
    matches_symmetric,
    minimum_spanning_forest,
)
from py_subsector.core.system_generator import StarSystem, SystemGenerator, WorldFlag


def make_system(**overrides):
    """A world with no trade classifications unless overridden."""
    values = dict(
        size=5, atmosphere=3, hydrographics=5, population=7, government=3,
        law=3, tech=8, starport="C", name="Plain",
    )
    values.update(overrides)
    return StarSystem(**values)


def make_rich(**overrides):
    values = dict(atmosphere=6, hydrographics=2, population=7, government=5)
    values.update(overrides)
    return make_system(**values)


def components(nodes, edges):
    """Count connected components with a plain traversal."""
    adjacency = {node: set() for node in nodes}
    for edge in edges:
        adjacency[edge.source].add(edge.target)
        adjacency[edge.target].add(edge.source)
    seen = set()
    count = 0
    for node in nodes:
        if node in seen:
            continue
        count += 1
        stack = [node]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            stack.extend(adjacency[current] - seen)
    return count


class TestRules:
    """Test the compatibility rules."""

    def test_fixture_worlds(self):
        assert make_system().flags == frozenset({WorldFlag.GAS})
        assert make_rich().flags == frozenset({WorldFlag.GAS, WorldFlag.RICH})

    def test_symmetric_match(self):
        rule = (has_any(WorldFlag.RICH), has_any(WorldFlag.LOW))
        rich = WorldProfile.of(make_rich())
        low = WorldProfile.of(make_system(population=2))
        assert matches_symmetric(rule, rich, low)
        assert matches_symmetric(rule, low, rich)
        assert not matches_symmetric(rule, rich, rich)
        assert not matches_symmetric(rule, low, low)

    def test_all_rules_symmetric_on_generated_worlds(self):
        generator = SystemGenerator(prng=AleaPRNG("rules"))
        worlds = [WorldProfile.of(generator.generate()) for _ in range(40)]
        for a, b in itertools.combinations(worlds, 2):
            for rule in TRADE_RULES + [COMMUNICATION_RULE]:
                assert matches_symmetric(rule, a, b) == matches_symmetric(rule, b, a)

    def test_communication_hubs(self):
        a_port = WorldProfile.of(make_system(starport="A"))
        b_port = WorldProfile.of(make_system(starport="B"))
        naval = WorldProfile.of(make_system(starport="C", naval_base=True))
        plain = WorldProfile.of(make_system(starport="C"))

        assert matches_symmetric(COMMUNICATION_RULE, a_port, b_port)
        assert matches_symmetric(COMMUNICATION_RULE, a_port, naval)
        assert not matches_symmetric(COMMUNICATION_RULE, a_port, plain)


class TestDisjointSet:
    """Test the union-find structure."""

    def test_union_and_find(self):
        clusters = DisjointSet(6)
        assert clusters.union(0, 1)
        assert clusters.union(2, 3)
        assert clusters.find(0) == clusters.find(1)
        assert clusters.find(0) != clusters.find(2)
        assert clusters.union(1, 3)
        assert clusters.find(0) == clusters.find(2)
        assert not clusters.union(0, 3)
        assert clusters.find(4) == 4

    def test_path_compression(self):
        clusters = DisjointSet(5)
        for i in range(4):
            clusters.union(i, i + 1)
        root = clusters.find(4)
        for i in range(5):
            clusters.find(i)
            assert clusters.parent[i] == root


class TestMinimumSpanningForest:
    """Test Kruskal's reduction."""

    def test_empty(self):
        assert minimum_spanning_forest([]) == []

    def test_triangle_drops_longest_edge(self):
        edges = [
            Route(0, 1, 1, RouteKind.TRADE),
            Route(1, 2, 2, RouteKind.TRADE),
            Route(0, 2, 1, RouteKind.TRADE),
        ]
        assert minimum_spanning_forest(edges) == [edges[0], edges[2]]

    def test_ties_keep_enumeration_order(self):
        edges = [
            Route(0, 1, 2, RouteKind.TRADE),
            Route(1, 2, 2, RouteKind.TRADE),
            Route(0, 2, 2, RouteKind.TRADE),
        ]
        assert minimum_spanning_forest(edges) == edges[:2]

    def test_forest_of_separate_components(self):
        edges = [
            Route(0, 1, 1, RouteKind.COMMUNICATION),
            Route(10, 11, 2, RouteKind.COMMUNICATION),
        ]
        assert minimum_spanning_forest(edges) == edges

    def test_random_graphs(self):
        """Acyclic, spanning, minimal and idempotent on random candidate sets."""
        prng = AleaPRNG("graphs")
        for _ in range(30):
            nodes = list(range(20))
            edges = [
                Route(a, b, 1 + prng.below(3), RouteKind.TRADE)
                for a, b in itertools.combinations(nodes, 2)
                if prng.random() < 0.15
            ]
            tree = minimum_spanning_forest(edges)

            # every accepted edge merges two distinct components
            clusters = DisjointSet(len(nodes))
            for edge in tree:
                assert clusters.union(edge.source, edge.target)

            # same connectivity as the candidate graph
            touched = sorted({n for edge in edges for n in (edge.source, edge.target)})
            assert len(tree) == len(touched) - components(touched, edges)

            # idempotent
            assert minimum_spanning_forest(tree) == tree

            # no lighter forest exists: Kruskal on the tree and on all edges weigh the same
            assert sum(e.distance for e in tree) <= sum(
                e.distance for e in minimum_spanning_forest(list(reversed(edges)))
            )


class TestRouteSynthesizer:
    """Test route synthesis over system maps."""

    def test_two_hub_systems_one_communication_route(self):
        systems = {
            0: make_system(starport="A", naval_base=True),
            1: make_system(starport="A", naval_base=True),
        }
        routes = RouteSynthesizer(SquareGeometry(8, 10)).synthesize(systems)
        assert routes.communication == ["0101-0201 communication"]
        assert routes.trade == []
        assert routes.rich_trade == []

    def test_communication_needs_hub_at_both_ends(self):
        systems = {0: make_system(starport="A"), 1: make_system(starport="C")}
        routes = RouteSynthesizer(SquareGeometry(8, 10)).synthesize(systems)
        assert routes.communication == []

    def test_communication_range(self):
        geometry = SquareGeometry(8, 10)
        near = {0: make_system(starport="B"), 2: make_system(starport="B")}
        far = {0: make_system(starport="B"), 3: make_system(starport="B")}
        assert RouteSynthesizer(geometry).synthesize(near).communication == [
            "0101-0301 communication"
        ]
        assert RouteSynthesizer(geometry).synthesize(far).communication == []

    def test_rich_trade_reaches_further(self):
        systems = {0: make_rich(), 3: make_system(population=2)}
        routes = RouteSynthesizer(SquareGeometry(8, 10)).synthesize(systems)
        assert routes.rich_trade == ["0101-0401 rich"]
        assert routes.trade == []

    def test_trade_triangle_reduced(self):
        systems = {0: make_rich(), 1: make_rich(), 8: make_rich()}
        routes = RouteSynthesizer(SquareGeometry(8, 10)).synthesize(systems)
        assert routes.trade == ["0101-0102 trade", "0101-0201 trade"]
        assert routes.rich_trade == ["0101-0102 rich", "0101-0201 rich"]

    def test_starport_x_excluded(self):
        systems = {
            0: make_rich(starport="A", naval_base=True),
            1: make_rich(starport="X"),
            2: make_rich(starport="A", naval_base=True),
        }
        routes = RouteSynthesizer(SquareGeometry(8, 10)).synthesize(systems)
        for label in routes.all_labels():
            assert "0201" not in label
        assert routes.communication == ["0101-0301 communication"]
        assert routes.trade == ["0101-0301 trade"]

    def test_geometry_changes_distances(self):
        """Two columns over and one row down is 3 squares but 2 hexes."""
        systems = {0: make_system(starport="A"), 10: make_system(starport="A")}
        square = RouteSynthesizer(SquareGeometry(8, 10)).synthesize(systems)
        hexes = RouteSynthesizer(HexGeometry(8, 10)).synthesize(systems)
        assert square.communication == []
        assert hexes.communication == ["0101-0302 communication"]

    def test_labels_sorted_and_well_formed(self):
        generator = SystemGenerator(prng=AleaPRNG("labels"))
        systems = {cell: generator.generate() for cell in range(0, 80, 2)}
        routes = RouteSynthesizer(SquareGeometry(8, 10)).synthesize(systems)

        for labels, kind in (
            (routes.communication, "communication"),
            (routes.trade, "trade"),
            (routes.rich_trade, "rich"),
        ):
            assert labels == sorted(labels)
            for label in labels:
                coords, suffix = label.split(" ")
                assert suffix == kind
                source, target = coords.split("-")
                assert len(source) == len(target) == 4

    def test_as_dict(self):
        routes = RouteSynthesizer(SquareGeometry(8, 10)).synthesize({})
        assert routes.as_dict() == {"communication": [], "trade": [], "rich_trade": []}
        assert len(routes) == 0

    @pytest.mark.parametrize("seed", ["a", "b", "c"])
    def test_routes_form_forests(self, seed):
        """No route class contains a cycle."""
        generator = SystemGenerator(prng=AleaPRNG(seed))
        geometry = SquareGeometry(8, 10)
        systems = {cell: generator.generate() for cell in range(80) if cell % 3}
        synthesizer = RouteSynthesizer(geometry)
        routes = synthesizer.synthesize(systems)
        for labels in routes.as_dict().values():
            clusters = DisjointSet(geometry.size)
            for label in labels:
                source, target = label.split(" ")[0].split("-")
                a = geometry.xy_to_index(int(source[:2]), int(source[2:]))
                b = geometry.xy_to_index(int(target[:2]), int(target[2:]))
                assert clusters.union(a, b)
