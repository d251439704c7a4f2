"""
End-to-end layout properties.

Each test lays out a complete tree and checks a property that must hold for
any input: determinism, completeness, spacing within a rank, spouse
adjacency, direction symmetry and robustness to malformed graphs.
"""

import random
from collections import defaultdict

import pytest

from familyflow import FamilyTreeLayout, LayoutConfig, load_template, template_names
from familyflow.models import Placement, Position

from ..helpers import child, make_nodes, spouse


def random_family(seed, size=40):
    """A random forest of families with some spouses and stray edges."""
    rng = random.Random(seed)
    ids = [f"p{i}" for i in range(size)]
    edges = []
    for i, node_id in enumerate(ids[1:], start=1):
        roll = rng.random()
        other = ids[rng.randrange(i)]
        if roll < 0.6:
            edges.append(child(other, node_id))
        elif roll < 0.8:
            edges.append(spouse(other, node_id))
    # A few back edges and dangling references
    edges.append(child(ids[-1], ids[0]))
    edges.append(child("ghost", ids[3]))
    edges.append(spouse("phantom", ids[5]))
    return make_nodes(*ids), edges


GRAPHS = {
    "chain": (make_nodes("1", "2", "3"), [child("1", "2"), child("2", "3")]),
    "couple": (make_nodes("A", "B"), [spouse("A", "B")]),
    "cycle": (
        make_nodes("A", "B", "C"),
        [child("A", "B"), child("B", "C"), child("C", "A")],
    ),
    "chained": (
        make_nodes("A", "B", "C", "D"),
        [spouse("A", "B"), spouse("B", "C")],
    ),
    "isolated": (make_nodes("x", "y", "z"), []),
    "random": random_family(7),
}


@pytest.fixture(params=sorted(GRAPHS))
def any_graph(request):
    return GRAPHS[request.param]


@pytest.fixture(params=["TB", "LR"])
def direction(request):
    return request.param


class TestGeneralProperties:
    """Properties that hold for every input."""

    def test_deterministic(self, any_graph, direction):
        engine = FamilyTreeLayout()
        first = engine.compute(*any_graph, direction=direction)
        second = engine.compute(*any_graph, direction=direction)

        assert first.positions == second.positions
        assert first.nodes == second.nodes

    def test_idempotent_on_own_output(self, any_graph, direction):
        engine = FamilyTreeLayout()
        once, edges = engine.layout(*any_graph, direction=direction)
        twice, _ = engine.layout(once, edges, direction=direction)

        assert once == twice

    def test_complete(self, any_graph, direction):
        graph_nodes, edges = any_graph
        laid_out, _ = FamilyTreeLayout().layout(graph_nodes, edges, direction=direction)

        assert [n.id for n in laid_out] == [n.id for n in graph_nodes]
        for node in laid_out:
            assert isinstance(node.position, Position)
            assert node.position.x is not None and node.position.y is not None

    def test_placement_paths_are_exclusive(self, any_graph):
        result = FamilyTreeLayout().compute(*any_graph)
        for node in any_graph[0]:
            assert result.placements[node.id] in set(Placement)

        hierarchy = {n for n, p in result.placements.items() if p is Placement.HIERARCHY}
        assert hierarchy == set(result.hierarchy.nodes)

    def test_no_overlap_within_rank(self, any_graph, direction):
        config = LayoutConfig.for_direction(direction)
        result = FamilyTreeLayout().compute(*any_graph, direction=direction)
        horizontal = direction == "LR"

        by_rank = defaultdict(list)
        for node_id, node_layout in result.hierarchy.nodes.items():
            position = result.positions[node_id]
            primary, secondary = (position.x, position.y) if horizontal else (position.y, position.x)
            by_rank[primary].append(secondary)

        size = config.node_height if horizontal else config.node_width
        for secondaries in by_rank.values():
            secondaries.sort()
            for a, b in zip(secondaries, secondaries[1:]):
                assert b - a >= size + config.node_spacing

    def test_spouse_adjacency(self, any_graph, direction):
        graph_nodes, edges = any_graph
        config = LayoutConfig.for_direction(direction)
        result = FamilyTreeLayout().compute(graph_nodes, edges, direction=direction)

        for satellite, anchor in result.partition.anchor_of.items():
            if result.placements[satellite] is not Placement.SATELLITE:
                continue
            anchor_pos = result.positions[anchor]
            if direction == "TB":
                expected = Position(anchor_pos.x + config.node_width + 30, anchor_pos.y)
            else:
                expected = Position(anchor_pos.x, anchor_pos.y + config.node_height + 40)
            assert result.positions[satellite] == expected


class TestScenarios:
    """Concrete scenarios."""

    def test_simple_chain(self):
        result = FamilyTreeLayout().compute(*GRAPHS["chain"], direction="TB")

        assert [result.rank_of(n) for n in ("1", "2", "3")] == [0, 1, 2]
        ys = [result.positions[n].y for n in ("1", "2", "3")]
        xs = {result.positions[n].x for n in ("1", "2", "3")}
        assert ys[0] < ys[1] < ys[2]
        assert len(xs) == 1

    def test_spouse_pair(self):
        result = FamilyTreeLayout().compute(*GRAPHS["couple"], direction="TB")

        a = result.positions["A"]
        assert result.placements["A"] is Placement.HIERARCHY
        assert result.rank_of("A") == 0
        assert result.positions["B"] == Position(a.x + 140 + 30, a.y)

    def test_direction_symmetry(self):
        engine = FamilyTreeLayout()
        vertical = engine.compute(*GRAPHS["chain"], direction="TB").positions
        horizontal = engine.compute(*GRAPHS["chain"], direction="LR").positions
        chain = ("1", "2", "3")

        assert [vertical[n].y for n in chain] == sorted({vertical[n].y for n in chain})
        assert len({vertical[n].x for n in chain}) == 1
        assert [horizontal[n].x for n in chain] == sorted({horizontal[n].x for n in chain})
        assert len({horizontal[n].y for n in chain}) == 1

    def test_cycle_robustness(self):
        result = FamilyTreeLayout().compute(*GRAPHS["cycle"])

        assert result.hierarchy.has_cycles
        assert set(result.positions) == {"A", "B", "C"}

    def test_relayout_after_add(self):
        engine = FamilyTreeLayout()
        graph_nodes, edges = make_nodes("1", "2"), [child("1", "2")]

        first = engine.compute(graph_nodes, edges)
        assert (first.rank_of("1"), first.rank_of("2")) == (0, 1)

        graph_nodes = first.nodes + make_nodes("3")
        edges = edges + [child("2", "3")]
        second = engine.compute(graph_nodes, edges)

        assert (second.rank_of("1"), second.rank_of("2"), second.rank_of("3")) == (0, 1, 2)
        assert second.positions["1"] == first.positions["1"]
        assert second.positions["2"] == first.positions["2"]

    def test_adding_children_keeps_ancestor_order(self):
        engine = FamilyTreeLayout()
        graph_nodes = make_nodes("gp1", "gp2", "c1", "c2")
        edges = [child("gp1", "c1"), child("gp2", "c2")]
        before = engine.compute(graph_nodes, edges).hierarchy.layers[0]

        graph_nodes = graph_nodes + make_nodes("k1", "k2", "k3")
        edges = edges + [child("c2", "k1"), child("c2", "k2"), child("c1", "k3")]
        after = engine.compute(graph_nodes, edges).hierarchy.layers[0]

        assert before == after == ["gp1", "gp2"]

    def test_satellite_children_are_not_ranked(self):
        graph_nodes = make_nodes("A", "B", "K")
        edges = [spouse("A", "B"), child("B", "K")]

        result = FamilyTreeLayout().compute(graph_nodes, edges)

        assert result.placements["B"] is Placement.SATELLITE
        assert result.rank_of("K") == 0

    def test_family_with_spouses(self, family_graph):
        result = FamilyTreeLayout().compute(*family_graph)
        positions = result.positions

        assert positions["gm"] == positions["gp"].offset(170, 0)
        assert positions["mum"] == positions["dad"].offset(170, 0)
        assert positions["kid1"].y == positions["kid2"].y > positions["dad"].y

    @pytest.mark.parametrize("name", template_names())
    def test_templates_lay_out(self, name, direction):
        document = load_template(name)
        result = FamilyTreeLayout().compute(document.nodes, document.edges, direction=direction)

        assert set(result.placements.values()) == {Placement.HIERARCHY}
        assert len(set(result.positions.values())) == len(document.nodes)


def boxes_overlap(a, b, width, height):
    return (
        a.x < b.x + width
        and b.x < a.x + width
        and a.y < b.y + height
        and b.y < a.y + height
    )


class TestSatelliteClearance:
    """Satellite boxes never run into the next node of their rank."""

    @pytest.mark.parametrize(
        "graph",
        [
            GRAPHS["chained"],
            (
                make_nodes("A", "B", "C", "D", "E"),
                [spouse("A", "B"), spouse("B", "C"), spouse("C", "D")],
            ),
            (
                make_nodes("gp", "gm", "x", "dad", "mum", "kid"),
                [
                    spouse("gp", "gm"),
                    spouse("gm", "x"),
                    child("gp", "dad"),
                    spouse("dad", "mum"),
                    child("dad", "kid"),
                ],
            ),
        ],
    )
    @pytest.mark.parametrize("overrides", [{}, {"node_spacing": 20}])
    def test_no_box_overlaps(self, graph, direction, overrides):
        engine = FamilyTreeLayout(**overrides)
        result = engine.compute(*graph, direction=direction)
        config = engine.config_for(result.direction)

        placed = sorted(result.positions.items())
        for i, (first, a) in enumerate(placed):
            for second, b in placed[i + 1 :]:
                assert not boxes_overlap(a, b, config.node_width, config.node_height), (
                    first,
                    second,
                )

    def test_chained_satellites_clear_isolated_node(self):
        result = FamilyTreeLayout().compute(*GRAPHS["chained"], direction="TB")

        assert result.positions["A"] == Position(150, 150)
        assert result.positions["B"] == Position(320, 150)
        assert result.positions["C"] == Position(490, 150)
        assert result.positions["D"] == Position(790, 150)
        assert result.hierarchy.nodes["D"].order == 1
