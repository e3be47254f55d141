"""
Tests for the graph runners against brute-force references.

Run with: pytest tests/test_graph.py -v
"""

import asyncio
import itertools
import math
from collections import deque

import numpy as np
import pytest

from api.runners.generators import Graph, generate_graph
from api.runners.graph import UnionFind
from api.runners.registry import AlgorithmType
from api.runners.settings import AlgorithmSettings, GraphType

GRAPH_TYPES = list(GraphType)


def settings_for(graph_type):
    return AlgorithmSettings(graph_type=graph_type)


def reference_hops(graph: Graph, start: int):
    hops = {start: 0}
    queue = deque([start])
    while queue:
        node = queue.popleft()
        for neighbor in graph.neighbors(node):
            if neighbor not in hops:
                hops[neighbor] = hops[node] + 1
                queue.append(neighbor)
    return hops


def reference_shortest(graph: Graph, start: int):
    """Shortest distances by enumerating every simple path."""
    weights = {}
    for e in graph.edges:
        key = frozenset((e.source, e.target))
        weights[key] = min(weights.get(key, math.inf), e.weight)

    best = {n.id: math.inf for n in graph.nodes}

    def walk(node, visited, cost):
        best[node] = min(best[node], cost)
        for neighbor in graph.neighbors(node):
            if neighbor not in visited:
                walk(neighbor, visited | {neighbor}, cost + weights[frozenset((node, neighbor))])

    walk(start, {start}, 0)
    return best


def reference_mst_weight(graph: Graph) -> int:
    n = len(graph.nodes)
    best = math.inf
    for subset in itertools.combinations(graph.edges, n - 1):
        uf = UnionFind(n)
        if all(uf.union(e.source, e.target) for e in subset):
            best = min(best, sum(e.weight for e in subset))
    return best


def path_weight(graph: Graph, path):
    total = 0
    for a, b in zip(path, path[1:]):
        total += min(e.weight for e in graph.edges if {e.source, e.target} == {a, b})
    return total


class TestGenerators:
    def test_sparse_sample_topology(self):
        graph = generate_graph(GraphType.SPARSE)
        assert len(graph.nodes) == 6
        assert len(graph.edges) == 7
        assert graph.neighbors(0) == [1, 3]
        assert graph.neighbors(4) == [1, 3, 5]

    @pytest.mark.parametrize("graph_type", GRAPH_TYPES)
    def test_weights_in_range(self, graph_type):
        graph = generate_graph(graph_type, np.random.default_rng(3))
        assert all(1 <= e.weight <= 10 for e in graph.edges)

    def test_edge_counts(self):
        assert len(generate_graph(GraphType.COMPLETE).edges) == 15
        assert len(generate_graph(GraphType.CHAIN).edges) == 5
        assert len(generate_graph(GraphType.TREE).edges) == 5


class TestTraversal:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm_type", [AlgorithmType.BFS, AlgorithmType.DFS])
    @pytest.mark.parametrize("graph_type", GRAPH_TYPES)
    async def test_visits_every_reachable_node_once(self, make_runner, algorithm_type, graph_type):
        runner = make_runner(algorithm_type, settings_for(graph_type))

        await runner.run()

        order = runner.algorithm.visit_order
        reachable = set(reference_hops(runner.algorithm.graph, 0))
        assert order[0] == 0
        assert len(order) == len(set(order))
        assert set(order) == reachable

    @pytest.mark.asyncio
    @pytest.mark.parametrize("graph_type", GRAPH_TYPES)
    async def test_bfs_distances_are_hop_counts(self, make_runner, graph_type):
        runner = make_runner(AlgorithmType.BFS, settings_for(graph_type))

        await runner.run()

        assert runner.algorithm.distances == reference_hops(runner.algorithm.graph, 0)

    @pytest.mark.asyncio
    async def test_bfs_order_on_sparse_sample(self, make_runner):
        runner = make_runner(AlgorithmType.BFS, settings_for(GraphType.SPARSE))
        await runner.run()
        assert runner.algorithm.visit_order == [0, 1, 3, 2, 4, 5]

    @pytest.mark.asyncio
    async def test_dfs_order_on_sparse_sample(self, make_runner):
        runner = make_runner(AlgorithmType.DFS, settings_for(GraphType.SPARSE))
        await runner.run()
        assert runner.algorithm.visit_order == [0, 1, 2, 5, 4, 3]

    @pytest.mark.asyncio
    async def test_stopped_traversal_never_repeats_a_node(self, make_runner):
        runner = make_runner(AlgorithmType.BFS, settings_for(GraphType.COMPLETE))

        task = asyncio.create_task(runner.run())
        await asyncio.sleep(0)
        while runner.is_running and runner.stats.steps < 3:
            await asyncio.sleep(0)
        runner.stop()
        await task

        order = runner.algorithm.visit_order
        assert len(order) == len(set(order))
        assert len(order) < 6


class TestDijkstra:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("graph_type", GRAPH_TYPES)
    @pytest.mark.parametrize("seed", range(3))
    async def test_distances_match_brute_force(self, make_runner, graph_type, seed):
        runner = make_runner(AlgorithmType.DIJKSTRA, settings_for(graph_type))
        runner.algorithm.rng = np.random.default_rng(seed)
        runner.reset()

        await runner.run()

        dijkstra = runner.algorithm
        assert dijkstra.distances == reference_shortest(dijkstra.graph, 0)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("graph_type", GRAPH_TYPES)
    async def test_path_to_end_node_has_shortest_weight(self, make_runner, graph_type):
        runner = make_runner(AlgorithmType.DIJKSTRA, settings_for(graph_type))

        await runner.run()

        dijkstra = runner.algorithm
        assert dijkstra.path[0] == 0
        assert dijkstra.path[-1] == dijkstra.end_node
        assert path_weight(dijkstra.graph, dijkstra.path) == dijkstra.distances[dijkstra.end_node]

    @pytest.mark.asyncio
    async def test_sparse_sample_distances(self, make_runner):
        runner = make_runner(AlgorithmType.DIJKSTRA, settings_for(GraphType.SPARSE))
        await runner.run()
        assert runner.algorithm.distances == {0: 0, 1: 4, 2: 7, 3: 2, 4: 5, 5: 7}
        assert runner.algorithm.path == [0, 3, 4]
        assert runner.stats.swaps > 0

    @pytest.mark.asyncio
    async def test_unfinished_distances_serialise_as_null(self, make_runner):
        runner = make_runner(AlgorithmType.DIJKSTRA)
        state = runner.view()["state"]
        assert state["distances"]["5"] is None


class TestKruskal:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("graph_type", GRAPH_TYPES)
    @pytest.mark.parametrize("seed", range(3))
    async def test_builds_minimum_spanning_tree(self, make_runner, graph_type, seed):
        runner = make_runner(AlgorithmType.KRUSKAL, settings_for(graph_type))
        runner.algorithm.rng = np.random.default_rng(seed)
        runner.reset()

        await runner.run()

        kruskal = runner.algorithm
        assert kruskal.is_complete
        assert len(kruskal.mst_edges) == len(kruskal.graph.nodes) - 1
        assert kruskal.total_weight == reference_mst_weight(kruskal.graph)

    @pytest.mark.asyncio
    async def test_sparse_sample_tree(self, make_runner):
        runner = make_runner(AlgorithmType.KRUSKAL, settings_for(GraphType.SPARSE))
        await runner.run()
        assert runner.algorithm.total_weight == 11
        assert runner.algorithm.mst_edges == ["2-5", "0-3", "4-5", "1-2", "3-4"]
        assert runner.algorithm.rejected_edges == []

    @pytest.mark.asyncio
    async def test_complete_graph_rejects_cycle_edges(self, make_runner):
        runner = make_runner(AlgorithmType.KRUSKAL, settings_for(GraphType.COMPLETE))
        await runner.run()
        kruskal = runner.algorithm
        assert kruskal.is_complete
        assert len(kruskal.mst_edges) == 5
        assert not set(kruskal.rejected_edges) & set(kruskal.mst_edges)
        assert runner.stats.swaps == 5

    def test_union_find(self):
        uf = UnionFind(4)
        assert uf.union(0, 1)
        assert uf.union(2, 3)
        assert not uf.union(1, 0)
        assert uf.union(1, 3)
        assert uf.find(0) == uf.find(2)


class TestFloydWarshall:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("graph_type", GRAPH_TYPES)
    async def test_all_pairs_match_brute_force(self, make_runner, graph_type):
        runner = make_runner(AlgorithmType.FLOYD_WARSHALL, settings_for(graph_type))

        await runner.run()

        fw = runner.algorithm
        for node in fw.graph.nodes:
            expected = reference_shortest(fw.graph, node.id)
            assert [fw.distance_matrix[node.id][j] for j in range(6)] == [expected[j] for j in range(6)]

    @pytest.mark.asyncio
    async def test_reconstructed_paths_have_matrix_weight(self, make_runner):
        runner = make_runner(AlgorithmType.FLOYD_WARSHALL, settings_for(GraphType.COMPLETE))

        await runner.run()

        fw = runner.algorithm
        assert fw.is_complete
        assert len(fw.shortest_paths) == 15
        for entry in fw.shortest_paths:
            assert entry["path"][0] == entry["source"]
            assert entry["path"][-1] == entry["target"]
            assert path_weight(fw.graph, entry["path"]) == entry["distance"]

    @pytest.mark.asyncio
    async def test_step_count_is_cubic(self, make_runner):
        runner = make_runner(AlgorithmType.FLOYD_WARSHALL)
        await runner.run()
        assert runner.stats.steps == 6 ** 3
