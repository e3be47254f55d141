"""
Graph algorithms on the six-node sample graphs.

BFS, DFS, Dijkstra, Kruskal and Floyd-Warshall. The graph topology comes
from ``settings.graph_type``; traversals start from node 0.
"""

import heapq
import math
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Set

import numpy as np

from .controller import RunContext
from .generators import Graph, GraphEdge, generate_graph
from .settings import AlgorithmSettings


def _finite(value: float) -> Optional[float]:
    return None if math.isinf(value) else value


class GraphAlgorithm:
    """Graph plus traversal markers."""

    start_node = 0

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng
        self.graph = Graph()
        self.restart()

    def prepare(self, settings: AlgorithmSettings) -> None:
        self.graph = generate_graph(settings.graph_type, self.rng)
        self.restart()

    def restart(self) -> None:
        """Clear traversal progress, keeping the graph."""
        self.current_node = -1

    def view(self) -> Dict[str, Any]:
        return {
            "graph": self.graph.to_dict(),
            "start_node": self.start_node,
            "current_node": self.current_node,
        }


class BreadthFirstSearch(GraphAlgorithm):
    def restart(self) -> None:
        super().restart()
        self.visited: Set[int] = set()
        self.queue: Deque[int] = deque()
        self.visit_order: List[int] = []
        self.distances: Dict[int, int] = {}

    async def execute(self, ctx: RunContext) -> None:
        self.restart()
        start = self.start_node
        self.queue.append(start)
        self.visited.add(start)
        self.distances[start] = 0

        while self.queue:
            if not ctx.running:
                return

            node = self.queue.popleft()
            self.current_node = node
            self.visit_order.append(node)
            ctx.step()
            await ctx.pause()
            if not ctx.running:
                return

            for neighbor in self.graph.neighbors(node):
                if not ctx.running:
                    return
                ctx.comparison()
                if neighbor in self.visited:
                    continue
                self.visited.add(neighbor)
                self.distances[neighbor] = self.distances[node] + 1
                self.queue.append(neighbor)
                await ctx.pause(0.5)

        if ctx.running:
            self.current_node = -1

    def view(self) -> Dict[str, Any]:
        return {
            **super().view(),
            "visited": sorted(self.visited),
            "queue": list(self.queue),
            "visit_order": list(self.visit_order),
            "distances": {str(k): v for k, v in self.distances.items()},
        }


class DepthFirstSearch(GraphAlgorithm):
    def restart(self) -> None:
        super().restart()
        self.visited: Set[int] = set()
        self.stack: List[int] = []
        self.visit_order: List[int] = []

    async def execute(self, ctx: RunContext) -> None:
        self.restart()
        self.stack.append(self.start_node)

        while self.stack:
            if not ctx.running:
                return

            node = self.stack.pop()
            if node in self.visited:
                continue

            self.current_node = node
            self.visited.add(node)
            self.visit_order.append(node)
            ctx.step()
            await ctx.pause()
            if not ctx.running:
                return

            # Push in reverse so the smallest neighbour is explored first.
            for neighbor in reversed(self.graph.neighbors(node)):
                if not ctx.running:
                    return
                ctx.comparison()
                if neighbor in self.visited:
                    continue
                self.stack.append(neighbor)
                await ctx.pause(0.5)

        if ctx.running:
            self.current_node = -1

    def view(self) -> Dict[str, Any]:
        return {
            **super().view(),
            "visited": sorted(self.visited),
            "stack": list(self.stack),
            "visit_order": list(self.visit_order),
        }


class Dijkstra(GraphAlgorithm):
    end_node = 4

    def restart(self) -> None:
        super().restart()
        self.distances: Dict[int, float] = {n.id: math.inf for n in self.graph.nodes}
        self.previous: Dict[int, int] = {}
        self.visited: Set[int] = set()
        self.path: List[int] = []

    async def execute(self, ctx: RunContext) -> None:
        self.restart()
        self.distances[self.start_node] = 0
        frontier = [(0, self.start_node)]

        while frontier:
            if not ctx.running:
                return

            distance, node = heapq.heappop(frontier)
            if node in self.visited or distance > self.distances[node]:
                continue

            self.current_node = node
            self.visited.add(node)
            ctx.step()
            await ctx.pause()
            if not ctx.running:
                return

            for edge in self.graph.edges:
                neighbor = edge.other(node)
                if neighbor == -1 or neighbor in self.visited:
                    continue
                if not ctx.running:
                    return

                candidate = distance + edge.weight
                ctx.comparison()
                await ctx.pause()
                if not ctx.running:
                    return

                if candidate < self.distances[neighbor]:
                    self.distances[neighbor] = candidate
                    self.previous[neighbor] = node
                    heapq.heappush(frontier, (candidate, neighbor))
                    ctx.swap()
                    await ctx.pause()

        if ctx.running:
            self.path = self.path_to(self.end_node)
            self.current_node = -1

    def path_to(self, target: int) -> List[int]:
        """Shortest path from the start node, empty if unreachable."""
        if math.isinf(self.distances.get(target, math.inf)):
            return []
        path = [target]
        while path[-1] != self.start_node:
            path.append(self.previous[path[-1]])
        path.reverse()
        return path

    def view(self) -> Dict[str, Any]:
        return {
            **super().view(),
            "end_node": self.end_node,
            "distances": {str(k): _finite(v) for k, v in self.distances.items()},
            "visited": sorted(self.visited),
            "path": list(self.path),
        }


class UnionFind:
    """Disjoint sets with path compression and union by rank."""

    def __init__(self, size: int):
        self.parent = list(range(size))
        self.rank = [0] * size

    def find(self, x: int) -> int:
        if self.parent[x] != x:
            self.parent[x] = self.find(self.parent[x])
        return self.parent[x]

    def union(self, x: int, y: int) -> bool:
        root_x, root_y = self.find(x), self.find(y)
        if root_x == root_y:
            return False
        if self.rank[root_x] < self.rank[root_y]:
            root_x, root_y = root_y, root_x
        self.parent[root_y] = root_x
        if self.rank[root_x] == self.rank[root_y]:
            self.rank[root_x] += 1
        return True


def _edge_id(edge: GraphEdge) -> str:
    return f"{min(edge.source, edge.target)}-{max(edge.source, edge.target)}"


class Kruskal(GraphAlgorithm):
    def restart(self) -> None:
        super().restart()
        self.sorted_edges: List[GraphEdge] = sorted(self.graph.edges, key=lambda e: e.weight)
        self.union_find = UnionFind(len(self.graph.nodes))
        self.mst_edges: List[str] = []
        self.rejected_edges: List[str] = []
        self.current_edge_index = -1
        self.total_weight = 0
        self.is_complete = False

    async def execute(self, ctx: RunContext) -> None:
        self.restart()
        target_edges = len(self.graph.nodes) - 1

        for index, edge in enumerate(self.sorted_edges):
            if len(self.mst_edges) >= target_edges or not ctx.running:
                break

            self.current_edge_index = index
            ctx.step()
            await ctx.pause()
            if not ctx.running:
                return

            ctx.comparison()
            creates_cycle = self.union_find.find(edge.source) == self.union_find.find(edge.target)
            await ctx.pause(0.5)
            if not ctx.running:
                return

            if creates_cycle:
                self.rejected_edges.append(_edge_id(edge))
                await ctx.pause(0.3)
            else:
                self.union_find.union(edge.source, edge.target)
                self.mst_edges.append(_edge_id(edge))
                self.total_weight += edge.weight
                ctx.swap()
                await ctx.pause()

        if ctx.running:
            self.is_complete = True
            self.current_edge_index = -1

    def view(self) -> Dict[str, Any]:
        return {
            **super().view(),
            "sorted_edges": [
                {"id": _edge_id(e), "source": e.source, "target": e.target, "weight": e.weight}
                for e in self.sorted_edges
            ],
            "current_edge_index": self.current_edge_index,
            "mst_edges": list(self.mst_edges),
            "rejected_edges": list(self.rejected_edges),
            "total_weight": self.total_weight,
            "is_complete": self.is_complete,
        }


class FloydWarshall(GraphAlgorithm):
    def restart(self) -> None:
        super().restart()
        n = len(self.graph.nodes)
        self.distance_matrix: List[List[float]] = [[math.inf] * n for _ in range(n)]
        self.next_hop: List[List[int]] = [[-1] * n for _ in range(n)]
        for i in range(n):
            self.distance_matrix[i][i] = 0
            self.next_hop[i][i] = i
        for edge in self.graph.edges:
            u, v = edge.source, edge.target
            if edge.weight < self.distance_matrix[u][v]:
                self.distance_matrix[u][v] = self.distance_matrix[v][u] = edge.weight
                self.next_hop[u][v] = v
                self.next_hop[v][u] = u
        self.current_k = self.current_i = self.current_j = -1
        self.is_complete = False
        self.shortest_paths: List[Dict[str, Any]] = []

    async def execute(self, ctx: RunContext) -> None:
        self.restart()
        n = len(self.graph.nodes)
        dist = self.distance_matrix

        for k in range(n):
            if not ctx.running:
                return
            self.current_k = k
            for i in range(n):
                if not ctx.running:
                    return
                for j in range(n):
                    if not ctx.running:
                        return

                    self.current_i, self.current_j = i, j
                    ctx.step()
                    await ctx.pause()
                    if not ctx.running:
                        return

                    if not (math.isinf(dist[i][k]) or math.isinf(dist[k][j])):
                        via_k = dist[i][k] + dist[k][j]
                        ctx.comparison()
                        if via_k < dist[i][j]:
                            dist[i][j] = via_k
                            self.next_hop[i][j] = self.next_hop[i][k]
                            ctx.swap()

                    await ctx.pause(0.2)

        if not ctx.running:
            return
        self.current_k = self.current_i = self.current_j = -1
        self.is_complete = True
        self.shortest_paths = self._all_paths()

    def reconstruct_path(self, start: int, end: int) -> List[int]:
        if self.next_hop[start][end] == -1:
            return []
        path = [start]
        while path[-1] != end:
            path.append(self.next_hop[path[-1]][end])
        return path

    def _all_paths(self) -> List[Dict[str, Any]]:
        n = len(self.graph.nodes)
        paths = [
            {
                "source": i,
                "target": j,
                "distance": self.distance_matrix[i][j],
                "path": self.reconstruct_path(i, j),
            }
            for i in range(n)
            for j in range(i + 1, n)
            if not math.isinf(self.distance_matrix[i][j])
        ]
        paths.sort(key=lambda p: p["distance"])
        return paths

    def view(self) -> Dict[str, Any]:
        return {
            **super().view(),
            "distance_matrix": [[_finite(d) for d in row] for row in self.distance_matrix],
            "current": {"k": self.current_k, "i": self.current_i, "j": self.current_j},
            "is_complete": self.is_complete,
            "shortest_paths": list(self.shortest_paths),
        }
