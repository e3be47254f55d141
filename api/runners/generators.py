"""
Input generators for the algorithm runners.

Pure functions from settings-derived parameters to problem instances.
Randomness comes from a numpy Generator; pass ``rng`` to make results
reproducible.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .settings import DataType, GraphType

KNAPSACK_ITEM_NAMES = [
    "Phone", "Laptop", "Watch", "Book",
    "Headphones", "Camera", "Console", "Battery",
]

LCS_STRING_PAIRS = [
    ("ABCDGH", "AEDFHR"),
    ("AGGTAB", "GXTXAYB"),
    ("PROGRAMMING", "ALGORITHM"),
    ("DYNAMIC", "ECONOMIC"),
    ("HELLO", "WORLD"),
    ("COMPUTER", "SCIENCE"),
]

# Node layout shared by every topology (canvas coordinates).
_NODE_POSITIONS = [
    (100, 100),
    (200, 50),
    (300, 100),
    (150, 200),
    (250, 200),
    (350, 150),
]

_SPARSE_EDGES = [(0, 1, 4), (0, 3, 2), (1, 2, 3), (1, 4, 5), (2, 5, 1), (3, 4, 3), (4, 5, 2)]
_TREE_EDGES = [(0, 1, 4), (0, 3, 2), (1, 2, 3), (3, 4, 3), (2, 5, 1)]


@dataclass
class GraphNode:
    id: int
    x: int
    y: int


@dataclass
class GraphEdge:
    source: int
    target: int
    weight: int

    def other(self, node_id: int) -> int:
        """Return the opposite endpoint, or -1 if ``node_id`` is not on the edge."""
        if self.source == node_id:
            return self.target
        if self.target == node_id:
            return self.source
        return -1


@dataclass
class Graph:
    """Weighted undirected graph."""

    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def neighbors(self, node_id: int) -> List[int]:
        """Adjacent node ids in ascending order."""
        found = [edge.other(node_id) for edge in self.edges]
        return sorted(n for n in found if n != -1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [asdict(n) for n in self.nodes],
            "edges": [asdict(e) for e in self.edges],
        }


@dataclass
class KnapsackItem:
    id: int
    name: str
    weight: int
    value: int
    value_per_weight: float


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def generate_array_data(
    size: int,
    data_type: DataType = DataType.RANDOM,
    rng: Optional[np.random.Generator] = None,
) -> List[int]:
    """Generate an array of bar heights.

    Args:
        size: Number of elements
        data_type: random, sorted, reverse or nearly-sorted
        rng: Optional random generator

    Returns:
        List of ints in roughly [10, 210]
    """
    rng = _rng(rng)
    try:
        data_type = DataType(data_type)
    except ValueError:
        data_type = DataType.RANDOM

    if data_type == DataType.SORTED:
        return [(i + 1) * 4 + 10 for i in range(size)]
    if data_type == DataType.REVERSE:
        return [(size - i) * 4 + 10 for i in range(size)]
    if data_type == DataType.NEARLY_SORTED:
        jitter = np.where(
            rng.random(size) > 0.8,
            rng.integers(-10, 10, size=size),
            0,
        )
        return [(i + 1) * 4 + 10 + int(jitter[i]) for i in range(size)]
    return [int(v) for v in rng.integers(10, 90, size=size)]


def generate_graph(
    graph_type: GraphType = GraphType.SPARSE,
    rng: Optional[np.random.Generator] = None,
) -> Graph:
    """Generate one of the fixed six-node sample graphs.

    ``complete`` and ``chain`` draw random weights in [1, 10]; ``sparse``
    and ``tree`` are fully fixed.
    """
    rng = _rng(rng)
    nodes = [GraphNode(id=i, x=x, y=y) for i, (x, y) in enumerate(_NODE_POSITIONS)]
    n = len(nodes)

    try:
        graph_type = GraphType(graph_type)
    except ValueError:
        graph_type = GraphType.SPARSE

    if graph_type == GraphType.COMPLETE:
        pairs = [(i, j) for i in range(n) for j in range(i + 1, n)]
        weights = rng.integers(1, 11, size=len(pairs))
        edges = [GraphEdge(i, j, int(w)) for (i, j), w in zip(pairs, weights)]
    elif graph_type == GraphType.CHAIN:
        weights = rng.integers(1, 11, size=n - 1)
        edges = [GraphEdge(i, i + 1, int(weights[i])) for i in range(n - 1)]
    elif graph_type == GraphType.TREE:
        edges = [GraphEdge(*e) for e in _TREE_EDGES]
    else:
        edges = [GraphEdge(*e) for e in _SPARSE_EDGES]

    return Graph(nodes=nodes, edges=edges)


def knapsack_capacity(array_size: int) -> int:
    return max(8, min(array_size, 15))


def generate_knapsack_items(
    array_size: int,
    rng: Optional[np.random.Generator] = None,
) -> List[KnapsackItem]:
    """Generate 4-6 items ordered by value density (best first)."""
    rng = _rng(rng)
    count = min(6, max(4, array_size // 3))
    weights = rng.integers(1, 5, size=count)
    values = rng.integers(2, 10, size=count)

    items = [
        KnapsackItem(
            id=i,
            name=KNAPSACK_ITEM_NAMES[i],
            weight=int(w),
            value=int(v),
            value_per_weight=round(int(v) / int(w), 1),
        )
        for i, (w, v) in enumerate(zip(weights, values))
    ]
    items.sort(key=lambda item: item.value_per_weight, reverse=True)
    for index, item in enumerate(items):
        item.id = index
    return items


def generate_lcs_strings(
    array_size: int,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[str, str]:
    rng = _rng(rng)
    first, second = LCS_STRING_PAIRS[int(rng.integers(0, len(LCS_STRING_PAIRS)))]
    if array_size < 15:
        length = max(4, array_size - 2)
        first, second = first[:length], second[:length]
    return first, second


def generate_coin_target(rng: Optional[np.random.Generator] = None) -> int:
    return int(_rng(rng).integers(15, 110))


def generate_gcd_operands(
    array_size: int,
    rng: Optional[np.random.Generator] = None,
) -> Tuple[int, int]:
    """Two operands with the larger one first."""
    rng = _rng(rng)
    max_value = max(20, array_size * 5)
    min_value = max(5, max_value // 4)
    a, b = (int(v) for v in rng.integers(min_value, max_value, size=2))
    return (a, b) if a >= b else (b, a)


def sieve_limit(array_size: int) -> int:
    return max(20, min(array_size * 2, 100))
