"""
Algorithm catalogue and runner factory.

Maps the closed set of algorithm tags to display metadata and to a factory
that builds the matching AlgorithmRunner.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

import numpy as np

from api.shared.logger import get_logger

from .controller import Algorithm, AlgorithmRunner, RunController
from .dynamic import Fibonacci, Knapsack, LongestCommonSubsequence
from .graph import BreadthFirstSearch, DepthFirstSearch, Dijkstra, FloydWarshall, Kruskal
from .greedy import CoinChange
from .numerical import EuclideanGcd, SieveOfEratosthenes
from .searching import BinarySearch, LinearSearch
from .settings import AlgorithmSettings
from .sorting import BubbleSort, HeapSort, InsertionSort, MergeSort, QuickSort, SelectionSort

logger = get_logger(__name__)


class AlgorithmType(str, Enum):
    BUBBLE_SORT = "bubble-sort"
    SELECTION_SORT = "selection-sort"
    INSERTION_SORT = "insertion-sort"
    MERGE_SORT = "merge-sort"
    QUICK_SORT = "quick-sort"
    HEAP_SORT = "heap-sort"
    LINEAR_SEARCH = "linear-search"
    BINARY_SEARCH = "binary-search"
    BFS = "bfs"
    DFS = "dfs"
    DIJKSTRA = "dijkstra"
    KRUSKAL = "kruskal"
    FLOYD_WARSHALL = "floyd-warshall"
    FIBONACCI = "fibonacci"
    KNAPSACK = "knapsack"
    LCS = "lcs"
    COIN_CHANGE = "coin-change"
    EUCLIDEAN_GCD = "euclidean-gcd"
    SIEVE_OF_ERATOSTHENES = "sieve-of-eratosthenes"

    def __str__(self) -> str:
        return self.value


class AlgorithmCategory(str, Enum):
    SORTING = "sorting"
    SEARCH = "search"
    GRAPH = "graph"
    DYNAMIC = "dynamic"
    GREEDY = "greedy"
    NUMERICAL = "numerical"


class UnknownAlgorithmError(KeyError):
    """Raised for a tag that is not an AlgorithmType."""


def _info(name: str, category: AlgorithmCategory, time: str, space: str, description: str) -> Dict[str, Any]:
    return {
        "name": name,
        "category": category.value,
        "time_complexity": time,
        "space_complexity": space,
        "description": description,
    }


ALGORITHM_INFO: Dict[AlgorithmType, Dict[str, Any]] = {
    AlgorithmType.BUBBLE_SORT: _info(
        "Bubble Sort", AlgorithmCategory.SORTING, "O(n²)", "O(1)",
        "Repeatedly compares adjacent elements and swaps them when out of order.",
    ),
    AlgorithmType.SELECTION_SORT: _info(
        "Selection Sort", AlgorithmCategory.SORTING, "O(n²)", "O(1)",
        "Finds the minimum of the unsorted part and moves it to the front.",
    ),
    AlgorithmType.INSERTION_SORT: _info(
        "Insertion Sort", AlgorithmCategory.SORTING, "best O(n), average O(n²)", "O(1)",
        "Inserts each element into its place within the already sorted prefix.",
    ),
    AlgorithmType.MERGE_SORT: _info(
        "Merge Sort", AlgorithmCategory.SORTING, "O(n log n)", "O(n)",
        "Stable divide and conquer sort that merges sorted halves.",
    ),
    AlgorithmType.QUICK_SORT: _info(
        "Quick Sort", AlgorithmCategory.SORTING, "average O(n log n), worst O(n²)", "O(log n)",
        "Partitions around a pivot and sorts both sides recursively.",
    ),
    AlgorithmType.HEAP_SORT: _info(
        "Heap Sort", AlgorithmCategory.SORTING, "O(n log n)", "O(1)",
        "Builds a max-heap and repeatedly moves its root to the end.",
    ),
    AlgorithmType.LINEAR_SEARCH: _info(
        "Linear Search", AlgorithmCategory.SEARCH, "O(n)", "O(1)",
        "Scans the array from the front; works on unsorted data.",
    ),
    AlgorithmType.BINARY_SEARCH: _info(
        "Binary Search", AlgorithmCategory.SEARCH, "O(log n)", "O(1)",
        "Halves the search range of a sorted array at every comparison.",
    ),
    AlgorithmType.BFS: _info(
        "Breadth-First Search", AlgorithmCategory.GRAPH, "O(V + E)", "O(V)",
        "Explores the graph level by level with a queue.",
    ),
    AlgorithmType.DFS: _info(
        "Depth-First Search", AlgorithmCategory.GRAPH, "O(V + E)", "O(V)",
        "Explores as deep as possible along each branch with a stack.",
    ),
    AlgorithmType.DIJKSTRA: _info(
        "Dijkstra's Algorithm", AlgorithmCategory.GRAPH, "O((V + E) log V)", "O(V)",
        "Single-source shortest paths on a graph with non-negative weights.",
    ),
    AlgorithmType.KRUSKAL: _info(
        "Kruskal's Algorithm", AlgorithmCategory.GRAPH, "O(E log E)", "O(V)",
        "Builds a minimum spanning tree by adding the lightest safe edge.",
    ),
    AlgorithmType.FLOYD_WARSHALL: _info(
        "Floyd-Warshall", AlgorithmCategory.GRAPH, "O(V³)", "O(V²)",
        "All-pairs shortest paths by dynamic programming over intermediate nodes.",
    ),
    AlgorithmType.FIBONACCI: _info(
        "Fibonacci", AlgorithmCategory.DYNAMIC, "O(n) memoised", "O(n)",
        "Each number is the sum of the previous two; computed with a memo table.",
    ),
    AlgorithmType.KNAPSACK: _info(
        "0/1 Knapsack", AlgorithmCategory.DYNAMIC, "O(nW)", "O(nW)",
        "Maximises the value of items that fit within a weight capacity.",
    ),
    AlgorithmType.LCS: _info(
        "Longest Common Subsequence", AlgorithmCategory.DYNAMIC, "O(mn)", "O(mn)",
        "Finds the longest subsequence shared by two strings.",
    ),
    AlgorithmType.COIN_CHANGE: _info(
        "Coin Change", AlgorithmCategory.GREEDY, "O(n)", "O(1)",
        "Pays an amount with the fewest coins by always taking the largest coin.",
    ),
    AlgorithmType.EUCLIDEAN_GCD: _info(
        "Euclidean GCD", AlgorithmCategory.NUMERICAL, "O(log min(a, b))", "O(1)",
        "Greatest common divisor by repeated division with remainder.",
    ),
    AlgorithmType.SIEVE_OF_ERATOSTHENES: _info(
        "Sieve of Eratosthenes", AlgorithmCategory.NUMERICAL, "O(n log log n)", "O(n)",
        "Finds all primes up to a limit by crossing out multiples.",
    ),
}

AlgorithmFactory = Callable[..., Algorithm]

_FACTORIES: Dict[AlgorithmType, AlgorithmFactory] = {
    AlgorithmType.BUBBLE_SORT: BubbleSort,
    AlgorithmType.SELECTION_SORT: SelectionSort,
    AlgorithmType.INSERTION_SORT: InsertionSort,
    AlgorithmType.MERGE_SORT: MergeSort,
    AlgorithmType.QUICK_SORT: QuickSort,
    AlgorithmType.HEAP_SORT: HeapSort,
    AlgorithmType.LINEAR_SEARCH: LinearSearch,
    AlgorithmType.BINARY_SEARCH: BinarySearch,
    AlgorithmType.BFS: BreadthFirstSearch,
    AlgorithmType.DFS: DepthFirstSearch,
    AlgorithmType.DIJKSTRA: Dijkstra,
    AlgorithmType.KRUSKAL: Kruskal,
    AlgorithmType.FLOYD_WARSHALL: FloydWarshall,
    AlgorithmType.FIBONACCI: Fibonacci,
    AlgorithmType.KNAPSACK: Knapsack,
    AlgorithmType.LCS: LongestCommonSubsequence,
    AlgorithmType.COIN_CHANGE: CoinChange,
    AlgorithmType.EUCLIDEAN_GCD: EuclideanGcd,
    AlgorithmType.SIEVE_OF_ERATOSTHENES: SieveOfEratosthenes,
}

# Constructor options each algorithm accepts besides ``rng``, with the
# conversion applied to the supplied value.
_OPTIONS: Dict[AlgorithmType, Dict[str, Callable[[Any], Any]]] = {
    AlgorithmType.EUCLIDEAN_GCD: {"extended": bool},
}


def parse_algorithm_type(value: Any) -> AlgorithmType:
    """Convert a tag to AlgorithmType, raising UnknownAlgorithmError."""
    try:
        return AlgorithmType(value)
    except ValueError:
        raise UnknownAlgorithmError(value) from None


def get_algorithm_info(algorithm_type: Any) -> Dict[str, Any]:
    algorithm_type = parse_algorithm_type(algorithm_type)
    return {"type": algorithm_type.value, **ALGORITHM_INFO[algorithm_type]}


def list_algorithms() -> List[Dict[str, Any]]:
    return [get_algorithm_info(t) for t in AlgorithmType]


def create_runner(
    algorithm_type: Any,
    settings: Optional[AlgorithmSettings] = None,
    controller: Optional[RunController] = None,
    rng: Optional[np.random.Generator] = None,
    options: Optional[Mapping[str, Any]] = None,
) -> AlgorithmRunner:
    """Build a runner for ``algorithm_type``.

    Args:
        algorithm_type: AlgorithmType or its string tag
        settings: Initial settings (defaults if omitted)
        controller: Optional pre-wired RunController
        rng: Optional random generator for reproducible working data
        options: Algorithm-specific constructor options (e.g. ``extended``
            for the Euclidean GCD); unsupported names are logged and ignored

    Returns:
        A reset AlgorithmRunner

    Raises:
        UnknownAlgorithmError: If the tag is not registered
    """
    algorithm_type = parse_algorithm_type(algorithm_type)
    options = dict(options or {})
    accepted = _OPTIONS.get(algorithm_type, {})
    ignored = sorted(set(options) - set(accepted))
    if ignored:
        logger.warning("Ignoring options %s for %s", ignored, algorithm_type.value)
    kwargs = {k: accepted[k](v) for k, v in options.items() if k in accepted}

    algorithm = _FACTORIES[algorithm_type](rng=rng, **kwargs)
    runner = AlgorithmRunner(
        algorithm_type,
        algorithm,
        settings or AlgorithmSettings(),
        controller=controller,
    )
    runner.reset()
    return runner
