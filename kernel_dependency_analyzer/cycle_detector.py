"""
Cycle Detector
Detects circular dependencies, missing dependencies and a topological order
"""

import logging
from collections import deque
from typing import Dict, Iterable, List, Mapping, Sequence

import networkx as nx

from .graph_builder import to_networkx
from .models import DependencyGraph

logger = logging.getLogger(__name__)


def find_cycles(adjacency: Mapping[str, Sequence[str]], roots: Iterable[str]) -> List[List[str]]:
    """Depth-first cycle search with a recursion-stack set.

    Nodes are tried in ``roots`` order and each dependency list in its given
    order. When a dependency is already on the stack, the path from its first
    occurrence to the current node is reported. Names without an adjacency
    entry are treated as nodes with no dependencies. An explicit stack of
    iterators replaces recursion so long dependency chains do not hit the
    interpreter's recursion limit.
    """
    visited = set()
    on_stack = set()
    path: List[str] = []
    cycles: List[List[str]] = []

    for root in roots:
        if root in visited:
            continue

        visited.add(root)
        on_stack.add(root)
        path.append(root)
        stack = [(root, iter(adjacency.get(root, ())))]

        while stack:
            node, dependencies = stack[-1]
            for dep in dependencies:
                if dep not in visited:
                    visited.add(dep)
                    on_stack.add(dep)
                    path.append(dep)
                    stack.append((dep, iter(adjacency.get(dep, ()))))
                    break
                if dep in on_stack:
                    cycles.append(path[path.index(dep):])
            else:
                # Backtrack
                stack.pop()
                on_stack.discard(node)
                path.pop()

    return cycles


def canonical_cycle(cycle: Sequence[str]) -> tuple:
    """Rotation of ``cycle`` that starts at its smallest name"""
    if not cycle:
        return ()
    start = cycle.index(min(cycle))
    return tuple(cycle[start:]) + tuple(cycle[:start])


def deduplicate_cycles(cycles: List[List[str]]) -> List[List[str]]:
    """Drop cycles that are rotations of one already reported"""
    seen = set()
    unique = []
    for cycle in cycles:
        key = canonical_cycle(cycle)
        if key in seen:
            continue
        seen.add(key)
        unique.append(cycle)
    return unique


class CycleDetector:
    """Structural checks over a DependencyGraph"""

    def __init__(self, graph: DependencyGraph):
        self.graph = graph
        self.cycles: List[List[str]] = []
        self.strongly_connected_components: List[List[str]] = []

    def detect_cycles(self, deduplicate: bool = False) -> List[List[str]]:
        """Detect cycles, visiting components in input order"""
        cycles = find_cycles(self.graph.adjacency, self.graph.component_names())
        if deduplicate:
            cycles = deduplicate_cycles(cycles)
        self.cycles = cycles
        logger.info(f"Found {len(cycles)} cycles in dependency graph")
        return cycles

    def find_missing_dependencies(self) -> List[str]:
        """Dependency names with no matching component, first-seen order"""
        missing = []
        for component in self.graph.components:
            for dep in component.dependencies:
                if dep not in self.graph.adjacency and dep not in missing:
                    missing.append(dep)
        if missing:
            logger.warning(f"Found {len(missing)} missing dependencies: {', '.join(missing)}")
        return missing

    def find_components_with_no_dependencies(self) -> List[str]:
        return [name for name in self.graph.component_names()
                if not self.graph.adjacency.get(name)]

    def calculate_dependency_counts(self) -> Dict[str, int]:
        """Number of dependents of each component"""
        return {name: len(self.graph.reverse_adjacency.get(name, []))
                for name in self.graph.component_names()}

    def topological_sort(self) -> List[str]:
        """Kahn's algorithm over dependent counts.

        A component's in-degree is the number of dependency entries naming
        it, so components nothing depends on come out first and every
        component follows all of its dependents. On a cyclic graph only the
        acyclic part is returned.
        """
        in_degree = {name: 0 for name in self.graph.component_names()}
        for dependencies in self.graph.adjacency.values():
            for dep in dependencies:
                if dep in in_degree:
                    in_degree[dep] += 1

        queue = deque(name for name, degree in in_degree.items() if degree == 0)
        order = []

        while queue:
            name = queue.popleft()
            order.append(name)
            for dep in self.graph.adjacency.get(name, []):
                if dep not in in_degree:
                    continue
                in_degree[dep] -= 1
                if in_degree[dep] == 0:
                    queue.append(dep)

        if len(order) < len(in_degree):
            logger.debug(f"Topological sort covered {len(order)} of {len(in_degree)} components")
        return order

    def find_strongly_connected_components(self) -> List[List[str]]:
        """Strongly connected components with more than one member or a self-loop"""
        digraph = to_networkx(self.graph)

        significant_sccs = []
        for scc in nx.strongly_connected_components(digraph):
            if len(scc) > 1:
                significant_sccs.append(sorted(scc))
            else:
                node = next(iter(scc))
                if digraph.has_edge(node, node):
                    significant_sccs.append([node])

        self.strongly_connected_components = significant_sccs
        logger.info(f"Found {len(significant_sccs)} significant strongly connected components")
        return significant_sccs

    def is_dag(self) -> bool:
        return nx.is_directed_acyclic_graph(to_networkx(self.graph))
