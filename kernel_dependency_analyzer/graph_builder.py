"""
Dependency Graph Builder
Turns extracted kernel components into forward and reverse adjacency maps
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import networkx as nx

from .exceptions import ComponentParseError, DuplicateComponentError
from .models import Component, DependencyGraph, ModuleDependency

logger = logging.getLogger(__name__)


def _parse_component(entry, index: int) -> Component:
    if not isinstance(entry, dict):
        raise ComponentParseError(f"Component #{index} must be an object, got {type(entry).__name__}")
    name = entry.get('name')
    if not isinstance(name, str) or not name:
        raise ComponentParseError(f"Component #{index} has no name")
    dependencies = entry.get('dependencies', [])
    if not isinstance(dependencies, list) or not all(isinstance(d, str) for d in dependencies):
        raise ComponentParseError(f"Component '{name}' dependencies must be a list of names")
    return Component(
        name=name,
        dependencies=list(dependencies),
        component_type=entry.get('component_type', 'other'),
        description=entry.get('description'),
    )


def _parse_module_dependency(entry, index: int) -> ModuleDependency:
    if not isinstance(entry, dict):
        raise ComponentParseError(f"Dependency #{index} must be an object")
    try:
        from_module = entry['from']
        to_module = entry['to']
    except KeyError as e:
        raise ComponentParseError(f"Dependency #{index} is missing {e.args[0]!r}") from None
    for key, value in (('from', from_module), ('to', to_module)):
        if not isinstance(value, str) or not value:
            raise ComponentParseError(f"Dependency #{index} '{key}' must be a component name")

    raw_count = entry.get('count', 1)
    try:
        if isinstance(raw_count, bool):
            raise TypeError(raw_count)
        count = int(raw_count)
    except (TypeError, ValueError):
        raise ComponentParseError(f"Dependency #{index} count must be an integer, got {raw_count!r}") from None
    if count < 1:
        raise ComponentParseError(f"Dependency #{index} count must be positive, got {count}")

    return ModuleDependency(
        from_module=from_module,
        to_module=to_module,
        dependency_type=entry.get('dependency_type', 'depends_on'),
        count=count,
    )


def parse_structure_json(content: str) -> Tuple[List[Component], Optional[List[ModuleDependency]]]:
    """Parse extractor output.

    Accepts either a bare list of component objects or an object with a
    ``components`` list and an optional ``dependencies`` edge list. The edge
    list is returned as ``None`` when absent.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse component JSON: {e}")
        raise ComponentParseError(f"Invalid component JSON: {e}") from e

    edges = None
    if isinstance(data, dict):
        raw_edges = data.get('dependencies')
        if raw_edges is not None:
            if not isinstance(raw_edges, list):
                raise ComponentParseError("'dependencies' must be a list of edges")
            edges = [_parse_module_dependency(e, i) for i, e in enumerate(raw_edges)]
        data = data.get('components', [])

    if not isinstance(data, list):
        raise ComponentParseError("Expected a list of components")

    components = [_parse_component(entry, i) for i, entry in enumerate(data)]
    return components, edges


def parse_components_json(content: str) -> List[Component]:
    return parse_structure_json(content)[0]


def load_structure(path: Union[str, Path]) -> Tuple[List[Component], Optional[List[ModuleDependency]]]:
    """Read and parse a component JSON file"""
    try:
        content = Path(path).read_text(encoding='utf-8')
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        raise ComponentParseError(f"Cannot read {path}: {e}") from e
    return parse_structure_json(content)


def build_module_dependencies(components: List[Component]) -> List[ModuleDependency]:
    """One edge per declared dependency entry, in input order"""
    return [
        ModuleDependency(from_module=component.name, to_module=dep)
        for component in components
        for dep in component.dependencies
    ]


def to_networkx(graph: DependencyGraph) -> nx.DiGraph:
    """Project a dependency graph onto a networkx DiGraph.

    Repeated dependency entries collapse into one edge whose ``strength``
    attribute counts them. Unknown targets are added with ``missing=True``.
    """
    digraph = nx.DiGraph()

    for component in graph.components:
        digraph.add_node(component.name,
                         component_type=component.component_type,
                         missing=False)

    for name, dependencies in graph.adjacency.items():
        for dep in dependencies:
            if not digraph.has_node(dep):
                digraph.add_node(dep, component_type='unknown', missing=True)
            if digraph.has_edge(name, dep):
                digraph[name][dep]['strength'] += 1
            else:
                digraph.add_edge(name, dep, strength=1)

    return digraph


class DependencyGraphBuilder:
    """Builds dependency graphs from extracted kernel components"""

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.graph = DependencyGraph()

    def build(self, components: List[Component], strict: Optional[bool] = None) -> DependencyGraph:
        """Build forward and reverse adjacency for ``components``.

        Unknown dependency names are kept as they are and still receive a
        reverse adjacency entry. Repeated component names overwrite earlier
        adjacency entries unless strict mode is on, which raises instead.
        """
        strict = self.strict if strict is None else strict

        duplicates = self._find_duplicate_names(components)
        if duplicates:
            if strict:
                logger.error(f"Duplicate component names: {duplicates}")
                raise DuplicateComponentError(duplicates)
            logger.warning(f"Duplicate component names, later entries win: {duplicates}")

        graph = DependencyGraph(components=list(components))

        for index, component in enumerate(components):
            graph.component_map[component.name] = index

        for component in components:
            graph.adjacency[component.name] = list(component.dependencies)
            for dep in component.dependencies:
                graph.reverse_adjacency.setdefault(dep, []).append(component.name)

        self.graph = graph
        logger.debug(f"Built dependency graph with {len(graph.adjacency)} components "
                     f"and {graph.edge_count} edges")
        return graph

    @staticmethod
    def _find_duplicate_names(components: List[Component]) -> List[str]:
        seen = set()
        duplicates = []
        for component in components:
            if component.name in seen and component.name not in duplicates:
                duplicates.append(component.name)
            seen.add(component.name)
        return duplicates

    def to_networkx(self, graph: Optional[DependencyGraph] = None) -> nx.DiGraph:
        return to_networkx(graph if graph is not None else self.graph)

    def get_graph_stats(self, graph: Optional[DependencyGraph] = None) -> Dict:
        """Get statistics about the dependency graph"""
        digraph = self.to_networkx(graph)
        node_count = digraph.number_of_nodes()
        return {
            'total_components': node_count,
            'total_dependencies': digraph.number_of_edges(),
            'is_connected': nx.is_weakly_connected(digraph) if node_count > 0 else False,
            'density': nx.density(digraph),
            'average_degree': sum(dict(digraph.degree()).values()) / node_count if node_count > 0 else 0
        }

    def get_component_dependencies(self, name: str) -> List[str]:
        """Direct dependencies of a component"""
        return list(self.graph.adjacency.get(name, []))

    def get_component_dependents(self, name: str) -> List[str]:
        """Components that list this one as a dependency"""
        return list(self.graph.reverse_adjacency.get(name, []))

    def export_graph_data(self, graph: Optional[DependencyGraph] = None) -> Dict:
        """Export graph data for serialization or external viewers"""
        graph = graph if graph is not None else self.graph
        digraph = self.to_networkx(graph)

        nodes = []
        for node, data in digraph.nodes(data=True):
            nodes.append({
                'id': node,
                'label': node,
                'type': data.get('component_type', 'other'),
                'missing': data.get('missing', False),
            })

        edges = []
        for source, target, data in digraph.edges(data=True):
            edges.append({
                'source': source,
                'target': target,
                'strength': data.get('strength', 1),
            })

        return {
            'nodes': nodes,
            'edges': edges,
            'stats': self.get_graph_stats(graph)
        }
