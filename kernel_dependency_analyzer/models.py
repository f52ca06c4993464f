"""
Data models for kernel component dependency analysis
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class Component:
    """A named unit of kernel source with declared dependency names"""
    name: str
    dependencies: List[str] = field(default_factory=list)
    component_type: str = "other"
    description: Optional[str] = None


@dataclass
class DependencyGraph:
    """Forward and reverse adjacency built from a component list"""
    components: List[Component] = field(default_factory=list)
    adjacency: Dict[str, List[str]] = field(default_factory=dict)
    reverse_adjacency: Dict[str, List[str]] = field(default_factory=dict)
    component_map: Dict[str, int] = field(default_factory=dict)

    def __contains__(self, name: str) -> bool:
        return name in self.adjacency

    @property
    def edge_count(self) -> int:
        return sum(len(deps) for deps in self.adjacency.values())

    def component_names(self) -> List[str]:
        """Component names in input order, without repeats"""
        return list(dict.fromkeys(c.name for c in self.components))


@dataclass
class ModuleDependency:
    """A directed edge between two modules"""
    from_module: str
    to_module: str
    dependency_type: str = "depends_on"
    count: int = 1


@dataclass
class EnhancedModuleDependency:
    """Edge with presentation state; the flags are not analytical truth"""
    original: ModuleDependency
    strength: float
    visual_weight: float
    is_highlighted: bool = False
    is_visible: bool = True

    @property
    def from_module(self) -> str:
        return self.original.from_module

    @property
    def to_module(self) -> str:
        return self.original.to_module


@dataclass
class DependencyCycle:
    components: List[str]

    @property
    def length(self) -> int:
        return len(self.components)

    def edges(self) -> List[tuple]:
        """Consecutive pairs of the cycle, wrapping back to the start"""
        n = len(self.components)
        return [(self.components[i], self.components[(i + 1) % n]) for i in range(n)]


@dataclass
class DependencyCluster:
    """Group of components sharing strong dependencies"""
    id: str
    components: List[str]

    @property
    def size(self) -> float:
        return len(self.components) * 100.0


@dataclass
class DependencyAnalysisResult:
    """Snapshot of a single analysis run"""
    graph: DependencyGraph
    cycles: List[List[str]] = field(default_factory=list)
    components_with_no_dependencies: List[str] = field(default_factory=list)
    components_with_missing_dependencies: List[str] = field(default_factory=list)
    dependency_counts: Dict[str, int] = field(default_factory=dict)
    topological_order: List[str] = field(default_factory=list)
    strongly_connected_components: List[List[str]] = field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    @property
    def build_order(self) -> List[str]:
        """Dependencies before the components that need them"""
        return list(reversed(self.topological_order))


@dataclass
class EnhancedDependencyAnalysis:
    """Visualization-oriented analysis: weights, centrality and clusters"""
    dependencies: List[EnhancedModuleDependency] = field(default_factory=list)
    cycles: List[DependencyCycle] = field(default_factory=list)
    dependency_strength: Dict[str, Dict[str, float]] = field(default_factory=dict)
    component_centrality: Dict[str, float] = field(default_factory=dict)
    clusters: List[DependencyCluster] = field(default_factory=list)

    def visible_dependencies(self) -> List[EnhancedModuleDependency]:
        return [dep for dep in self.dependencies if dep.is_visible]

    def highlighted_dependencies(self) -> List[EnhancedModuleDependency]:
        return [dep for dep in self.dependencies if dep.is_highlighted]


@dataclass
class DependencyStatistics:
    total_dependencies: int
    unique_dependencies: int
    cycle_count: int
    average_strength: float
    max_strength: float
    cluster_count: int
    most_central_component: Optional[str]
    dependencies_by_type: Dict[str, int] = field(default_factory=dict)
