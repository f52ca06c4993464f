"""
Dependency analyzers

``DependencyAnalyzer`` produces the build-oriented analysis (missing
dependencies, cycles, dependent counts, topological order).
``EnhancedDependencyAnalyzer`` produces the visualization-oriented one
(edge weights, centrality, clusters).
"""

import logging
from typing import Dict, List, Optional

from .centrality import betweenness_centrality
from .clustering import compute_dependency_strength, detect_clusters, visual_weight
from .config import AnalyzerSettings
from .cycle_detector import CycleDetector, deduplicate_cycles, find_cycles
from .graph_builder import DependencyGraphBuilder, build_module_dependencies
from .models import (
    Component,
    DependencyAnalysisResult,
    DependencyCycle,
    DependencyStatistics,
    EnhancedDependencyAnalysis,
    EnhancedModuleDependency,
    ModuleDependency,
)

logger = logging.getLogger(__name__)


class DependencyAnalyzer:
    """Analyzes dependencies between kernel components"""

    def __init__(self,
                 enable_cycle_detection: bool = True,
                 enable_topological_sorting: bool = True,
                 enable_missing_dependency_check: bool = True,
                 deduplicate_cycles: bool = True,
                 strict: bool = False):
        self.enable_cycle_detection = enable_cycle_detection
        self.enable_topological_sorting = enable_topological_sorting
        self.enable_missing_dependency_check = enable_missing_dependency_check
        self.deduplicate_cycles = deduplicate_cycles
        self.strict = strict

    @classmethod
    def from_settings(cls, settings: AnalyzerSettings) -> "DependencyAnalyzer":
        return cls(deduplicate_cycles=settings.deduplicate_cycles,
                   strict=settings.strict_names)

    def analyze(self, components: List[Component]) -> DependencyAnalysisResult:
        """Run every enabled check over ``components``.

        Cycles and missing dependencies are reported, never raised, and do not
        stop the remaining steps. The topological order is left empty when a
        cycle was found since it could only cover part of the graph.
        """
        graph = DependencyGraphBuilder(strict=self.strict).build(components)
        detector = CycleDetector(graph)
        result = DependencyAnalysisResult(graph=graph)

        if self.enable_missing_dependency_check:
            result.components_with_missing_dependencies = detector.find_missing_dependencies()

        if self.enable_cycle_detection:
            result.cycles = detector.detect_cycles(deduplicate=self.deduplicate_cycles)

        result.strongly_connected_components = detector.find_strongly_connected_components()

        result.components_with_no_dependencies = detector.find_components_with_no_dependencies()
        result.dependency_counts = detector.calculate_dependency_counts()

        if self.enable_topological_sorting and not result.cycles:
            result.topological_order = detector.topological_sort()

        logger.info(f"Analyzed {len(graph.adjacency)} components: "
                    f"{len(result.cycles)} cycles, "
                    f"{len(result.components_with_missing_dependencies)} missing dependencies")
        return result


class EnhancedDependencyAnalyzer:
    """Computes edge weights, centrality and clusters for visualization"""

    def __init__(self,
                 max_strength: float = 10.0,
                 min_strength_for_visibility: float = 0.0,
                 cluster_detection_enabled: bool = True,
                 cycle_detection_enabled: bool = True,
                 deduplicate_cycles: bool = True):
        self.set_max_strength(max_strength)
        self.min_strength_for_visibility = min_strength_for_visibility
        self.cluster_detection_enabled = cluster_detection_enabled
        self.cycle_detection_enabled = cycle_detection_enabled
        self.deduplicate_cycles = deduplicate_cycles

    @classmethod
    def from_settings(cls, settings: AnalyzerSettings) -> "EnhancedDependencyAnalyzer":
        return cls(max_strength=settings.max_strength,
                   min_strength_for_visibility=settings.min_strength_for_visibility,
                   cluster_detection_enabled=settings.cluster_detection,
                   deduplicate_cycles=settings.deduplicate_cycles)

    def set_max_strength(self, max_strength: float):
        if max_strength <= 0:
            raise ValueError(f"max_strength must be positive, got {max_strength}")
        self.max_strength = max_strength

    def set_min_strength_for_visibility(self, min_strength: float):
        self.min_strength_for_visibility = min_strength

    def set_cluster_detection(self, enabled: bool):
        self.cluster_detection_enabled = enabled

    def set_cycle_detection(self, enabled: bool):
        self.cycle_detection_enabled = enabled

    def analyze(self,
                components: List[Component],
                dependencies: Optional[List[ModuleDependency]] = None) -> EnhancedDependencyAnalysis:
        """Analyze ``components`` and their edges.

        When ``dependencies`` is not given, one edge is derived per entry of
        each component's dependency list.
        """
        if dependencies is None:
            dependencies = build_module_dependencies(components)

        strength = compute_dependency_strength(dependencies)

        enhanced = []
        for dep in dependencies:
            dep_strength = strength[dep.from_module][dep.to_module]
            weight = visual_weight(dep_strength, self.max_strength)
            enhanced.append(EnhancedModuleDependency(
                original=dep,
                strength=dep_strength,
                visual_weight=weight,
                is_visible=weight >= self.min_strength_for_visibility,
            ))

        names = list(dict.fromkeys(c.name for c in components))
        adjacency: Dict[str, List[str]] = {}
        for dep in dependencies:
            adjacency.setdefault(dep.from_module, []).append(dep.to_module)

        cycles = []
        if self.cycle_detection_enabled:
            roots = list(dict.fromkeys(names + [n for dep in dependencies
                                                for n in (dep.from_module, dep.to_module)]))
            found = find_cycles(adjacency, roots)
            if self.deduplicate_cycles:
                found = deduplicate_cycles(found)
            cycles = [DependencyCycle(components=cycle) for cycle in found]

        centrality = betweenness_centrality(names, adjacency)

        clusters = []
        if self.cluster_detection_enabled:
            clusters = detect_clusters(names, strength, self.max_strength)

        logger.info(f"Enhanced analysis: {len(enhanced)} dependencies, "
                    f"{len(cycles)} cycles, {len(clusters)} clusters")
        return EnhancedDependencyAnalysis(
            dependencies=enhanced,
            cycles=cycles,
            dependency_strength=strength,
            component_centrality=centrality,
            clusters=clusters,
        )


def generate_statistics(analysis: EnhancedDependencyAnalysis) -> DependencyStatistics:
    """Summary numbers for an enhanced analysis"""
    total = len(analysis.dependencies)
    unique = {(dep.from_module, dep.to_module) for dep in analysis.dependencies}
    weights = [dep.visual_weight for dep in analysis.dependencies]

    by_type: Dict[str, int] = {}
    for dep in analysis.dependencies:
        dep_type = dep.original.dependency_type
        by_type[dep_type] = by_type.get(dep_type, 0) + 1

    most_central = None
    if analysis.component_centrality:
        most_central = max(analysis.component_centrality, key=analysis.component_centrality.get)

    return DependencyStatistics(
        total_dependencies=total,
        unique_dependencies=len(unique),
        cycle_count=len(analysis.cycles),
        average_strength=sum(weights) / total if total else 0.0,
        max_strength=max(weights, default=0.0),
        cluster_count=len(analysis.clusters),
        most_central_component=most_central,
        dependencies_by_type=by_type,
    )
