"""
Dependency strength, visual weight and strong-dependency clusters
"""

import logging
from typing import Dict, Iterable, List

from .models import DependencyCluster, ModuleDependency

logger = logging.getLogger(__name__)

# Fraction of max_strength a pair needs to pull its target into a cluster
STRONG_DEPENDENCY_RATIO = 0.7


def compute_dependency_strength(dependencies: Iterable[ModuleDependency]) -> Dict[str, Dict[str, float]]:
    """Summed ``count`` of each ordered (from, to) pair.

    Edges derived from component lists carry a count of 1, so there the
    strength is the number of repeated entries.
    """
    strength: Dict[str, Dict[str, float]] = {}
    for dep in dependencies:
        targets = strength.setdefault(dep.from_module, {})
        targets[dep.to_module] = targets.get(dep.to_module, 0.0) + dep.count
    return strength


def visual_weight(strength: float, max_strength: float) -> float:
    if max_strength <= 0:
        raise ValueError(f"max_strength must be positive, got {max_strength}")
    return strength / max_strength


def detect_clusters(component_names: Iterable[str],
                    dependency_strength: Dict[str, Dict[str, float]],
                    max_strength: float,
                    ratio: float = STRONG_DEPENDENCY_RATIO) -> List[DependencyCluster]:
    """Greedy grouping of components by strong outgoing dependencies.

    Components are taken in the given order. An unassigned component with at
    least one target of strength >= ratio * max_strength starts a cluster
    holding itself and its still unassigned strong targets. Components that
    never qualify stay unclustered.
    """
    threshold = max_strength * ratio
    clusters = []
    assigned = set()

    for name in component_names:
        if name in assigned:
            continue

        strong_deps = [target for target, strength in dependency_strength.get(name, {}).items()
                       if strength >= threshold]
        if not strong_deps:
            continue

        members = [name]
        assigned.add(name)
        for target in strong_deps:
            if target not in assigned:
                members.append(target)
                assigned.add(target)

        clusters.append(DependencyCluster(id=f"cluster_{len(clusters)}", components=members))

    logger.debug(f"Detected {len(clusters)} dependency clusters (threshold {threshold})")
    return clusters
