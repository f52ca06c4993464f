"""
Betweenness centrality for dependency graphs
"""

from typing import Dict, Iterable, Mapping, Sequence

import networkx as nx


def betweenness_centrality(nodes: Iterable[str],
                           adjacency: Mapping[str, Sequence[str]]) -> Dict[str, float]:
    """Unnormalized directed betweenness centrality.

    Repeated dependency entries count as a single edge. Targets that are not
    in ``nodes`` are traversed but not reported. Scores are only comparable
    within one graph.
    """
    nodes = list(dict.fromkeys(nodes))

    digraph = nx.DiGraph()
    digraph.add_nodes_from(nodes)
    for name, dependencies in adjacency.items():
        digraph.add_edges_from((name, dep) for dep in dependencies)

    scores = nx.betweenness_centrality(digraph, normalized=False)
    return {node: float(scores[node]) for node in nodes}
