"""
Dependency Visualizer
Graphviz export, highlight/filter state and interactive Plotly figures
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Union

import networkx as nx
import pandas as pd
import plotly.graph_objects as go

from .fileio import atomic_write_text
from .models import DependencyAnalysisResult, DependencyGraph, EnhancedDependencyAnalysis

logger = logging.getLogger(__name__)


# =============================================================================
# GRAPHVIZ
# =============================================================================

def _dot_id(name: str) -> str:
    return '"' + name.replace('\\', '\\\\').replace('"', '\\"') + '"'


def render_dot(graph: DependencyGraph) -> str:
    """Graphviz DOT text: one node per component, one edge per dependency entry"""
    lines = [
        "digraph DependencyGraph {",
        "    rankdir=LR;",
        "    node [shape=box, style=filled, fillcolor=lightblue];",
    ]

    for name in graph.component_names():
        lines.append(f"    {_dot_id(name)} [label={_dot_id(name)}];")

    missing = []
    for dependencies in graph.adjacency.values():
        for dep in dependencies:
            if dep not in graph.adjacency and dep not in missing:
                missing.append(dep)
    for name in missing:
        lines.append(f"    {_dot_id(name)} [label={_dot_id(name)}, style=dashed, fillcolor=white];")

    for name, dependencies in graph.adjacency.items():
        for dep in dependencies:
            lines.append(f"    {_dot_id(name)} -> {_dot_id(dep)};")

    lines.append("}")
    return "\n".join(lines) + "\n"


def visualize_graph(graph: DependencyGraph, output_file: Union[str, Path]) -> Path:
    """Write the graph as a DOT file; raises ExportError on failure"""
    return atomic_write_text(output_file, render_dot(graph))


# =============================================================================
# HIGHLIGHT / FILTER
# =============================================================================

def _reset_highlights(analysis: EnhancedDependencyAnalysis):
    for dep in analysis.dependencies:
        dep.is_highlighted = False


def highlight_component_dependencies(analysis: EnhancedDependencyAnalysis,
                                     component_name: str,
                                     include_dependents: bool = False):
    """Highlight edges leaving ``component_name`` and, optionally, edges entering it"""
    _reset_highlights(analysis)
    for dep in analysis.dependencies:
        if dep.from_module == component_name:
            dep.is_highlighted = True
        if include_dependents and dep.to_module == component_name:
            dep.is_highlighted = True


def highlight_cycles(analysis: EnhancedDependencyAnalysis):
    """Highlight the edge joining each pair of consecutive cycle members.

    Only the first dependency entry for a pair is highlighted; repeated
    entries of the same pair stay as they are.
    """
    _reset_highlights(analysis)
    for cycle in analysis.cycles:
        for edge in cycle.edges():
            for dep in analysis.dependencies:
                if (dep.from_module, dep.to_module) == edge:
                    dep.is_highlighted = True
                    break


def filter_dependencies_by_strength(analysis: EnhancedDependencyAnalysis, min_strength: float):
    """Show only edges whose visual weight reaches ``min_strength``"""
    for dep in analysis.dependencies:
        dep.is_visible = dep.visual_weight >= min_strength


# =============================================================================
# PLOTLY / PANDAS
# =============================================================================

class DependencyVisualizer:
    """Creates interactive visualizations for an enhanced analysis"""

    def __init__(self, analysis: EnhancedDependencyAnalysis):
        self.analysis = analysis
        self.layout_cache = {}

    def _node_names(self) -> List[str]:
        names = list(self.analysis.component_centrality)
        for dep in self.analysis.dependencies:
            for name in (dep.from_module, dep.to_module):
                if name not in names:
                    names.append(name)
        return names

    def _layout_graph(self) -> nx.DiGraph:
        digraph = nx.DiGraph()
        digraph.add_nodes_from(self._node_names())
        for dep in self.analysis.dependencies:
            digraph.add_edge(dep.from_module, dep.to_module)
        return digraph

    def _get_graph_layout(self) -> Dict:
        """Spring layout over all nodes, cached per visualizer"""
        if 'spring' not in self.layout_cache:
            digraph = self._layout_graph()
            if digraph.number_of_nodes() > 100:
                pos = nx.spring_layout(digraph, k=1, iterations=20, seed=42)
            else:
                pos = nx.spring_layout(digraph, k=2, iterations=50, seed=42)
            self.layout_cache['spring'] = pos
        return self.layout_cache['spring']

    def create_dependency_graph_plot(self, title: str = "Dependency Graph") -> go.Figure:
        """Interactive graph of the visible dependencies.

        Highlighted edges get their own trace. Node size follows centrality
        and components on a cycle are coloured.
        """
        names = self._node_names()
        if not names:
            return self._create_empty_plot("No dependencies to visualize")

        pos = self._get_graph_layout()
        cycle_nodes = {name for cycle in self.analysis.cycles for name in cycle.components}

        traces = self._create_edge_traces(pos)
        traces.append(self._create_node_trace(pos, names, cycle_nodes))

        return go.Figure(data=traces, layout=self._get_plot_layout(title))

    def _create_edge_traces(self, pos: Dict) -> List[go.Scatter]:
        regular_x, regular_y = [], []
        highlight_x, highlight_y = [], []

        for dep in self.analysis.visible_dependencies():
            x0, y0 = pos.get(dep.from_module, (0, 0))
            x1, y1 = pos.get(dep.to_module, (0, 0))
            if dep.is_highlighted:
                highlight_x.extend([x0, x1, None])
                highlight_y.extend([y0, y1, None])
            else:
                regular_x.extend([x0, x1, None])
                regular_y.extend([y0, y1, None])

        edge_traces = []
        if regular_x:
            edge_traces.append(go.Scatter(
                x=regular_x, y=regular_y,
                line=dict(width=1, color='#888'),
                hoverinfo='none',
                mode='lines',
                name="Dependencies"
            ))
        if highlight_x:
            edge_traces.append(go.Scatter(
                x=highlight_x, y=highlight_y,
                line=dict(width=3, color='#FF4444'),
                hoverinfo='none',
                mode='lines',
                name="Highlighted Dependencies"
            ))
        return edge_traces

    def _create_node_trace(self, pos: Dict, names: List[str], cycle_nodes: Set[str]) -> go.Scatter:
        centrality = self.analysis.component_centrality
        top = max(centrality.values(), default=0.0) or 1.0

        node_x, node_y, hover, colors, sizes = [], [], [], [], []
        for name in names:
            x, y = pos[name]
            node_x.append(x)
            node_y.append(y)

            color, size = self._get_node_style(name, cycle_nodes, top)
            colors.append(color)
            sizes.append(size)

            text = f"<b>{name}</b><br>Centrality: {centrality.get(name, 0.0):.2f}"
            if name not in centrality:
                text += "<br><b>Missing component</b>"
            if name in cycle_nodes:
                text += "<br><b>Part of cycle</b>"
            hover.append(text)

        return go.Scatter(
            x=node_x, y=node_y,
            mode='markers+text',
            text=names,
            textposition="middle center",
            textfont=dict(size=8),
            hovertemplate='%{hovertext}<extra></extra>',
            hovertext=hover,
            marker=dict(
                size=sizes,
                color=colors,
                line=dict(width=2, color='white'),
                opacity=0.8
            ),
            name="Components"
        )

    def _get_node_style(self, name: str, cycle_nodes: Set[str], top: float) -> Tuple[str, float]:
        """Node colour and size from cycle membership and centrality"""
        centrality = self.analysis.component_centrality
        size = 15 + 15 * (centrality.get(name, 0.0) / top)

        if name not in centrality:
            color = '#AAAAAA'  # Referenced but never analyzed
        elif name in cycle_nodes:
            color = '#FF8800'
        else:
            color = '#44AA44'
        return color, size

    def _get_plot_layout(self, title: str) -> dict:
        return dict(
            title=dict(text=title, font=dict(size=16)),
            showlegend=True,
            hovermode='closest',
            margin=dict(b=20, l=5, r=5, t=40),
            annotations=[dict(
                text="Node size follows betweenness centrality. Red edges are highlighted.",
                showarrow=False,
                xref="paper", yref="paper",
                x=0.005, y=-0.002,
                xanchor='left', yanchor='bottom',
                font=dict(color="#888", size=12)
            )],
            xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            plot_bgcolor='white'
        )

    def _create_empty_plot(self, message: str) -> go.Figure:
        fig = go.Figure()
        fig.add_annotation(
            text=message,
            xref="paper", yref="paper",
            x=0.5, y=0.5,
            showarrow=False,
            font=dict(size=16, color="gray")
        )
        fig.update_layout(
            xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            plot_bgcolor='white'
        )
        return fig

    def create_centrality_chart(self) -> go.Figure:
        """Bar chart of components by betweenness centrality"""
        centrality = self.analysis.component_centrality
        if not centrality:
            return self._create_empty_plot("No components analyzed")

        ranked = sorted(centrality.items(), key=lambda item: item[1], reverse=True)
        fig = go.Figure(data=[
            go.Bar(
                x=[name for name, _ in ranked],
                y=[score for _, score in ranked],
                marker_color='#4444FF',
                text=[f"{score:.2f}" for _, score in ranked],
                textposition='auto',
            )
        ])
        fig.update_layout(
            title="Betweenness Centrality",
            xaxis_title="Component",
            yaxis_title="Centrality",
            plot_bgcolor='white'
        )
        return fig

    def write_html(self, output_file: Union[str, Path], fig: Optional[go.Figure] = None) -> Path:
        """Write a figure (the dependency graph by default) as standalone HTML"""
        fig = fig if fig is not None else self.create_dependency_graph_plot()
        return atomic_write_text(output_file, fig.to_html(include_plotlyjs='cdn'))


def build_component_table(result: DependencyAnalysisResult,
                          analysis: Optional[EnhancedDependencyAnalysis] = None) -> pd.DataFrame:
    """One row per component with its counts, cycle membership and centrality"""
    graph = result.graph
    cycle_nodes = {name for cycle in result.cycles for name in cycle}
    component_types = {c.name: c.component_type for c in graph.components}

    rows = []
    for name in graph.component_names():
        dependencies = graph.adjacency.get(name, [])
        row = {
            'component': name,
            'type': component_types[name],
            'dependencies': len(dependencies),
            'dependents': result.dependency_counts.get(name, 0),
            'missing_dependencies': sum(1 for dep in dependencies if dep not in graph.adjacency),
            'in_cycle': name in cycle_nodes,
        }
        if analysis is not None:
            row['centrality'] = analysis.component_centrality.get(name, 0.0)
        rows.append(row)

    columns = ['component', 'type', 'dependencies', 'dependents', 'missing_dependencies', 'in_cycle']
    if analysis is not None:
        columns.append('centrality')
    return pd.DataFrame(rows, columns=columns)
