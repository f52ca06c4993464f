"""Tests for visualizer.py."""

import plotly.graph_objects as go
import pytest

from kernel_dependency_analyzer.analyzer import DependencyAnalyzer, EnhancedDependencyAnalyzer
from kernel_dependency_analyzer.exceptions import ExportError
from kernel_dependency_analyzer.graph_builder import DependencyGraphBuilder
from kernel_dependency_analyzer.models import Component, ModuleDependency
from kernel_dependency_analyzer.visualizer import (
    DependencyVisualizer,
    build_component_table,
    filter_dependencies_by_strength,
    highlight_component_dependencies,
    highlight_cycles,
    render_dot,
    visualize_graph,
)


def _c(name, *deps):
    return Component(name=name, dependencies=list(deps))


def _highlighted(analysis):
    return [(d.from_module, d.to_module) for d in analysis.highlighted_dependencies()]


# ── DOT ───────────────────────────────────────────────────────────


class TestDot:
    def test_nodes_and_edges(self, chain):
        dot = render_dot(DependencyGraphBuilder().build(chain))
        assert dot.startswith("digraph DependencyGraph {\n")
        assert "rankdir=LR;" in dot
        assert '"A" [label="A"];' in dot
        assert '"B" [label="B"];' in dot
        assert '"A" -> "B";' in dot
        assert dot.rstrip().endswith("}")

    def test_one_edge_per_entry(self):
        dot = render_dot(DependencyGraphBuilder().build([_c("A", "B", "B"), _c("B")]))
        assert dot.count('"A" -> "B";') == 2

    def test_missing_target_dashed(self):
        dot = render_dot(DependencyGraphBuilder().build([_c("A", "ghost")]))
        assert '"ghost" [label="ghost", style=dashed, fillcolor=white];' in dot
        assert '"A" -> "ghost";' in dot

    def test_quotes_escaped(self):
        dot = render_dot(DependencyGraphBuilder().build([_c('say "hi"')]))
        assert '"say \\"hi\\""' in dot

    def test_write(self, tmp_path, chain):
        graph = DependencyGraphBuilder().build(chain)
        path = visualize_graph(graph, tmp_path / "deps.dot")
        assert path.read_text(encoding="utf-8") == render_dot(graph)

    def test_write_failure(self, tmp_path, chain):
        graph = DependencyGraphBuilder().build(chain)
        with pytest.raises(ExportError):
            visualize_graph(graph, tmp_path / "missing" / "deps.dot")


# ── highlight / filter ────────────────────────────────────────────


class TestHighlighting:
    def test_outgoing_only(self, diamond):
        analysis = EnhancedDependencyAnalyzer().analyze(diamond)
        highlight_component_dependencies(analysis, "B")
        assert _highlighted(analysis) == [("B", "D")]

    def test_with_dependents(self, diamond):
        analysis = EnhancedDependencyAnalyzer().analyze(diamond)
        highlight_component_dependencies(analysis, "B", include_dependents=True)
        assert _highlighted(analysis) == [("A", "B"), ("B", "D")]

    def test_resets_previous_highlight(self, diamond):
        analysis = EnhancedDependencyAnalyzer().analyze(diamond)
        highlight_component_dependencies(analysis, "A")
        highlight_component_dependencies(analysis, "C")
        assert _highlighted(analysis) == [("C", "D")]

    def test_unknown_component_clears(self, diamond):
        analysis = EnhancedDependencyAnalyzer().analyze(diamond)
        highlight_component_dependencies(analysis, "A")
        highlight_component_dependencies(analysis, "nobody")
        assert _highlighted(analysis) == []

    def test_highlight_cycles(self, kernel_components):
        analysis = EnhancedDependencyAnalyzer().analyze(kernel_components)
        highlight_component_dependencies(analysis, "vfs")
        highlight_cycles(analysis)
        assert _highlighted(analysis) == [("net", "skbuff"), ("skbuff", "net")]

    def test_highlight_cycles_wraps_around(self):
        analysis = EnhancedDependencyAnalyzer().analyze([_c("a", "b"), _c("b", "c"), _c("c", "a")])
        highlight_cycles(analysis)
        assert _highlighted(analysis) == [("a", "b"), ("b", "c"), ("c", "a")]

    def test_highlight_cycles_marks_first_entry_only(self):
        edges = [ModuleDependency("a", "b"), ModuleDependency("a", "b"), ModuleDependency("b", "a")]
        analysis = EnhancedDependencyAnalyzer().analyze([_c("a"), _c("b")], edges)
        highlight_cycles(analysis)
        assert [d.is_highlighted for d in analysis.dependencies] == [True, False, True]

    def test_filter_by_strength(self):
        edges = [ModuleDependency("a", "b")] * 3 + [ModuleDependency("b", "c")]
        analysis = EnhancedDependencyAnalyzer(max_strength=3.0).analyze(
            [_c("a"), _c("b"), _c("c")], edges)
        weights_before = [d.visual_weight for d in analysis.dependencies]

        filter_dependencies_by_strength(analysis, 0.5)
        assert [d.is_visible for d in analysis.dependencies] == [True, True, True, False]
        assert [d.visual_weight for d in analysis.dependencies] == weights_before

        filter_dependencies_by_strength(analysis, 0.0)
        assert all(d.is_visible for d in analysis.dependencies)


# ── plotly / pandas ───────────────────────────────────────────────


class TestPlots:
    def test_graph_plot(self, kernel_components):
        analysis = EnhancedDependencyAnalyzer().analyze(kernel_components)
        highlight_cycles(analysis)
        fig = DependencyVisualizer(analysis).create_dependency_graph_plot()
        assert isinstance(fig, go.Figure)
        names = [trace.name for trace in fig.data]
        assert names == ["Dependencies", "Highlighted Dependencies", "Components"]
        node_trace = fig.data[-1]
        # Seven components plus the missing "timer"
        assert len(node_trace.x) == 8

    def test_hidden_edges_not_drawn(self, chain):
        analysis = EnhancedDependencyAnalyzer().analyze(chain)
        filter_dependencies_by_strength(analysis, 1.0)
        fig = DependencyVisualizer(analysis).create_dependency_graph_plot()
        assert [trace.name for trace in fig.data] == ["Components"]

    def test_empty_plot(self):
        fig = DependencyVisualizer(EnhancedDependencyAnalyzer().analyze([])).create_dependency_graph_plot()
        assert len(fig.data) == 0
        assert fig.layout.annotations[0].text == "No dependencies to visualize"

    def test_layout_cached(self, chain):
        visualizer = DependencyVisualizer(EnhancedDependencyAnalyzer().analyze(chain))
        assert visualizer._get_graph_layout() is visualizer._get_graph_layout()

    def test_centrality_chart(self, diamond):
        analysis = EnhancedDependencyAnalyzer().analyze(diamond)
        fig = DependencyVisualizer(analysis).create_centrality_chart()
        assert list(fig.data[0].x[:2]) in (["B", "C"], ["C", "B"])

    def test_write_html(self, tmp_path, chain):
        analysis = EnhancedDependencyAnalyzer().analyze(chain)
        path = DependencyVisualizer(analysis).write_html(tmp_path / "graph.html")
        assert "<html>" in path.read_text(encoding="utf-8")


class TestComponentTable:
    def test_columns_and_rows(self, kernel_components):
        result = DependencyAnalyzer().analyze(kernel_components)
        analysis = EnhancedDependencyAnalyzer().analyze(kernel_components)
        table = build_component_table(result, analysis)
        assert list(table.columns) == ["component", "type", "dependencies", "dependents",
                                       "missing_dependencies", "in_cycle", "centrality"]
        assert len(table) == 7
        sched = table.set_index("component").loc["sched"]
        assert sched["dependencies"] == 2
        assert sched["missing_dependencies"] == 1
        assert sched["type"] == "process_management"
        assert bool(table.set_index("component").loc["net", "in_cycle"]) is True

    def test_without_enhanced_analysis(self, chain):
        table = build_component_table(DependencyAnalyzer().analyze(chain))
        assert "centrality" not in table.columns
        assert table["dependents"].tolist() == [0, 1]
