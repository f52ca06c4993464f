"""Click CLI: analyze a component list and export reports."""

import logging
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .analyzer import DependencyAnalyzer, EnhancedDependencyAnalyzer, generate_statistics
from .config import AnalyzerSettings
from .exceptions import DependencyAnalyzerError
from .graph_builder import load_structure
from .report import generate_report, write_report
from .visualizer import (
    DependencyVisualizer,
    filter_dependencies_by_strength,
    highlight_component_dependencies,
    highlight_cycles,
    visualize_graph,
)

_INPUT = click.Path(exists=True, dir_okay=False, path_type=Path)
_OUTPUT = click.Path(dir_okay=False, path_type=Path)


def _load_settings() -> AnalyzerSettings:
    try:
        settings = AnalyzerSettings.from_env()
    except DependencyAnalyzerError as e:
        raise click.ClickException(str(e))
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
    return settings


@click.group()
@click.version_option(version=__version__)
def cli():
    """kernel-deps: dependency analysis for extracted kernel components."""


@cli.command()
@click.argument("input_file", type=_INPUT)
@click.option("--report", "report_path", type=_OUTPUT, help="Write the text report here")
@click.option("--dot", "dot_path", type=_OUTPUT, help="Write a Graphviz DOT file here")
@click.option("--strict", is_flag=True, help="Reject duplicate component names")
@click.option("--no-dedupe", is_flag=True, help="Keep repeated cycle reports")
def analyze(input_file: Path, report_path: Optional[Path], dot_path: Optional[Path],
            strict: bool, no_dedupe: bool):
    """Print the dependency report for INPUT_FILE."""
    settings = _load_settings()
    if strict:
        settings.strict_names = True
    if no_dedupe:
        settings.deduplicate_cycles = False

    try:
        components, _ = load_structure(input_file)
        result = DependencyAnalyzer.from_settings(settings).analyze(components)
        if report_path:
            write_report(result, report_path)
        if dot_path:
            visualize_graph(result.graph, dot_path)
    except DependencyAnalyzerError as e:
        raise click.ClickException(str(e))

    click.echo(generate_report(result), nl=False)
    if report_path:
        click.echo(f"Report written to {report_path}")
    if dot_path:
        click.echo(f"Graph written to {dot_path}")


@cli.command()
@click.argument("input_file", type=_INPUT)
@click.option("--max-strength", type=float, help="Strength that maps to visual weight 1.0")
@click.option("--min-visibility", type=float, help="Hide edges below this visual weight")
@click.option("--highlight", "highlight_name", help="Highlight the dependencies of a component")
@click.option("--with-dependents", is_flag=True, help="Also highlight edges into --highlight")
@click.option("--highlight-cycles", "cycles_flag", is_flag=True, help="Highlight cycle edges")
@click.option("--html", "html_path", type=_OUTPUT, help="Write an interactive graph as HTML")
def enhanced(input_file: Path, max_strength: Optional[float], min_visibility: Optional[float],
             highlight_name: Optional[str], with_dependents: bool, cycles_flag: bool,
             html_path: Optional[Path]):
    """Print weights, centrality and clusters for INPUT_FILE."""
    settings = _load_settings()

    try:
        components, edges = load_structure(input_file)
        analyzer = EnhancedDependencyAnalyzer.from_settings(settings)
        if max_strength is not None:
            analyzer.set_max_strength(max_strength)
        analysis = analyzer.analyze(components, edges)
    except ValueError as e:
        raise click.ClickException(str(e))

    if min_visibility is not None:
        filter_dependencies_by_strength(analysis, min_visibility)
    if cycles_flag:
        highlight_cycles(analysis)
    elif highlight_name:
        highlight_component_dependencies(analysis, highlight_name, with_dependents)

    stats = generate_statistics(analysis)
    click.echo(f"Dependencies: {stats.total_dependencies} ({stats.unique_dependencies} unique)")
    click.echo(f"Cycles: {stats.cycle_count}")
    click.echo(f"Clusters: {stats.cluster_count}")
    click.echo(f"Average weight: {stats.average_strength:.2f}  Max weight: {stats.max_strength:.2f}")
    click.echo(f"Most central: {stats.most_central_component or 'None'}")

    click.echo("\nCentrality:")
    ranked = sorted(analysis.component_centrality.items(), key=lambda item: item[1], reverse=True)
    for name, score in ranked:
        click.echo(f"  {name}: {score:.2f}")

    if analysis.clusters:
        click.echo("\nClusters:")
    for cluster in analysis.clusters:
        click.echo(f"  {cluster.id}: {', '.join(cluster.components)}")

    highlighted = analysis.highlighted_dependencies()
    if highlighted:
        click.echo("\nHighlighted:")
        for dep in highlighted:
            click.echo(f"  {dep.from_module} -> {dep.to_module}")

    if html_path:
        try:
            DependencyVisualizer(analysis).write_html(html_path)
        except DependencyAnalyzerError as e:
            raise click.ClickException(str(e))
        click.echo(f"Graph written to {html_path}")


def main():
    cli()


if __name__ == "__main__":
    main()
