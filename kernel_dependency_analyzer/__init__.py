"""
Kernel Dependency Analyzer
Dependency graphs, cycle detection, build ordering and centrality for kernel components
"""

from .analyzer import DependencyAnalyzer, EnhancedDependencyAnalyzer, generate_statistics
from .config import AnalyzerSettings
from .cycle_detector import CycleDetector
from .exceptions import (
    ComponentParseError,
    ConfigError,
    DependencyAnalyzerError,
    DuplicateComponentError,
    ExportError,
)
from .graph_builder import DependencyGraphBuilder
from .models import (
    Component,
    DependencyAnalysisResult,
    DependencyCluster,
    DependencyCycle,
    DependencyGraph,
    DependencyStatistics,
    EnhancedDependencyAnalysis,
    EnhancedModuleDependency,
    ModuleDependency,
)
from .report import generate_report, write_report
from .visualizer import (
    DependencyVisualizer,
    filter_dependencies_by_strength,
    highlight_component_dependencies,
    highlight_cycles,
    visualize_graph,
)

__version__ = "0.1.0"

__all__ = [
    'AnalyzerSettings', 'Component', 'ComponentParseError', 'ConfigError', 'CycleDetector',
    'DependencyAnalysisResult', 'DependencyAnalyzer', 'DependencyAnalyzerError',
    'DependencyCluster', 'DependencyCycle', 'DependencyGraph', 'DependencyGraphBuilder',
    'DependencyStatistics', 'DependencyVisualizer', 'DuplicateComponentError',
    'EnhancedDependencyAnalysis', 'EnhancedDependencyAnalyzer', 'EnhancedModuleDependency',
    'ExportError', 'ModuleDependency', 'filter_dependencies_by_strength', 'generate_report',
    'generate_statistics', 'highlight_component_dependencies', 'highlight_cycles',
    'visualize_graph', 'write_report',
]
