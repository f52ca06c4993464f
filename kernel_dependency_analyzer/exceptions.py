"""
Exception types for the dependency analyzer.

Cycles and missing dependencies are analysis results, not errors. The
exceptions here cover bad input, strict-mode violations and failed exports.
"""

from typing import List


class DependencyAnalyzerError(Exception):
    """Base class for all analyzer errors"""


class ConfigError(DependencyAnalyzerError, ValueError):
    """Invalid configuration value"""


class ComponentParseError(DependencyAnalyzerError, ValueError):
    """Component input could not be parsed"""


class DuplicateComponentError(DependencyAnalyzerError):
    """Raised by a strict graph build when component names repeat"""

    def __init__(self, names: List[str]):
        self.names = names
        super().__init__(f"Duplicate component names: {', '.join(names)}")


class ExportError(DependencyAnalyzerError, OSError):
    """Writing a report or visualization to disk failed"""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write {path}: {reason}")
