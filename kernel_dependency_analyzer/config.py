"""
Analyzer configuration read from the environment (and a .env file if present)
"""

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from .exceptions import ConfigError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class AnalyzerSettings:
    """Settings shared by the analyzers and the CLI"""
    max_strength: float = 10.0
    min_strength_for_visibility: float = 0.0
    strict_names: bool = False
    deduplicate_cycles: bool = True
    cluster_detection: bool = True
    log_level: str = "INFO"

    def __post_init__(self):
        if self.max_strength <= 0:
            raise ConfigError(f"max_strength must be positive, got {self.max_strength}")
        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "AnalyzerSettings":
        """Build settings from KDEP_* environment variables"""
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))
        return cls(
            max_strength=_get_float("KDEP_MAX_STRENGTH", cls.max_strength),
            min_strength_for_visibility=_get_float("KDEP_MIN_VISIBILITY", cls.min_strength_for_visibility),
            strict_names=_get_bool("KDEP_STRICT_NAMES", cls.strict_names),
            deduplicate_cycles=_get_bool("KDEP_DEDUPE_CYCLES", cls.deduplicate_cycles),
            cluster_detection=_get_bool("KDEP_CLUSTER_DETECTION", cls.cluster_detection),
            log_level=os.getenv("KDEP_LOG_LEVEL", cls.log_level),
        )
