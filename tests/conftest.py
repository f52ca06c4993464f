"""Shared fixtures for dependency analyzer tests."""

import pytest

from kernel_dependency_analyzer.models import Component


def comp(name: str, *deps: str, component_type: str = "other") -> Component:
    """Shortcut to build a Component."""
    return Component(name=name, dependencies=list(deps), component_type=component_type)


@pytest.fixture
def chain():
    """A -> B, B has no dependencies."""
    return [comp("A", "B"), comp("B")]


@pytest.fixture
def two_cycle():
    return [comp("A", "B"), comp("B", "A")]


@pytest.fixture
def diamond():
    """A -> B, A -> C, B -> D, C -> D."""
    return [comp("A", "B", "C"), comp("B", "D"), comp("C", "D"), comp("D")]


@pytest.fixture
def kernel_components():
    """Small kernel-like component set with one cycle and one missing dependency."""
    return [
        comp("vfs", "mm", "sched", component_type="file_system"),
        comp("ext4", "vfs", "block", component_type="file_system"),
        comp("block", "mm", component_type="driver"),
        comp("mm", component_type="memory_management"),
        comp("sched", "mm", "timer", component_type="process_management"),
        comp("net", "skbuff", component_type="network"),
        comp("skbuff", "net", component_type="network"),
    ]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep KDEP_* settings from the developer's shell out of the tests."""
    for name in ("KDEP_MAX_STRENGTH", "KDEP_MIN_VISIBILITY", "KDEP_STRICT_NAMES",
                 "KDEP_DEDUPE_CYCLES", "KDEP_CLUSTER_DETECTION", "KDEP_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
