"""Declarative test case definitions."""

from .schema import Scenario, unique_name
from .catalog import (
    SCENARIOS,
    MODULES,
    TEST_TAGS,
    get_scenario,
    list_scenarios,
    node_group_name,
)

__all__ = [
    'Scenario',
    'unique_name',
    'SCENARIOS',
    'MODULES',
    'TEST_TAGS',
    'get_scenario',
    'list_scenarios',
    'node_group_name',
]
