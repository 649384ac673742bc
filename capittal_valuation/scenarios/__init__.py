"""Scenario configuration, policy registry and scenario generation."""

from capittal_valuation.scenarios.config import EngineConfig
from capittal_valuation.scenarios.config import ScenarioConfig
from capittal_valuation.scenarios.config import ScenarioType
from capittal_valuation.scenarios.generator import generate_scenarios
from capittal_valuation.scenarios.registry import create_policies
from capittal_valuation.scenarios.registry import list_policies
from capittal_valuation.scenarios.registry import POLICY_REGISTRY

__all__ = [
    'EngineConfig',
    'ScenarioConfig',
    'ScenarioType',
    'POLICY_REGISTRY',
    'create_policies',
    'generate_scenarios',
    'list_policies',
]
