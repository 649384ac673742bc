"""
Policy registry for mapping string names to policy factories.

This enables engine configurations to be written with string names
(JSON friendly) while still instantiating the correct policy classes.

To add a new policy:
1. Implement the policy class in the appropriate module
   (e.g., policies/growth.py)
2. Register a factory for it in the matching dictionary below

Example:
  GROWTH_POLICIES['aggressive'] = lambda: BandedGrowth(
      bands=((20.0, 0.25), (10.0, 0.15)))
"""

from collections.abc import Callable
from typing import Any, cast

from capittal_valuation.policies.growth import BandedGrowth
from capittal_valuation.policies.growth import GrowthPolicy
from capittal_valuation.policies.growth import NoGrowthAdjustment
from capittal_valuation.policies.size import NoSizePremium
from capittal_valuation.policies.size import SizePolicy
from capittal_valuation.policies.size import SizePremium
from capittal_valuation.scenarios.config import EngineConfig
from capittal_valuation.tables import CONSERVATIVE_GROWTH_BANDS

GROWTH_POLICIES: dict[str, Callable[[], GrowthPolicy]] = {
    'standard':
        BandedGrowth,
    'conservative':
        lambda: BandedGrowth(bands=CONSERVATIVE_GROWTH_BANDS),
    'none':
        NoGrowthAdjustment,
}

SIZE_POLICIES: dict[str, Callable[[], SizePolicy]] = {
    'standard': SizePremium,
    'none': NoSizePremium,
}

POLICY_REGISTRY = {
    'growth': GROWTH_POLICIES,
    'size': SIZE_POLICIES,
}

def create_policies(config: EngineConfig) -> dict[str, Any]:
  """
  Create policy instances from an engine configuration.

  Args:
    config: EngineConfig with policy names

  Returns:
    Dictionary with instantiated policy objects:
    - growth: GrowthPolicy
    - size: SizePolicy

  Raises:
    KeyError: If a policy name is not found in the registry
  """
  try:
    growth_factory = GROWTH_POLICIES[config.growth]
  except KeyError as e:
    raise KeyError(f"Unknown growth policy: '{config.growth}'. "
                   f'Available: {list(GROWTH_POLICIES.keys())}') from e

  try:
    size_factory = SIZE_POLICIES[config.size]
  except KeyError as e:
    raise KeyError(f"Unknown size policy: '{config.size}'. "
                   f'Available: {list(SIZE_POLICIES.keys())}') from e

  return {
      'growth': growth_factory(),
      'size': size_factory(),
  }

def list_policies() -> dict[str, list[str]]:
  """
  List all available policies by category.

  Returns:
    Dictionary mapping category names to list of policy names
  """
  result: dict[str, list[str]] = {}
  for category, policies_dict in POLICY_REGISTRY.items():
    policy_dict = cast(dict[str, object], policies_dict)
    result[category] = list(policy_dict.keys())
  return result
