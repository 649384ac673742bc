"""
Multiple adjustment policies.

Each policy estimates one input of the multiple valuation (sector band,
growth adjustment, size premium) and returns both a value and diagnostic
information.

To add a new policy:
1. Create a new class inheriting from the appropriate base (e.g., GrowthPolicy)
2. Implement the compute() method returning PolicyOutput
3. Register in scenarios/registry.py

Example:
  class FlatGrowth(GrowthPolicy):
    def compute(self, growth_rate: float) -> PolicyOutput[float]:
      return PolicyOutput(value=0.05, diag={'growth_method': 'flat'})
"""

from capittal_valuation.policies.growth import BandedGrowth
from capittal_valuation.policies.growth import GrowthPolicy
from capittal_valuation.policies.growth import NoGrowthAdjustment
from capittal_valuation.policies.sector import resolve_sector_multiple
from capittal_valuation.policies.sector import SectorResolver
from capittal_valuation.policies.size import NoSizePremium
from capittal_valuation.policies.size import SizePolicy
from capittal_valuation.policies.size import SizePremium

__all__ = [
    'BandedGrowth',
    'GrowthPolicy',
    'NoGrowthAdjustment',
    'NoSizePremium',
    'resolve_sector_multiple',
    'SectorResolver',
    'SizePolicy',
    'SizePremium',
]
