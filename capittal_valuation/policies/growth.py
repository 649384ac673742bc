'''
Growth adjustment policies.

These policies turn the company's growth rate into a relative adjustment
of the sector base multiple (0.10 means +10% on the base multiple).
'''

from abc import ABC, abstractmethod
from typing import Sequence, Tuple

from capittal_valuation.domain.types import PolicyOutput
from capittal_valuation.tables import DECLINE_ADJUSTMENT
from capittal_valuation.tables import GROWTH_BANDS


class GrowthPolicy(ABC):
  '''
  Base class for growth adjustment policies.

  Subclasses implement compute() to return a relative multiple adjustment.
  '''

  @abstractmethod
  def compute(self, growth_rate: float) -> PolicyOutput[float]:
    '''
    Compute the multiple adjustment for a growth rate.

    Args:
      growth_rate: Annual growth in percentage points

    Returns:
      PolicyOutput with relative adjustment and diagnostics
    '''


class BandedGrowth(GrowthPolicy):
  '''
  Discrete growth bands.

  The highest band whose threshold the growth rate exceeds applies;
  bands do not accumulate. Negative growth applies a penalty.
  '''

  def __init__(
      self,
      bands: Sequence[Tuple[float, float]] = GROWTH_BANDS,
      decline_adjustment: float = DECLINE_ADJUSTMENT,
  ):
    '''
    Initialize banded growth policy.

    Args:
      bands: (threshold in percentage points, adjustment) pairs
      decline_adjustment: Adjustment applied when growth is negative
    '''
    self.bands = tuple(sorted(bands, key=lambda b: b[0], reverse=True))
    self.decline_adjustment = decline_adjustment

  def compute(self, growth_rate: float) -> PolicyOutput[float]:
    '''Return the adjustment of the first band the growth rate exceeds.'''
    for threshold, adjustment in self.bands:
      if growth_rate > threshold:
        return PolicyOutput(value=adjustment,
                            diag={
                                'growth_method': 'bands',
                                'growth_band': threshold,
                                'growth_adjustment': adjustment,
                            })

    adjustment = self.decline_adjustment if growth_rate < 0 else 0.0
    return PolicyOutput(value=adjustment,
                        diag={
                            'growth_method': 'bands',
                            'growth_band': 'decline' if growth_rate < 0 else None,
                            'growth_adjustment': adjustment,
                        })


class NoGrowthAdjustment(GrowthPolicy):
  '''Ignore growth entirely.'''

  def compute(self, growth_rate: float) -> PolicyOutput[float]:
    return PolicyOutput(value=0.0,
                        diag={
                            'growth_method': 'none',
                            'growth_adjustment': 0.0,
                        })
