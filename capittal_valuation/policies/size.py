"""
Size premium policies.

Larger companies trade closer to the top of their sector band. These
policies return the share of the remaining headroom (max - multiple)
granted for size, between 0 and 1.
"""

from abc import ABC
from abc import abstractmethod
from typing import Mapping, Optional, Sequence, Tuple

from capittal_valuation.domain.types import CompanyFinancials
from capittal_valuation.domain.types import EmployeeRange
from capittal_valuation.domain.types import PolicyOutput
from capittal_valuation.tables import EMPLOYEE_SIZE_PREMIUM
from capittal_valuation.tables import REVENUE_SIZE_BANDS


class SizePolicy(ABC):
  """
  Base class for size premium policies.

  Subclasses implement compute() to return a headroom fraction.
  """

  @abstractmethod
  def compute(self, financials: CompanyFinancials) -> PolicyOutput[float]:
    """
    Compute size premium.

    Args:
      financials: Company financial snapshot

    Returns:
      PolicyOutput with headroom fraction in [0, 1] and diagnostics
    """


class SizePremium(SizePolicy):
  """
  Premium from headcount bucket and revenue band.

  Both signals are evaluated and the larger premium applies.
  """

  def __init__(
      self,
      employee_premium: Optional[Mapping[EmployeeRange, float]] = None,
      revenue_bands: Sequence[Tuple[float, float]] = REVENUE_SIZE_BANDS,
  ):
    """
    Initialize size premium policy.

    Args:
      employee_premium: Headroom fraction per employee range
      revenue_bands: (minimum revenue, headroom fraction) pairs
    """
    self.employee_premium = dict(employee_premium or EMPLOYEE_SIZE_PREMIUM)
    self.revenue_bands = tuple(
        sorted(revenue_bands, key=lambda b: b[0], reverse=True))

  def compute(self, financials: CompanyFinancials) -> PolicyOutput[float]:
    """Return the larger of the employee and revenue premiums."""
    employee_part = 0.0
    if financials.employee_range is not None:
      employee_part = self.employee_premium.get(financials.employee_range, 0.0)

    revenue_part = 0.0
    for floor, premium in self.revenue_bands:
      if financials.revenue >= floor:
        revenue_part = premium
        break

    premium = min(1.0, max(0.0, employee_part, revenue_part))
    return PolicyOutput(
        value=premium,
        diag={
            'size_method': 'employee_revenue',
            'size_employee_premium': employee_part,
            'size_revenue_premium': revenue_part,
            'size_premium': premium,
        })


class NoSizePremium(SizePolicy):
  """Ignore company size."""

  def compute(self, financials: CompanyFinancials) -> PolicyOutput[float]:
    return PolicyOutput(value=0.0,
                        diag={
                            'size_method': 'none',
                            'size_premium': 0.0,
                        })
