"""
Pure multiple-valuation math.

No pandas, no I/O, just numeric computations on already-resolved inputs.
Nothing here rounds; rounding happens once, when results are built.

Key functions:
  adjust_multiple: Apply growth and size adjustments within a sector band
  apply_multiple: Metric x multiple
  compute_range: Valuation at the band's min and max multiples
"""

from math import isfinite


def adjust_multiple(
    base_multiple: float,
    min_multiple: float,
    max_multiple: float,
    growth_adjustment: float,
    size_premium: float,
) -> float:
  """
  Adjust a sector base multiple for growth and size.

  Growth scales the base multiple relatively and is clamped to the band.
  Size then moves the multiple towards max_multiple by a fraction of the
  remaining headroom.

  Args:
    base_multiple: Sector base multiple
    min_multiple: Sector band minimum
    max_multiple: Sector band maximum
    growth_adjustment: Relative change (0.10 means +10%)
    size_premium: Share of headroom to max_multiple, in [0, 1]

  Returns:
    Adjusted multiple, always within [min_multiple, max_multiple]
  """
  grown = base_multiple * (1.0 + growth_adjustment)
  grown = max(min_multiple, min(max_multiple, grown))
  sized = grown + size_premium * (max_multiple - grown)
  return max(min_multiple, min(max_multiple, sized))

def apply_multiple(metric: float, multiple: float) -> float:
  """Return metric x multiple, or nan if either is non-finite."""
  if not isfinite(metric) or not isfinite(multiple):
    return float('nan')
  return metric * multiple

def compute_range(
    metric: float,
    min_multiple: float,
    max_multiple: float,
) -> tuple[float, float]:
  """
  Compute the valuation range for a positive metric.

  Returns:
    Tuple of (low, high) valuations
  """
  return apply_multiple(metric, min_multiple), apply_multiple(
      metric, max_multiple)

def round_currency(value: float) -> float:
  """Round a currency amount to cents."""
  return round(value, 2)
