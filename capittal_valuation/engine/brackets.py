"""
Progressive tax bracket walk.

Brackets are (upper bound, rate) pairs in ascending order; the last upper
bound is normally infinity. An offset places the amount on top of income
already taxed in the same scale (a company's existing taxable base).
"""

from collections.abc import Sequence


def walk_brackets(
    amount: float,
    brackets: Sequence[tuple[float, float]],
    offset: float = 0.0,
) -> list[tuple[float, float, float, float]]:
  """
  Split an amount across progressive brackets.

  Args:
    amount: Taxable amount (<= 0 yields no slices)
    brackets: (upper bound, rate) pairs, ascending
    offset: Base already occupying the lower brackets

  Returns:
    List of (lower, upper, taxed_amount, rate) for every bracket the
    amount touches. The taxed amounts sum to the amount as long as the
    last bracket is unbounded.
  """
  if amount <= 0:
    return []

  start = max(0.0, offset)
  end = start + amount
  slices = []
  lower = 0.0

  for upper, rate in brackets:
    lo = max(lower, start)
    hi = min(upper, end)
    if hi > lo:
      slices.append((lower, upper, hi - lo, rate))
    lower = upper
    if lower >= end:
      break

  return slices

def bracket_tax_cents(amount: float, rate: float) -> int:
  """Tax on one bracket slice, in whole cents."""
  return round(amount * rate * 100)
