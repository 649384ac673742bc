import math

import pytest

from capittal_valuation.engine.multiples import adjust_multiple
from capittal_valuation.engine.multiples import apply_multiple
from capittal_valuation.engine.multiples import compute_range
from capittal_valuation.engine.multiples import round_currency


class TestAdjustMultiple:
  """Tests for adjust_multiple function."""

  def test_no_adjustment(self):
    """Zero growth and size keep the base multiple."""
    assert adjust_multiple(6.0, 4.0, 8.0, 0.0, 0.0) == 6.0

  def test_growth_then_size(self):
    """Growth scales the base, size takes a share of the headroom.

    Manual calculation:
    grown = 6.0 * 1.10 = 6.6
    sized = 6.6 + 0.5 * (8.0 - 6.6) = 7.3
    """
    assert adjust_multiple(6.0, 4.0, 8.0, 0.10, 0.5) == pytest.approx(7.3)

  def test_growth_clamped_to_max(self):
    """Large growth bonus cannot exceed the band."""
    assert adjust_multiple(6.0, 4.0, 8.0, 0.5, 0.0) == 8.0

  def test_decline_clamped_to_min(self):
    """Large penalty cannot go below the band."""
    assert adjust_multiple(6.0, 4.0, 8.0, -0.5, 0.0) == 4.0

  def test_full_size_premium_reaches_max(self):
    """A premium of 1 moves the multiple to the band maximum."""
    assert adjust_multiple(6.0, 4.0, 8.0, 0.0, 1.0) == 8.0

  def test_always_within_band(self):
    """Any adjustment combination stays within [min, max]."""
    for growth in (-0.9, -0.1, 0.0, 0.05, 0.15, 2.0):
      for size in (0.0, 0.1, 0.4, 1.0):
        multiple = adjust_multiple(4.5, 3.0, 6.0, growth, size)
        assert 3.0 <= multiple <= 6.0


class TestApplyMultiple:
  """Tests for apply_multiple and compute_range."""

  def test_apply(self):
    """Metric times multiple."""
    assert apply_multiple(200_000.0, 6.0) == 1_200_000.0

  def test_non_finite(self):
    """Non-finite inputs return nan."""
    assert math.isnan(apply_multiple(float('inf'), 6.0))
    assert math.isnan(apply_multiple(100.0, float('nan')))

  def test_range(self):
    """Range uses the band's min and max multiples."""
    low, high = compute_range(200_000.0, 4.0, 8.0)

    assert low == 800_000.0
    assert high == 1_600_000.0


class TestRoundCurrency:
  """Tests for round_currency."""

  def test_two_decimals(self):
    """Rounded to cents."""
    assert round_currency(1234.5678) == 1234.57
    assert round_currency(1_200_000.0) == 1_200_000.0
