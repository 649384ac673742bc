import pytest

from capittal_valuation.policies.growth import BandedGrowth
from capittal_valuation.policies.growth import NoGrowthAdjustment


class TestBandedGrowth:
  """Tests for BandedGrowth policy."""

  @pytest.mark.parametrize('growth,expected', [
      (45.0, 0.15),
      (30.5, 0.15),
      (30.0, 0.10),
      (20.0, 0.10),
      (15.0, 0.05),
      (5.5, 0.05),
      (5.0, 0.0),
      (0.0, 0.0),
      (-0.5, -0.10),
      (-40.0, -0.10),
  ])
  def test_default_bands(self, growth, expected):
    """Highest band exceeded applies; bands do not stack."""
    result = BandedGrowth().compute(growth)

    assert result.value == expected
    assert result.diag['growth_method'] == 'bands'
    assert result.diag['growth_adjustment'] == expected

  def test_custom_bands_unsorted(self):
    """Bands are evaluated from the highest threshold down."""
    policy = BandedGrowth(bands=[(10.0, 0.02), (50.0, 0.3)],
                          decline_adjustment=-0.2)

    assert policy.compute(60.0).value == 0.3
    assert policy.compute(20.0).value == 0.02
    assert policy.compute(-1.0).value == -0.2

  def test_band_recorded(self):
    """Diagnostics name the band that applied."""
    assert BandedGrowth().compute(20.0).diag['growth_band'] == 15.0
    assert BandedGrowth().compute(-3.0).diag['growth_band'] == 'decline'


class TestNoGrowthAdjustment:
  """Tests for NoGrowthAdjustment policy."""

  def test_always_zero(self):
    """Growth is ignored."""
    policy = NoGrowthAdjustment()

    assert policy.compute(80.0).value == 0.0
    assert policy.compute(-80.0).value == 0.0
    assert policy.compute(10.0).diag['growth_method'] == 'none'
