import pytest

from capittal_valuation.domain.types import PolicyOutput
from capittal_valuation.policies.sector import resolve_sector_multiple
from capittal_valuation.policies.sector import SectorResolver
from capittal_valuation.tables import SectorTable


class TestSectorResolver:
  """Tests for SectorResolver."""

  def test_exact_match(self):
    """Table key matches without normalization."""
    result = SectorResolver().compute('technology')

    assert isinstance(result, PolicyOutput)
    assert result.value.sector == 'technology'
    assert result.value.match == 'exact'
    assert result.value.recognized
    assert result.value.ebitda.base_multiple == 6.0
    assert result.value.ebitda.min_multiple == 4.0
    assert result.value.ebitda.max_multiple == 8.0
    assert result.diag['sector_match'] == 'exact'

  @pytest.mark.parametrize('key,expected', [
      ('  Technology ', 'technology'),
      ('HEALTHCARE', 'healthcare'),
      ('Real_Estate', 'real-estate'),
      ('food beverage', 'food-beverage'),
      ('Construcción', 'construction'),
      ('hostelería', 'hospitality'),
  ])
  def test_normalized_match(self, key, expected):
    """Case, spacing and accents are forgiven."""
    resolution = resolve_sector_multiple(key)

    assert resolution.sector == expected
    assert resolution.match == 'normalized'
    assert resolution.recognized

  def test_unknown_sector_falls_back(self):
    """Unknown key resolves to the default entry without raising."""
    resolution = resolve_sector_multiple('quantum-widgets')

    assert resolution.sector == 'general'
    assert resolution.match == 'default'
    assert not resolution.recognized
    assert resolution.sector_key == 'quantum-widgets'
    assert resolution.ebitda.base_multiple == 5.0

  def test_empty_key_falls_back(self):
    """Empty and None keys use the default entry."""
    assert resolve_sector_multiple('').sector == 'general'
    assert resolve_sector_multiple(None).sector == 'general'

  def test_revenue_band_included(self):
    """Resolution carries the revenue fallback band."""
    resolution = resolve_sector_multiple('retail')

    assert resolution.revenue.base_multiple == 0.8

  def test_custom_table_default(self):
    """Fallback uses the table's own default sector."""
    table = SectorTable.from_dataframe(
        SectorTable.default().to_dataframe(), default_sector='services')

    resolution = resolve_sector_multiple('unknown', table=table)

    assert resolution.sector == 'services'

  def test_deterministic(self):
    """Same key, same resolution."""
    assert resolve_sector_multiple('Salud') == resolve_sector_multiple('Salud')
