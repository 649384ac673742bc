import math

import pandas as pd
import pytest

from capittal_valuation.domain.types import CompanyFinancials
from capittal_valuation.domain.types import EmployeeRange
from capittal_valuation.domain.types import ValuationMethod
from capittal_valuation.errors import InvalidInputError
from capittal_valuation.errors import UnrecognizedSectorWarning
from capittal_valuation.run import compute_valuation
from capittal_valuation.run import validate_financials
from capittal_valuation.scenarios.config import EngineConfig
from capittal_valuation.scenarios.config import ScenarioConfig
from capittal_valuation.tables import SectorTable
from capittal_valuation.tables import SECTOR_EBITDA_MULTIPLES


class TestComputeValuation:
  """Tests for compute_valuation."""

  def test_technology_example(self, technology_financials):
    """EBITDA 200k x technology base multiple 6."""
    result = compute_valuation(technology_financials)

    assert result.method == ValuationMethod.EBITDA
    assert result.ebitda_multiple_used == pytest.approx(6.0)
    assert result.point_valuation == 1_200_000.0
    assert result.range.min == 800_000.0
    assert result.range.max == 1_600_000.0
    assert result.sector == 'technology'
    assert result.sector_recognized
    assert result.warnings == ()

  def test_revenue_fallback(self, loss_making_retail):
    """Negative EBITDA switches to the retail revenue multiple (0.8)."""
    result = compute_valuation(loss_making_retail)

    assert result.method == ValuationMethod.REVENUE
    assert result.metric_value == 500_000.0
    assert result.ebitda_multiple_used == pytest.approx(0.8)
    assert result.point_valuation == 400_000.0
    assert result.range.min == 250_000.0
    assert result.range.max == 500_000.0
    assert result.diag['method'] == 'revenue'

  def test_zero_ebitda_uses_revenue(self):
    """EBITDA of exactly zero also falls back to revenue."""
    financials = CompanyFinancials(revenue=500_000.0,
                                   ebitda=0.0,
                                   sector='retail')

    result = compute_valuation(financials)

    assert result.method == ValuationMethod.REVENUE
    assert result.point_valuation == 400_000.0

  def test_unknown_sector_uses_default(self, unknown_sector_financials):
    """Unknown sector gets a warning and the default multiples."""
    result = compute_valuation(unknown_sector_financials)

    assert not result.sector_recognized
    assert result.sector == 'general'
    assert result.warnings == (UnrecognizedSectorWarning(
        'quantum-widgets', 'general'),)
    assert isinstance(result.warnings[0], UserWarning)
    assert result.point_valuation == 1_000_000.0
    assert result.diag['sector_match'] == 'default'

  def test_spanish_sector_label(self):
    """Accented Spanish labels resolve through aliases."""
    financials = CompanyFinancials(revenue=1_000_000.0,
                                   ebitda=200_000.0,
                                   sector=' Tecnología ')

    result = compute_valuation(financials)

    assert result.sector == 'technology'
    assert result.sector_recognized
    assert result.point_valuation == 1_200_000.0

  def test_growth_and_size_adjustments(self):
    """20% growth adds 10%, 101-250 employees take 20% of the headroom.

    Manual calculation:
    grown = 6.0 * 1.10 = 6.6
    sized = 6.6 + 0.2 * (8.0 - 6.6) = 6.88
    point = 200,000 * 6.88 = 1,376,000
    """
    financials = CompanyFinancials(
        revenue=1_000_000.0,
        ebitda=200_000.0,
        sector='technology',
        growth_rate=20.0,
        employee_range='101-250',
    )

    result = compute_valuation(financials)

    assert result.ebitda_multiple_used == pytest.approx(6.88)
    assert result.point_valuation == pytest.approx(1_376_000.0, abs=0.01)
    assert result.range.min == 800_000.0
    assert result.range.max == 1_600_000.0
    assert result.diag['growth_adjustment'] == 0.10
    assert result.diag['size_premium'] == 0.2

  def test_decline_lowers_multiple(self, technology_financials):
    """Negative growth applies the decline penalty."""
    financials = CompanyFinancials(revenue=1_000_000.0,
                                   ebitda=200_000.0,
                                   sector='technology',
                                   growth_rate=-5.0)

    result = compute_valuation(financials)

    assert result.ebitda_multiple_used == pytest.approx(5.4)
    assert result.point_valuation < compute_valuation(
        technology_financials).point_valuation

  def test_unadjusted_config(self):
    """Unadjusted config ignores growth and size."""
    financials = CompanyFinancials(
        revenue=60_000_000.0,
        ebitda=200_000.0,
        sector='technology',
        growth_rate=50.0,
        employee_range=EmployeeRange.ENTERPRISE,
    )

    result = compute_valuation(financials, config=EngineConfig.unadjusted())

    assert result.ebitda_multiple_used == pytest.approx(6.0)
    assert result.diag['engine_config'] == 'unadjusted'

  def test_default_scenarios_attached(self, technology_financials):
    """Result carries conservative, base and optimistic scenarios."""
    result = compute_valuation(technology_financials)

    assert [s.id for s in result.scenarios] == [
        'conservative', 'base', 'optimistic'
    ]
    assert result.scenarios[1].valuation == result.point_valuation

  def test_custom_scenarios_and_cost(self, technology_financials):
    """Scenarios and acquisition cost are passed through."""
    result = compute_valuation(
        technology_financials,
        scenarios=[ScenarioConfig.optimistic()],
        acquisition_cost=1_000_000.0,
    )

    assert len(result.scenarios) == 1
    assert result.scenarios[0].roi == pytest.approx(44.0)

  def test_custom_table(self, technology_financials):
    """A caller-provided table replaces the default one."""
    df = SectorTable.default().to_dataframe()
    df.loc[df['sector'] == 'technology', 'base_multiple'] = 7.0
    table = SectorTable.from_dataframe(df)

    result = compute_valuation(technology_financials, table=table)

    assert result.point_valuation == 1_400_000.0

  def test_idempotent(self, technology_financials, unknown_sector_financials):
    """Identical inputs produce identical results."""
    for financials in (technology_financials, unknown_sector_financials):
      first = compute_valuation(financials)
      second = compute_valuation(financials)
      assert first == second
      assert first.to_dict() == second.to_dict()

  def test_range_contains_point(self):
    """range.min <= point <= range.max across sectors and adjustments."""
    for sector in SECTOR_EBITDA_MULTIPLES:
      for growth in (-20.0, 0.0, 7.5, 20.0, 45.0):
        for employees in (None, '1-10', '101-250', '501+'):
          for revenue, ebitda in ((1_234_567.89, 345_678.91),
                                  (80_000_000.0, 9_999_999.99),
                                  (777_777.77, -1.0)):
            result = compute_valuation(
                CompanyFinancials(revenue=revenue,
                                  ebitda=ebitda,
                                  sector=sector,
                                  growth_rate=growth,
                                  employee_range=employees))
            band = SECTOR_EBITDA_MULTIPLES[sector]
            assert result.range.min <= result.point_valuation
            assert result.point_valuation <= result.range.max
            if result.method == ValuationMethod.EBITDA:
              assert band[1] <= result.ebitda_multiple_used <= band[2]

  def test_outputs_rounded_to_cents(self):
    """Displayed values have at most two decimals."""
    financials = CompanyFinancials(revenue=1_000_000.0,
                                   ebitda=123_456.789,
                                   sector='healthcare',
                                   growth_rate=17.0)

    result = compute_valuation(financials)

    for value in (result.point_valuation, result.range.min, result.range.max):
      assert value == round(value, 2)

  def test_rounding_preserves_scenario_ranking(self):
    """Ranking by rounded values matches ranking by unrounded values."""
    financials = CompanyFinancials(revenue=2_000_000.0,
                                   ebitda=333_333.333,
                                   sector='services',
                                   growth_rate=12.0)
    configs = [
        ScenarioConfig(id=f's{i}', name=f'S{i}', multiplier_adjustment=adj)
        for i, adj in enumerate((0.05, -0.1, 0.0001, -0.0001, 0.2))
    ]

    result = compute_valuation(financials, scenarios=configs)

    by_raw = sorted(result.scenarios, key=lambda s: s.unrounded_valuation)
    by_rounded = sorted(result.scenarios, key=lambda s: s.valuation)
    assert [s.id for s in by_raw] == [s.id for s in by_rounded]


class TestValidateFinancials:
  """Tests for input validation."""

  @pytest.mark.parametrize('revenue,ebitda', [
      (0.0, 0.0),
      (0.0, -10.0),
      (-1.0, 100.0),
      (math.nan, 100.0),
      (1_000.0, math.inf),
  ])
  def test_invalid_inputs(self, revenue, ebitda):
    """Unusable financials raise InvalidInputError."""
    financials = CompanyFinancials(revenue=revenue,
                                   ebitda=ebitda,
                                   sector='retail')

    with pytest.raises(InvalidInputError):
      validate_financials(financials)
    with pytest.raises(InvalidInputError):
      compute_valuation(financials)

  def test_non_finite_growth(self):
    """NaN growth rate is rejected."""
    financials = CompanyFinancials(revenue=1.0,
                                   ebitda=1.0,
                                   sector='retail',
                                   growth_rate=math.nan)

    with pytest.raises(InvalidInputError, match='growth_rate'):
      compute_valuation(financials)

  def test_zero_revenue_positive_ebitda(self):
    """Positive EBITDA alone is enough."""
    financials = CompanyFinancials(revenue=0.0,
                                   ebitda=100_000.0,
                                   sector='industrial')

    result = compute_valuation(financials)

    assert result.point_valuation == 500_000.0

  def test_is_value_error(self):
    """InvalidInputError can be handled as ValueError."""
    with pytest.raises(ValueError):
      compute_valuation(
          CompanyFinancials(revenue=0.0, ebitda=0.0, sector='retail'))

  def test_pandas_scalars(self):
    """Values read from a DataFrame (numpy scalars) are accepted."""
    df = pd.DataFrame({
        'revenue': [1_000_000],
        'ebitda': [200_000],
        'growth_rate': [0.0],
    })
    financials = CompanyFinancials(revenue=df['revenue'][0],
                                   ebitda=df['ebitda'][0],
                                   sector='technology',
                                   growth_rate=df['growth_rate'][0])

    result = compute_valuation(financials)

    assert result.point_valuation == 1_200_000.0
    assert result.range.max == 1_600_000.0

  @pytest.mark.parametrize('revenue', ['1000000', None, True])
  def test_non_numeric_revenue(self, revenue):
    """Strings, None and booleans are not numbers."""
    financials = CompanyFinancials(revenue=revenue,
                                   ebitda=100_000.0,
                                   sector='retail')

    with pytest.raises(InvalidInputError, match='revenue must be a number'):
      validate_financials(financials)
