import pytest

from capittal_valuation.domain.types import CompanyFinancials
from capittal_valuation.domain.types import TaxpayerType
from capittal_valuation.domain.types import TaxScenarioInput


@pytest.fixture
def technology_financials() -> CompanyFinancials:
  """Profitable tech company with no growth or size adjustment."""
  return CompanyFinancials(
      revenue=1_000_000.0,
      ebitda=200_000.0,
      sector='technology',
      growth_rate=0.0,
      company_name='Tech SL',
  )


@pytest.fixture
def loss_making_retail() -> CompanyFinancials:
  """Retailer with negative EBITDA, valued on revenue."""
  return CompanyFinancials(
      revenue=500_000.0,
      ebitda=-50_000.0,
      sector='retail',
      growth_rate=0.0,
      company_name='Retail SA',
  )


@pytest.fixture
def unknown_sector_financials() -> CompanyFinancials:
  """Company whose sector is not in the multiples table."""
  return CompanyFinancials(
      revenue=1_000_000.0,
      ebitda=200_000.0,
      sector='quantum-widgets',
  )


@pytest.fixture
def individual_seller() -> TaxScenarioInput:
  """Individual selling 100% with a 400k cost basis, no allowances."""
  return TaxScenarioInput(
      taxpayer_type=TaxpayerType.INDIVIDUAL,
      acquisition_value=400_000.0,
      acquisition_date='2015-03-01',
      sale_date='2025-06-30',
  )


@pytest.fixture
def company_seller() -> TaxScenarioInput:
  """Holding company selling 100% with a 400k cost basis."""
  return TaxScenarioInput(
      taxpayer_type=TaxpayerType.COMPANY,
      acquisition_value=400_000.0,
      acquisition_date='2015-03-01',
      sale_date='2025-06-30',
      current_tax_base=100_000.0,
  )
