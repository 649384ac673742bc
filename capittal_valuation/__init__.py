'''
Sector-multiple valuation engine for company sales.

This package values a company from its revenue, EBITDA, sector, growth and
size, produces conservative/base/optimistic scenarios, and estimates the
Spanish capital-gains tax on a chosen sale price. Every operation is a pure
function over immutable inputs and read-only lookup tables.

Usage:
  from capittal_valuation.domain.types import CompanyFinancials
  from capittal_valuation.domain.types import TaxScenarioInput
  from capittal_valuation.run import compute_valuation
  from capittal_valuation.tax.overlay import apply_tax_overlay

  result = compute_valuation(CompanyFinancials(
      revenue=1_000_000, ebitda=200_000, sector='technology'))
  tax = apply_tax_overlay(result.point_valuation, TaxScenarioInput(
      taxpayer_type='individual', acquisition_value=400_000,
      acquisition_date='2015-01-01'))
'''
