'''
Single-company valuation entrypoint.

This module provides the main entry point for valuing a company. It:
1. Validates the financial snapshot
2. Resolves the sector multiple bands
3. Applies the growth and size policies from the engine configuration
4. Applies the multiple to EBITDA (or revenue for loss-making companies)
5. Returns a ValuationResult with scenarios and full diagnostics

Usage:
  from capittal_valuation.domain.types import CompanyFinancials
  from capittal_valuation.run import compute_valuation

  result = compute_valuation(CompanyFinancials(
      revenue=1_000_000, ebitda=200_000, sector='technology'))
  print(f'Valuation: {result.point_valuation:,.2f} EUR')
'''

import argparse
from dataclasses import replace
import logging
from math import isfinite
from numbers import Real
from typing import Any, Dict, Optional, Sequence

from capittal_valuation.domain.types import CompanyFinancials
from capittal_valuation.domain.types import TaxpayerType
from capittal_valuation.domain.types import TaxScenarioInput
from capittal_valuation.domain.types import ValuationMethod
from capittal_valuation.domain.types import ValuationRange
from capittal_valuation.domain.types import ValuationResult
from capittal_valuation.engine.multiples import adjust_multiple
from capittal_valuation.engine.multiples import apply_multiple
from capittal_valuation.engine.multiples import compute_range
from capittal_valuation.engine.multiples import round_currency
from capittal_valuation.errors import InvalidInputError
from capittal_valuation.errors import UnrecognizedSectorWarning
from capittal_valuation.policies.sector import SectorResolver
from capittal_valuation.scenarios.config import EngineConfig
from capittal_valuation.scenarios.config import ScenarioConfig
from capittal_valuation.scenarios.generator import generate_scenarios
from capittal_valuation.scenarios.registry import create_policies
from capittal_valuation.tables import SectorTable
from capittal_valuation.tax.overlay import apply_tax_overlay

logger = logging.getLogger(__name__)


def validate_financials(financials: CompanyFinancials) -> None:
  '''
  Check that a financial snapshot can be valued.

  Raises:
    InvalidInputError: If revenue, EBITDA or growth is non-finite, revenue
      is negative, or neither revenue nor EBITDA is positive
  '''
  for name in ('revenue', 'ebitda', 'growth_rate'):
    value = getattr(financials, name)
    if isinstance(value, bool) or not isinstance(value, Real):
      raise InvalidInputError(f'{name} must be a number, got {value!r}')
    if not isfinite(value):
      raise InvalidInputError(f'{name} must be a finite number, got {value!r}')

  if financials.revenue < 0:
    raise InvalidInputError(
        f'revenue must be >= 0, got {financials.revenue}')

  if financials.revenue <= 0 and financials.ebitda <= 0:
    raise InvalidInputError(
        'Cannot value a company with neither positive revenue nor positive '
        f'EBITDA (revenue={financials.revenue}, ebitda={financials.ebitda})')


def compute_valuation(
    financials: CompanyFinancials,
    config: Optional[EngineConfig] = None,
    table: Optional[SectorTable] = None,
    scenarios: Optional[Sequence[ScenarioConfig]] = None,
    acquisition_cost: float = 0.0,
) -> ValuationResult:
  '''
  Value a company with sector multiples.

  Args:
    financials: Company financial snapshot
    config: EngineConfig (default: EngineConfig.default())
    table: Sector table (default: shared table from tables.py)
    scenarios: Scenario configs (default: conservative/base/optimistic)
    acquisition_cost: Acquisition cost for scenario ROI and net return

  Returns:
    ValuationResult with point valuation, range, scenarios and diagnostics

  Raises:
    InvalidInputError: If the financials cannot be valued, or the scenario
      inputs are invalid
  '''
  validate_financials(financials)

  if config is None:
    config = EngineConfig.default()

  policies = create_policies(config)
  all_diag: Dict[str, Any] = {'engine_config': config.name}

  sector_result = SectorResolver(table).compute(financials.sector)
  all_diag.update(sector_result.diag)
  resolution = sector_result.value

  warnings = ()
  if not resolution.recognized:
    warnings = (UnrecognizedSectorWarning(resolution.sector_key,
                                          resolution.sector),)

  if financials.ebitda > 0:
    method = ValuationMethod.EBITDA
    metric = float(financials.ebitda)
    band = resolution.ebitda
  else:
    logger.debug('%s: EBITDA %.2f <= 0, using revenue multiples',
                 financials.company_name or resolution.sector,
                 financials.ebitda)
    method = ValuationMethod.REVENUE
    metric = float(financials.revenue)
    band = resolution.revenue
  all_diag['method'] = method.value
  all_diag['base_multiple'] = band.base_multiple

  growth_result = policies['growth'].compute(financials.growth_rate)
  all_diag.update(growth_result.diag)

  size_result = policies['size'].compute(financials)
  all_diag.update(size_result.diag)

  multiple = adjust_multiple(
      base_multiple=band.base_multiple,
      min_multiple=band.min_multiple,
      max_multiple=band.max_multiple,
      growth_adjustment=growth_result.value,
      size_premium=size_result.value,
  )

  point = apply_multiple(metric, multiple)
  low, high = compute_range(metric, band.min_multiple, band.max_multiple)

  base = ValuationResult(
      point_valuation=round_currency(point),
      range=ValuationRange(min=round_currency(low), max=round_currency(high)),
      ebitda_multiple_used=multiple,
      method=method,
      metric_value=metric,
      sector=resolution.sector,
      sector_recognized=resolution.recognized,
      warnings=warnings,
      diag=all_diag,
  )

  return replace(base,
                 scenarios=generate_scenarios(base, scenarios,
                                              acquisition_cost))


def main() -> None:
  '''CLI entrypoint.'''
  parser = argparse.ArgumentParser(description='Run multiple valuation')
  parser.add_argument('--revenue',
                      type=float,
                      required=True,
                      help='Annual revenue')
  parser.add_argument('--ebitda', type=float, required=True, help='EBITDA')
  parser.add_argument('--sector', type=str, required=True, help='Sector')
  parser.add_argument('--growth',
                      type=float,
                      default=0.0,
                      help='Annual growth rate (%%)')
  parser.add_argument('--employees',
                      type=str,
                      default=None,
                      help='Employee range (e.g. 51-100)')
  parser.add_argument(
      '--config',
      type=str,
      default='default',
      choices=['default', 'conservative', 'unadjusted'],
      help='Engine configuration preset',
  )
  parser.add_argument('--acquisition-cost',
                      type=float,
                      default=0.0,
                      help='Acquisition cost for scenario ROI')
  parser.add_argument(
      '--taxpayer',
      type=str,
      default=None,
      choices=[t.value for t in TaxpayerType],
      help='Run the tax overlay on the base valuation for this seller type',
  )
  parser.add_argument('--acquisition-value',
                      type=float,
                      default=0.0,
                      help='Cost basis for the tax overlay')
  parser.add_argument('--acquisition-date',
                      type=str,
                      default=None,
                      help='Acquisition date for the tax overlay (YYYY-MM-DD)')
  parser.add_argument('--sale-percentage',
                      type=float,
                      default=100.0,
                      help='Percentage of the company sold')
  args = parser.parse_args()

  config_map = {
      'default': EngineConfig.default,
      'conservative': EngineConfig.conservative,
      'unadjusted': EngineConfig.unadjusted,
  }
  config = config_map[args.config]()

  financials = CompanyFinancials(
      revenue=args.revenue,
      ebitda=args.ebitda,
      sector=args.sector,
      growth_rate=args.growth,
      employee_range=args.employees,
  )
  result = compute_valuation(financials,
                             config=config,
                             acquisition_cost=args.acquisition_cost)

  separator = '=' * 70
  logger.info('\n%s', separator)
  logger.info('Valuation - sector %s (%s)', result.sector, config.name)
  logger.info(separator)
  for warning in result.warnings:
    logger.info('  Warning: %s', warning)
  logger.info('  Method: %s', result.method.value)
  logger.info('  Multiple: %.2fx', result.ebitda_multiple_used)
  logger.info('  Valuation: %s EUR', f'{result.point_valuation:,.2f}')
  logger.info('  Range: %s - %s EUR', f'{result.range.min:,.2f}',
              f'{result.range.max:,.2f}')

  logger.info('\nScenarios:')
  for scenario in result.scenarios:
    roi = f'{scenario.roi:.2f}%' if scenario.roi is not None else 'n/a'
    logger.info('  %-14s %.2fx  %s EUR  ROI %s', scenario.name,
                scenario.multiple, f'{scenario.valuation:,.2f}', roi)

  if args.taxpayer:
    tax = apply_tax_overlay(
        result.point_valuation,
        TaxScenarioInput(
            taxpayer_type=TaxpayerType(args.taxpayer),
            acquisition_value=args.acquisition_value,
            acquisition_date=args.acquisition_date,
            sale_percentage=args.sale_percentage,
        ))
    logger.info('\nTax overlay (%s):', args.taxpayer)
    logger.info('  Capital gain: %s EUR', f'{tax.capital_gain:,.2f}')
    if tax.total_benefits:
      logger.info('  Exempt by allowances: %s EUR',
                  f'{tax.total_benefits:,.2f}')
    for line in tax.tax_breakdown:
      logger.info('  %-28s %14s  %5.1f%%  %12s', line.concept,
                  f'{line.amount:,.2f}', line.rate * 100, f'{line.tax:,.2f}')
    logger.info('  Total tax: %s EUR (%.2f%%)', f'{tax.total_tax:,.2f}',
                tax.effective_tax_rate * 100)
    logger.info('  Net after tax: %s EUR', f'{tax.net_after_tax:,.2f}')

  logger.info('%s\n', separator)


if __name__ == '__main__':
  logging.basicConfig(
      level=logging.INFO,
      format='%(message)s',
  )
  main()
