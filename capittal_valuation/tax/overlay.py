'''
Simplified Spanish capital-gains overlay for a company sale.

Takes the sale valuation chosen from a ValuationResult and the seller's
situation, and estimates the tax due and the net proceeds:

1. sale_price = sale_valuation x sale_percentage / 100
2. capital_gain = sale_price - acquisition_value - deductible_expenses
3. Allowances, each capped and applied to the gain still taxable:
   - abatement coefficients (individuals, stakes acquired before 1995)
   - Art. 21 LIS exemption (companies with a significant holding >= 1 year)
   - renta vitalicia (individuals over 65, up to 240.000 EUR reinvested)
   - reinvestment (individuals; companies only when Art. 42 LIS applies)
4. Bracket walk: IRPF savings scale for individuals, Impuesto de
   Sociedades (with the SME reduced rate) for companies

Every allowance and bracket is itemized in tax_breakdown; each bracket tax
is a whole number of cents and total_tax is the sum of the breakdown lines.
'''

from datetime import date
import logging
from math import isfinite
from numbers import Real
from typing import List, Optional, Tuple

import pandas as pd

from capittal_valuation.domain.types import DateLike
from capittal_valuation.domain.types import TaxBreakdownItem
from capittal_valuation.domain.types import TaxCalculationResult
from capittal_valuation.domain.types import TaxpayerType
from capittal_valuation.domain.types import TaxScenarioInput
from capittal_valuation.engine.brackets import bracket_tax_cents
from capittal_valuation.engine.brackets import walk_brackets
from capittal_valuation.engine.multiples import round_currency
from capittal_valuation.errors import InvalidTaxInputError
from capittal_valuation import tables

logger = logging.getLogger(__name__)


# Accepted string layouts: ISO first, then Spanish day-first dates.
DATE_FORMATS = ('ISO8601', '%d/%m/%Y', '%d-%m-%Y')


def _parse_date(value: Optional[DateLike], field_name: str) -> pd.Timestamp:
  '''
  Parse a date-like value, raising InvalidTaxInputError on failure.

  Strings are read as ISO dates ('2015-03-01') or day-first dates
  ('01/03/2015', '01-03-2015'), never month-first.
  '''
  ts = None
  if isinstance(value, str):
    for fmt in DATE_FORMATS:
      try:
        ts = pd.to_datetime(value.strip(), format=fmt)
        break
      except ValueError:
        continue
  elif value is not None:
    try:
      ts = pd.Timestamp(value)
    except (ValueError, TypeError) as e:
      raise InvalidTaxInputError(
          f'{field_name} is not a valid date: {value!r}') from e
  if ts is None or pd.isna(ts):
    raise InvalidTaxInputError(f'{field_name} is not a valid date: {value!r}')
  return ts.normalize()


def _whole_years(start: pd.Timestamp, end: pd.Timestamp) -> int:
  '''Complete years elapsed from start to end.'''
  years = end.year - start.year
  if (end.month, end.day) < (start.month, start.day):
    years -= 1
  return years


def _check_number(value: float, field_name: str) -> float:
  if isinstance(value, bool) or not isinstance(value, Real):
    raise InvalidTaxInputError(f'{field_name} must be a number, got {value!r}')
  if not isfinite(value):
    raise InvalidTaxInputError(f'{field_name} must be finite, got {value}')
  return float(value)


def _check_amount(value: float, field_name: str) -> float:
  value = _check_number(value, field_name)
  if value < 0:
    raise InvalidTaxInputError(f'{field_name} must be >= 0, got {value}')
  return value


def _abatement_coefficient(acquired: pd.Timestamp) -> float:
  '''
  Reduction coefficient for stakes acquired before 1995.

  Years held up to the 1996 cutoff are rounded up; the first two are not
  reduced.
  '''
  if acquired.year >= tables.ABATEMENT_ACQUIRED_BEFORE_YEAR:
    return 0.0
  cutoff = tables.ABATEMENT_CUTOFF_DATE
  years = _whole_years(acquired, cutoff)
  if acquired + pd.DateOffset(years=years) < cutoff:
    years += 1
  reducible = max(0, years - tables.ABATEMENT_GRACE_YEARS)
  return min(1.0, reducible * tables.ABATEMENT_RATE_PER_YEAR)


def _allowances(
    gain: float,
    sale_price: float,
    taxpayer: TaxpayerType,
    tax_input: TaxScenarioInput,
    acquired: pd.Timestamp,
    holding_years: int,
) -> Tuple[float, List[Tuple[str, float]]]:
  '''
  Apply allowances in order to the taxable gain.

  Returns:
    Tuple of (remaining gain, [(concept, benefit), ...])
  '''
  applied: List[Tuple[str, float]] = []

  def take(concept: str, share: float) -> None:
    nonlocal gain
    benefit = gain * max(0.0, min(1.0, share))
    if benefit > 0:
      applied.append((concept, benefit))
      gain -= benefit

  individual = taxpayer is TaxpayerType.INDIVIDUAL

  if individual and gain > 0:
    coefficient = _abatement_coefficient(acquired)
    if coefficient > 0:
      # Only the part of the transfer value under the limit is reduced.
      within_limit = min(1.0, tables.ABATEMENT_TRANSFER_LIMIT / sale_price)
      take('abatement', coefficient * within_limit)

  if (not individual and tax_input.significant_holding and
      holding_years >= tables.ARTICLE_21_MIN_YEARS):
    take('article_21', tables.ARTICLE_21_EXEMPT_SHARE)

  if individual and tax_input.vitalicia_plan and sale_price > 0:
    invested = min(tax_input.vitalicia_amount, tables.VITALICIA_CAP,
                   sale_price)
    take('vitalicia', invested / sale_price)

  reinvestment_allowed = individual or tax_input.reinvestment_qualifies
  if tax_input.reinvestment_plan and reinvestment_allowed and sale_price > 0:
    invested = min(tax_input.reinvestment_amount, sale_price)
    take('reinvestment', invested / sale_price)

  return gain, applied


def _bracket_lines(
    taxable_gain: float,
    taxpayer: TaxpayerType,
    current_tax_base: float,
) -> List[TaxBreakdownItem]:
  if taxpayer is TaxpayerType.INDIVIDUAL:
    scale, brackets, offset = 'irpf_savings', tables.IRPF_SAVINGS_BRACKETS, 0.0
  else:
    offset = current_tax_base
    if current_tax_base < tables.SME_TAX_BASE_LIMIT:
      scale, brackets = 'corporate_sme', tables.COMPANY_SME_BRACKETS
    else:
      scale, brackets = 'corporate', tables.COMPANY_GENERAL_BRACKETS

  lines = []
  for lower, upper, amount, rate in walk_brackets(taxable_gain, brackets,
                                                  offset):
    upper_label = '+' if upper == float('inf') else f'{upper:.0f}'
    lines.append(
        TaxBreakdownItem(
            concept=f'{scale} {lower:.0f}-{upper_label}',
            amount=round_currency(amount),
            rate=rate,
            tax=bracket_tax_cents(amount, rate) / 100,
        ))
  return lines


def apply_tax_overlay(
    sale_valuation: float,
    tax_input: TaxScenarioInput,
) -> TaxCalculationResult:
  '''
  Estimate capital-gains tax and net proceeds of a sale.

  Args:
    sale_valuation: Value of 100% of the company (e.g. a scenario valuation)
    tax_input: Seller situation

  Returns:
    TaxCalculationResult with itemized allowances and brackets

  Raises:
    InvalidTaxInputError: If sale_percentage is outside [0, 100], a date
      cannot be parsed, the sale precedes the acquisition, the taxpayer
      type is unknown, or an amount or percentage is not a finite number (amounts must
      also be >= 0)
  '''
  try:
    taxpayer = TaxpayerType(tax_input.taxpayer_type)
  except ValueError as e:
    raise InvalidTaxInputError(
        f'Unknown taxpayer type: {tax_input.taxpayer_type!r}. '
        f'Available: {[t.value for t in TaxpayerType]}') from e

  sale_valuation = _check_amount(sale_valuation, 'sale_valuation')
  percentage = _check_number(tax_input.sale_percentage, 'sale_percentage')
  if not 0.0 <= percentage <= 100.0:
    raise InvalidTaxInputError(
        f'sale_percentage must be within [0, 100], got {percentage}')
  acquisition_value = _check_amount(tax_input.acquisition_value,
                                    'acquisition_value')
  expenses = _check_amount(tax_input.deductible_expenses,
                           'deductible_expenses')
  current_tax_base = _check_amount(tax_input.current_tax_base,
                                   'current_tax_base')
  _check_amount(tax_input.vitalicia_amount, 'vitalicia_amount')
  _check_amount(tax_input.reinvestment_amount, 'reinvestment_amount')

  acquired = _parse_date(tax_input.acquisition_date, 'acquisition_date')
  if tax_input.sale_date is None:
    sold = pd.Timestamp.today().normalize()
  else:
    sold = _parse_date(tax_input.sale_date, 'sale_date')
  if sold < acquired:
    raise InvalidTaxInputError(
        f'sale_date {sold.date()} precedes acquisition_date {acquired.date()}')
  holding_years = _whole_years(acquired, sold)

  sale_price = sale_valuation * percentage / 100.0
  capital_gain = sale_price - acquisition_value - expenses

  breakdown: List[TaxBreakdownItem] = []
  if expenses > 0:
    breakdown.append(
        TaxBreakdownItem(concept='deductible_expenses',
                         amount=-round_currency(expenses)))

  taxable_gain, applied = _allowances(max(0.0, capital_gain), sale_price,
                                      taxpayer, tax_input, acquired,
                                      holding_years)
  benefits = dict(applied)
  for concept, benefit in applied:
    breakdown.append(
        TaxBreakdownItem(concept=concept, amount=-round_currency(benefit)))

  brackets = _bracket_lines(taxable_gain, taxpayer, current_tax_base)
  breakdown.extend(brackets)
  # Allowance lines carry no tax, so this is also the sum over brackets.
  total_tax = sum((line.tax for line in breakdown), 0.0)

  effective_rate = total_tax / capital_gain if capital_gain > 0 else 0.0

  logger.debug('Tax overlay (%s): gain=%.2f taxable=%.2f tax=%.2f',
               taxpayer.value, capital_gain, taxable_gain, total_tax)

  return TaxCalculationResult(
      sale_price=round_currency(sale_price),
      acquisition_value=round_currency(acquisition_value),
      deductible_expenses=round_currency(expenses),
      capital_gain=round_currency(capital_gain),
      abatement_benefit=round_currency(benefits.get('abatement', 0.0)),
      article21_benefit=round_currency(benefits.get('article_21', 0.0)),
      vitalicia_benefit=round_currency(benefits.get('vitalicia', 0.0)),
      reinvestment_benefit=round_currency(benefits.get('reinvestment', 0.0)),
      taxable_gain=round_currency(taxable_gain),
      tax_breakdown=tuple(breakdown),
      total_tax=total_tax,
      effective_tax_rate=effective_rate,
      net_after_tax=round_currency(sale_price - total_tax),
      holding_years=holding_years,
  )
