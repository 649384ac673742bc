'''
Batch valuation for a list of companies (e.g. a lead export).

This module provides tools to:
1. Value every company of a CSV/DataFrame in one pass
2. Compare valuations across companies and sectors
3. Export results to CSV for further analysis

Usage (CLI):
  python -m capittal_valuation.analysis.batch_valuation \
    --input leads.csv \
    --output results/leads_valuation.csv \
    --config conservative \
    -v

Usage (Python API):
  from capittal_valuation.analysis.batch_valuation import batch_valuation

  df = batch_valuation(pd.read_csv('leads.csv'))
  df.to_csv('results.csv', index=False)

Input columns: revenue, ebitda, sector, and optionally company_name,
growth_rate, employee_range.
'''

import argparse
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from capittal_valuation.domain.types import CompanyFinancials
from capittal_valuation.run import compute_valuation
from capittal_valuation.scenarios.config import EngineConfig
from capittal_valuation.tables import SectorTable

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('revenue', 'ebitda', 'sector')


def _optional(row: pd.Series, column: str):
  '''Value of an optional column, or None when absent or missing.'''
  if column not in row.index or pd.isna(row[column]):
    return None
  return row[column]


def _row_to_financials(row: pd.Series) -> CompanyFinancials:
  '''Build CompanyFinancials from a DataFrame row.'''
  growth = _optional(row, 'growth_rate')
  name = _optional(row, 'company_name')
  return CompanyFinancials(
      revenue=float(row['revenue']),
      ebitda=float(row['ebitda']),
      sector=str(row['sector']) if not pd.isna(row['sector']) else '',
      growth_rate=float(growth) if growth is not None else 0.0,
      employee_range=_optional(row, 'employee_range'),
      company_name=str(name) if name is not None else None,
  )


def batch_valuation(
    companies: pd.DataFrame,
    config: Optional[EngineConfig] = None,
    table: Optional[SectorTable] = None,
    verbose: bool = False,
) -> pd.DataFrame:
  '''
  Run valuation for every row of a DataFrame.

  Args:
    companies: One company per row (see module docstring for columns)
    config: EngineConfig with policy settings
    table: Sector table (default: shared table)
    verbose: Log progress per company

  Returns:
    DataFrame with one row per input row (same order):
    - company_name: Company name, if provided
    - point_valuation, range_min, range_max, ebitda_multiple_used
    - method, metric_value, sector, sector_recognized
    - scenario_<id>: Valuation per scenario
    - error: Error message for rows that could not be valued
    - ... all policy diagnostics ...

  Raises:
    ValueError: If required columns are missing or no row was valued
  '''
  missing = [c for c in REQUIRED_COLUMNS if c not in companies.columns]
  if missing:
    raise ValueError(f'Input is missing columns: {missing}')

  if config is None:
    config = EngineConfig.default()

  rows = []
  failed = 0
  total = len(companies)

  for i, (_, row) in enumerate(companies.iterrows(), 1):
    name = _optional(row, 'company_name') or f'row {i}'
    if verbose:
      logger.info('[%d/%d] Valuing %s...', i, total, name)

    try:
      financials = _row_to_financials(row)
      result = compute_valuation(financials, config=config, table=table)
    except (ValueError, TypeError) as e:
      failed += 1
      logger.warning('%s: %s', name, e)
      rows.append({'company_name': name, 'error': str(e)})
      continue

    record = {'company_name': name, 'error': None}
    record.update(result.to_dict())
    rows.append(record)

  if total and failed == total:
    raise ValueError('No companies could be valued')

  logger.info('Valued %d/%d companies', total - failed, total)
  return pd.DataFrame(rows)


def summarize_by_sector(results: pd.DataFrame) -> pd.DataFrame:
  '''
  Aggregate batch results per resolved sector.

  Args:
    results: Output of batch_valuation

  Returns:
    DataFrame indexed by sector with company count, median and total
    point valuation, and mean multiple
  '''
  valued = results[results['error'].isna()]
  if valued.empty:
    return pd.DataFrame(
        columns=['companies', 'median_valuation', 'total_valuation',
                 'mean_multiple'])

  summary = valued.groupby('sector').agg(
      companies=('point_valuation', 'size'),
      median_valuation=('point_valuation', 'median'),
      total_valuation=('point_valuation', 'sum'),
      mean_multiple=('ebitda_multiple_used', 'mean'),
  )
  return summary.sort_values('total_valuation', ascending=False)


def main() -> None:
  '''CLI entrypoint.'''
  parser = argparse.ArgumentParser(description='Batch multiple valuation')
  parser.add_argument('--input',
                      type=Path,
                      required=True,
                      help='CSV with one company per row')
  parser.add_argument('--output',
                      type=Path,
                      required=True,
                      help='Output CSV path')
  parser.add_argument(
      '--config',
      type=str,
      default='default',
      choices=['default', 'conservative', 'unadjusted'],
      help='Engine configuration preset',
  )
  parser.add_argument('--sector-table',
                      type=Path,
                      default=None,
                      help='CSV with alternative sector multiples')
  parser.add_argument('-v',
                      '--verbose',
                      action='store_true',
                      help='Verbose logging')
  args = parser.parse_args()

  logging.basicConfig(
      level=logging.DEBUG if args.verbose else logging.INFO,
      format='%(asctime)s [%(levelname)s] %(message)s',
      datefmt='%Y-%m-%d %H:%M:%S',
  )

  if not args.input.exists():
    raise FileNotFoundError(f'Input not found: {args.input}')

  config_map = {
      'default': EngineConfig.default,
      'conservative': EngineConfig.conservative,
      'unadjusted': EngineConfig.unadjusted,
  }
  config = config_map[args.config]()
  table = SectorTable.from_csv(args.sector_table) if args.sector_table else None

  companies = pd.read_csv(args.input)
  logger.info('Loaded %d companies from %s', len(companies), args.input)

  results = batch_valuation(companies,
                            config=config,
                            table=table,
                            verbose=args.verbose)

  args.output.parent.mkdir(parents=True, exist_ok=True)
  results.to_csv(args.output, index=False)
  logger.info('Saved results to %s', args.output)

  summary = summarize_by_sector(results)
  if not summary.empty:
    logger.info('\nBy sector:\n%s', summary.to_string())


if __name__ == '__main__':
  main()
