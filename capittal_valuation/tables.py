'''
Static lookup tables for valuation and tax.

Sector multiples, adjustment bands and tax brackets are product
configuration. They are loaded once into read-only structures and never
mutated, so any number of callers can share them.

Alternative sector tables (e.g. an export of the multiples maintained in the
admin panel) can be loaded from CSV:

  table = SectorTable.from_csv(Path('multiples.csv'))
  result = compute_valuation(financials, table=table)
'''

from functools import lru_cache
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple
import unicodedata

import pandas as pd

from capittal_valuation.domain.types import EmployeeRange, SectorMultiple

logger = logging.getLogger(__name__)

DEFAULT_SECTOR = 'general'

# sector -> (base, min, max) EV/EBITDA multiples
SECTOR_EBITDA_MULTIPLES: Dict[str, Tuple[float, float, float]] = {
    'general': (5.0, 3.5, 6.5),
    'technology': (6.0, 4.0, 8.0),
    'healthcare': (7.0, 5.0, 9.0),
    'industrial': (5.0, 4.0, 6.5),
    'retail': (4.5, 3.0, 6.0),
    'services': (5.0, 3.5, 6.5),
    'construction': (4.0, 3.0, 5.5),
    'food-beverage': (5.5, 4.0, 7.0),
    'logistics': (5.0, 3.5, 6.5),
    'energy': (6.0, 4.5, 8.0),
    'education': (6.5, 4.5, 8.5),
    'hospitality': (5.0, 3.5, 6.5),
    'financial-services': (6.5, 4.5, 8.5),
    'real-estate': (8.0, 6.0, 10.0),
}

# sector -> (base, min, max) EV/revenue multiples, used when EBITDA <= 0
SECTOR_REVENUE_MULTIPLES: Dict[str, Tuple[float, float, float]] = {
    'general': (0.8, 0.5, 1.1),
    'technology': (1.5, 1.0, 2.0),
    'healthcare': (1.2, 0.8, 1.6),
    'industrial': (0.7, 0.5, 0.9),
    'retail': (0.8, 0.5, 1.0),
    'services': (0.9, 0.6, 1.2),
    'construction': (0.5, 0.3, 0.7),
    'food-beverage': (0.7, 0.5, 0.9),
    'logistics': (0.6, 0.4, 0.8),
    'energy': (1.0, 0.7, 1.3),
    'education': (1.1, 0.8, 1.4),
    'hospitality': (0.9, 0.6, 1.2),
    'financial-services': (1.3, 0.9, 1.8),
    'real-estate': (1.5, 1.0, 2.0),
}

# Labels used by the Spanish-language forms, already normalized.
SECTOR_ALIASES: Dict[str, str] = {
    'tecnologia': 'technology',
    'software': 'technology',
    'saas': 'technology',
    'salud': 'healthcare',
    'sanidad': 'healthcare',
    'industria': 'industrial',
    'industrial-manufacturing': 'industrial',
    'comercio': 'retail',
    'distribucion': 'retail',
    'servicios': 'services',
    'servicios-profesionales': 'services',
    'construccion': 'construction',
    'alimentacion': 'food-beverage',
    'alimentacion-y-bebidas': 'food-beverage',
    'logistica': 'logistics',
    'transporte': 'logistics',
    'energia': 'energy',
    'educacion': 'education',
    'hosteleria': 'hospitality',
    'turismo': 'hospitality',
    'servicios-financieros': 'financial-services',
    'inmobiliario': 'real-estate',
    'otros': 'general',
}

# (growth above this many percentage points, relative multiple adjustment);
# checked top-down, the first band met applies.
GROWTH_BANDS: Tuple[Tuple[float, float], ...] = (
    (30.0, 0.15),
    (15.0, 0.10),
    (5.0, 0.05),
)
CONSERVATIVE_GROWTH_BANDS: Tuple[Tuple[float, float], ...] = (
    (30.0, 0.08),
    (15.0, 0.05),
)
DECLINE_ADJUSTMENT = -0.10

# Share of the remaining headroom (max - multiple) granted by size.
EMPLOYEE_SIZE_PREMIUM: Dict[EmployeeRange, float] = {
    EmployeeRange.MICRO: 0.0,
    EmployeeRange.SMALL: 0.0,
    EmployeeRange.MEDIUM: 0.1,
    EmployeeRange.MID_MARKET: 0.2,
    EmployeeRange.LARGE: 0.3,
    EmployeeRange.ENTERPRISE: 0.4,
}
REVENUE_SIZE_BANDS: Tuple[Tuple[float, float], ...] = (
    (50_000_000.0, 0.4),
    (25_000_000.0, 0.3),
    (10_000_000.0, 0.2),
    (5_000_000.0, 0.1),
)

# IRPF savings base (2025): (upper bound, rate)
IRPF_SAVINGS_BRACKETS: Tuple[Tuple[float, float], ...] = (
    (6_000.0, 0.19),
    (50_000.0, 0.21),
    (200_000.0, 0.23),
    (300_000.0, 0.27),
    (float('inf'), 0.30),
)
COMPANY_GENERAL_BRACKETS: Tuple[Tuple[float, float], ...] = (
    (float('inf'), 0.25),
)
COMPANY_SME_BRACKETS: Tuple[Tuple[float, float], ...] = (
    (300_000.0, 0.15),
    (float('inf'), 0.25),
)
SME_TAX_BASE_LIMIT = 1_000_000.0

VITALICIA_CAP = 240_000.0
ABATEMENT_ACQUIRED_BEFORE_YEAR = 1995
ABATEMENT_CUTOFF_DATE = pd.Timestamp('1996-12-31')
ABATEMENT_RATE_PER_YEAR = 0.1428
ABATEMENT_GRACE_YEARS = 2
ABATEMENT_TRANSFER_LIMIT = 400_000.0
ARTICLE_21_EXEMPT_SHARE = 0.99
ARTICLE_21_MIN_YEARS = 1


def normalize_sector_key(key: str) -> str:
  '''
  Normalize a free-form sector label.

  Trims, lowercases, strips diacritics and joins words with hyphens, so
  'Tecnología ', 'TECNOLOGIA' and 'tecnologia' all become 'tecnologia'.
  '''
  decomposed = unicodedata.normalize('NFKD', key.strip().lower())
  stripped = ''.join(c for c in decomposed if not unicodedata.combining(c))
  return '-'.join(stripped.replace('_', ' ').split())


def _freeze(raw: Mapping[str, Tuple[float, float, float]]
           ) -> Dict[str, SectorMultiple]:
  return {
      key: SectorMultiple(base_multiple=base,
                          min_multiple=low,
                          max_multiple=high)
      for key, (base, low, high) in raw.items()
  }


class SectorTable:
  '''
  Read-only sector multiple table.

  Holds the EBITDA multiples, the smaller revenue multiples used for
  loss-making companies, the default sector and an alias map. All lookups
  go through a precomputed normalized index.
  '''

  EBITDA_COLUMNS = ('base_multiple', 'min_multiple', 'max_multiple')
  REVENUE_COLUMNS = ('revenue_base_multiple', 'revenue_min_multiple',
                     'revenue_max_multiple')

  def __init__(
      self,
      ebitda_multiples: Mapping[str, SectorMultiple],
      revenue_multiples: Mapping[str, SectorMultiple],
      default_sector: str = DEFAULT_SECTOR,
      aliases: Optional[Mapping[str, str]] = None,
  ):
    '''
    Initialize sector table.

    Args:
      ebitda_multiples: Sector key -> EBITDA multiple band
      revenue_multiples: Sector key -> revenue multiple band
      default_sector: Key used for unrecognized sectors
      aliases: Normalized alternative label -> sector key

    Raises:
      ValueError: If the default sector is missing or the two tables
        do not cover the same sectors
    '''
    if set(ebitda_multiples) != set(revenue_multiples):
      missing = set(ebitda_multiples) ^ set(revenue_multiples)
      raise ValueError(
          f'EBITDA and revenue tables differ for sectors: {sorted(missing)}')
    if default_sector not in ebitda_multiples:
      raise ValueError(f"Default sector '{default_sector}' not in table")

    self._ebitda = MappingProxyType(dict(ebitda_multiples))
    self._revenue = MappingProxyType(dict(revenue_multiples))
    self._default_sector = default_sector

    index: Dict[str, str] = {}
    for alias, target in (aliases or {}).items():
      if target not in self._ebitda:
        raise ValueError(f"Alias '{alias}' points to unknown sector '{target}'")
      index[normalize_sector_key(alias)] = target
    for key in self._ebitda:
      index[normalize_sector_key(key)] = key
    self._index = MappingProxyType(index)

  @property
  def default_sector(self) -> str:
    return self._default_sector

  @property
  def sectors(self) -> Tuple[str, ...]:
    return tuple(self._ebitda)

  def __contains__(self, key: object) -> bool:
    return key in self._ebitda

  def __len__(self) -> int:
    return len(self._ebitda)

  def ebitda(self, key: str) -> SectorMultiple:
    return self._ebitda[key]

  def revenue(self, key: str) -> SectorMultiple:
    return self._revenue[key]

  def lookup_normalized(self, normalized_key: str) -> Optional[str]:
    '''Return the sector key for a normalized label or alias, if any.'''
    return self._index.get(normalized_key)

  @classmethod
  def default(cls) -> 'SectorTable':
    '''Build the table from the module constants.'''
    return cls(
        ebitda_multiples=_freeze(SECTOR_EBITDA_MULTIPLES),
        revenue_multiples=_freeze(SECTOR_REVENUE_MULTIPLES),
        default_sector=DEFAULT_SECTOR,
        aliases=SECTOR_ALIASES,
    )

  @classmethod
  def from_dataframe(
      cls,
      df: pd.DataFrame,
      default_sector: str = DEFAULT_SECTOR,
      aliases: Optional[Mapping[str, str]] = None,
  ) -> 'SectorTable':
    '''
    Build a table from a DataFrame with one row per sector.

    Args:
      df: Columns 'sector' plus EBITDA_COLUMNS and REVENUE_COLUMNS
      default_sector: Key used for unrecognized sectors
      aliases: Optional alias map (defaults to SECTOR_ALIASES filtered to
        the sectors present)

    Raises:
      ValueError: On missing columns, missing values, duplicate sectors or
        inverted multiple bands
    '''
    required = ('sector',) + cls.EBITDA_COLUMNS + cls.REVENUE_COLUMNS
    missing = [c for c in required if c not in df.columns]
    if missing:
      raise ValueError(f'Sector table missing columns: {missing}')

    table = df.loc[:, list(required)].copy()
    if table.isna().any().any():
      bad_rows = table[table.isna().any(axis=1)]['sector'].tolist()
      raise ValueError(f'Missing multiples for sectors: {bad_rows}')

    table['sector'] = table['sector'].astype(str).map(normalize_sector_key)
    duplicated = table['sector'][table['sector'].duplicated()].tolist()
    if duplicated:
      raise ValueError(f'Duplicate sectors in table: {duplicated}')

    ebitda: Dict[str, SectorMultiple] = {}
    revenue: Dict[str, SectorMultiple] = {}
    for row in table.itertuples(index=False):
      try:
        ebitda[row.sector] = SectorMultiple(
            base_multiple=float(row.base_multiple),
            min_multiple=float(row.min_multiple),
            max_multiple=float(row.max_multiple),
        )
        revenue[row.sector] = SectorMultiple(
            base_multiple=float(row.revenue_base_multiple),
            min_multiple=float(row.revenue_min_multiple),
            max_multiple=float(row.revenue_max_multiple),
        )
      except ValueError as e:
        raise ValueError(f"Invalid multiples for sector '{row.sector}': {e}"
                        ) from e

    if aliases is None:
      aliases = {
          alias: target
          for alias, target in SECTOR_ALIASES.items()
          if target in ebitda
      }

    logger.debug('Loaded sector table with %d sectors', len(ebitda))
    return cls(ebitda, revenue, default_sector=default_sector, aliases=aliases)

  @classmethod
  def from_csv(cls, path: Path, **kwargs) -> 'SectorTable':
    '''
    Load a table from CSV (same columns as from_dataframe).

    Raises:
      FileNotFoundError: If the file does not exist
    '''
    if not path.exists():
      raise FileNotFoundError(f'Sector table not found: {path}')
    return cls.from_dataframe(pd.read_csv(path), **kwargs)

  def to_dataframe(self) -> pd.DataFrame:
    '''Export as a DataFrame in the from_dataframe layout.'''
    rows = []
    for key in self._ebitda:
      e, r = self._ebitda[key], self._revenue[key]
      rows.append({
          'sector': key,
          'base_multiple': e.base_multiple,
          'min_multiple': e.min_multiple,
          'max_multiple': e.max_multiple,
          'revenue_base_multiple': r.base_multiple,
          'revenue_min_multiple': r.min_multiple,
          'revenue_max_multiple': r.max_multiple,
      })
    return pd.DataFrame(rows)


@lru_cache(maxsize=1)
def default_sector_table() -> SectorTable:
  '''Shared table built from the module constants, created on first use.'''
  return SectorTable.default()
