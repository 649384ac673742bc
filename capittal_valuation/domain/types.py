'''
Domain types for the valuation engine.

These dataclasses are the typed interfaces between the resolver, the
policies, the math engine and the tax overlay. Every value object is frozen:
a computation builds its result once and never mutates it afterwards.
'''

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from math import isfinite
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar, Union

import pandas as pd

from capittal_valuation.errors import InvalidInputError

T = TypeVar('T')

DateLike = Union[str, date, pd.Timestamp]


class EmployeeRange(str, Enum):
  '''Headcount buckets offered by the valuation forms.'''
  MICRO = '1-10'
  SMALL = '11-50'
  MEDIUM = '51-100'
  MID_MARKET = '101-250'
  LARGE = '251-500'
  ENTERPRISE = '501+'

  @classmethod
  def parse(cls, value: Any) -> Optional['EmployeeRange']:
    '''
    Parse an employee range from its label.

    Args:
      value: EmployeeRange, label such as '51-100', or None/empty

    Returns:
      EmployeeRange or None when no range was given

    Raises:
      InvalidInputError: If the label is not a known bucket
    '''
    if value is None or (isinstance(value, str) and not value.strip()):
      return None
    if isinstance(value, cls):
      return value
    try:
      return cls(str(value).strip())
    except ValueError as e:
      raise InvalidInputError(
          f"Unknown employee range: '{value}'. "
          f'Available: {[r.value for r in cls]}') from e


class TaxpayerType(str, Enum):
  '''Seller type: IRPF for individuals, Impuesto de Sociedades for companies.'''
  INDIVIDUAL = 'individual'
  COMPANY = 'company'


class ValuationMethod(str, Enum):
  '''Metric the multiple was applied to.'''
  EBITDA = 'ebitda'
  REVENUE = 'revenue'


@dataclass
class PolicyOutput(Generic[T]):
  '''
  Standard output from any policy.

  Every policy returns both a computed value and diagnostic information
  explaining how the value was computed.

  Attributes:
    value: The computed value (type depends on policy)
    diag: Dictionary of diagnostic information
  '''
  value: T
  diag: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CompanyFinancials:
  '''
  Normalized financial snapshot of the company being valued.

  Attributes:
    revenue: Annual revenue (>= 0)
    ebitda: Annual EBITDA (may be negative)
    sector: Free-form sector key, resolved against the multiples table
    growth_rate: Annual growth in percentage points (15.0 means 15%)
    employee_range: Headcount bucket, if known
    company_name: Display name, only used for logging and batch output
  '''
  revenue: float
  ebitda: float
  sector: str
  growth_rate: float = 0.0
  employee_range: Optional[EmployeeRange] = None
  company_name: Optional[str] = None

  def __post_init__(self):
    object.__setattr__(self, 'employee_range',
                       EmployeeRange.parse(self.employee_range))


@dataclass(frozen=True)
class SectorMultiple:
  '''
  Multiple band for one sector.

  Attributes:
    base_multiple: Multiple applied before growth/size adjustments
    min_multiple: Lower bound of the band (range low end)
    max_multiple: Upper bound of the band (range high end)
  '''
  base_multiple: float
  min_multiple: float
  max_multiple: float

  def __post_init__(self):
    values = (self.base_multiple, self.min_multiple, self.max_multiple)
    if not all(isfinite(v) for v in values):
      raise ValueError(f'Non-finite multiple in {values}')
    if self.min_multiple <= 0:
      raise ValueError(f'min_multiple must be positive, got {self.min_multiple}')
    if not self.min_multiple <= self.base_multiple <= self.max_multiple:
      raise ValueError('Expected min_multiple <= base_multiple <= max_multiple, '
                       f'got {self.min_multiple}, {self.base_multiple}, '
                       f'{self.max_multiple}')


@dataclass(frozen=True)
class ValuationRange:
  '''Low/high valuation at the sector's min and max multiples.'''
  min: float
  max: float


@dataclass(frozen=True)
class ScenarioResult:
  '''
  One valuation variant.

  Attributes:
    id: Scenario identifier (e.g. 'conservative')
    name: Display name
    type: Scenario type value ('conservative', 'base', 'optimistic', 'custom')
    multiple: Multiple after the scenario adjustment
    valuation: Valuation rounded to cents
    unrounded_valuation: Valuation before rounding, used for comparisons
    net_return: valuation - acquisition cost
    roi: Net return as a percentage of acquisition cost, None if cost is 0
  '''
  id: str
  name: str
  type: str
  multiple: float
  valuation: float
  unrounded_valuation: float
  net_return: float
  roi: Optional[float] = None


@dataclass(frozen=True)
class ValuationResult:
  '''
  Complete valuation result with diagnostics.

  Attributes:
    point_valuation: Metric x adjusted multiple, rounded to cents
    range: Valuation at the sector's min and max multiples
    ebitda_multiple_used: Adjusted multiple applied to the metric
    method: Whether EBITDA or the revenue fallback was used
    metric_value: EBITDA or revenue the multiple was applied to
    sector: Resolved sector key
    sector_recognized: False when the default sector entry was used
    warnings: Non-fatal warnings (UnrecognizedSectorWarning)
    scenarios: Scenario variants, in configuration order
    diag: Merged diagnostics from all policies
  '''
  point_valuation: float
  range: ValuationRange
  ebitda_multiple_used: float
  method: ValuationMethod
  metric_value: float
  sector: str
  sector_recognized: bool = True
  warnings: Tuple[Warning, ...] = ()
  scenarios: Tuple[ScenarioResult, ...] = ()
  diag: Dict[str, Any] = field(default_factory=dict)

  def to_dict(self) -> Dict[str, Any]:
    '''Convert to flat dictionary for DataFrame creation.'''
    result = {
        'point_valuation': self.point_valuation,
        'range_min': self.range.min,
        'range_max': self.range.max,
        'ebitda_multiple_used': self.ebitda_multiple_used,
        'method': self.method.value,
        'metric_value': self.metric_value,
        'sector': self.sector,
        'sector_recognized': self.sector_recognized,
    }
    for scenario in self.scenarios:
      result[f'scenario_{scenario.id}'] = scenario.valuation
    result.update(self.diag)
    return result


@dataclass(frozen=True)
class TaxScenarioInput:
  '''
  Seller situation for the capital-gains overlay.

  Attributes:
    taxpayer_type: Individual (IRPF) or company (IS)
    acquisition_value: Cost basis of the stake being sold
    acquisition_date: Date the stake was acquired (ISO string or date)
    sale_percentage: Share of the company sold, 0-100
    deductible_expenses: Transaction costs deductible from the gain
    sale_date: Date of sale for holding periods (default: today)
    current_tax_base: Company's annual taxable base before the sale
    vitalicia_plan: Individual over 65 reinvesting into a life annuity
    vitalicia_amount: Amount placed into the annuity
    reinvestment_plan: Seller plans to reinvest the proceeds
    reinvestment_amount: Amount reinvested
    reinvestment_qualifies: Company reinvestment meets the Art. 42 LIS rules
    significant_holding: Company holds >= 5% (Art. 21 LIS)
  '''
  taxpayer_type: TaxpayerType
  acquisition_value: float
  acquisition_date: DateLike
  sale_percentage: float = 100.0
  deductible_expenses: float = 0.0
  sale_date: Optional[DateLike] = None
  current_tax_base: float = 0.0
  vitalicia_plan: bool = False
  vitalicia_amount: float = 0.0
  reinvestment_plan: bool = False
  reinvestment_amount: float = 0.0
  reinvestment_qualifies: bool = False
  significant_holding: bool = False


@dataclass(frozen=True)
class TaxBreakdownItem:
  '''
  One line of the tax computation.

  Allowances appear with a negative amount and zero tax; brackets carry the
  slice of taxable gain, the rate applied and the resulting tax.
  '''
  concept: str
  amount: float
  rate: float = 0.0
  tax: float = 0.0


@dataclass(frozen=True)
class TaxCalculationResult:
  '''
  Result of the capital-gains overlay, amounts rounded to cents.

  Attributes:
    sale_price: Sale valuation x sale percentage
    acquisition_value: Cost basis used
    deductible_expenses: Expenses deducted from the gain
    capital_gain: sale_price - acquisition_value - deductible_expenses
    abatement_benefit: Gain removed by pre-1995 abatement coefficients
    article21_benefit: Gain exempt under Art. 21 LIS
    vitalicia_benefit: Gain exempt via life annuity reinvestment
    reinvestment_benefit: Gain exempt via reinvestment
    taxable_gain: Gain left after all allowances
    tax_breakdown: Itemized allowances and brackets
    total_tax: Sum of the line taxes in tax_breakdown
    effective_tax_rate: total_tax / capital_gain (0 when there is no gain)
    net_after_tax: sale_price - total_tax
    holding_years: Whole years between acquisition and sale
  '''
  sale_price: float
  acquisition_value: float
  deductible_expenses: float
  capital_gain: float
  abatement_benefit: float
  article21_benefit: float
  vitalicia_benefit: float
  reinvestment_benefit: float
  taxable_gain: float
  tax_breakdown: Tuple[TaxBreakdownItem, ...]
  total_tax: float
  effective_tax_rate: float
  net_after_tax: float
  holding_years: int

  @property
  def total_benefits(self) -> float:
    '''Sum of all allowance benefits.'''
    return round(self.abatement_benefit + self.article21_benefit +
                 self.vitalicia_benefit + self.reinvestment_benefit, 2)


@dataclass(frozen=True)
class SectorResolution:
  '''
  Outcome of resolving a sector key against the multiples table.

  Attributes:
    sector_key: Key as supplied by the caller
    sector: Table key actually used
    ebitda: EBITDA multiple band for the sector
    revenue: Revenue multiple band for the sector
    match: 'exact', 'normalized' or 'default'
  '''
  sector_key: str
  sector: str
  ebitda: SectorMultiple
  revenue: SectorMultiple
  match: str

  @property
  def recognized(self) -> bool:
    return self.match != 'default'
