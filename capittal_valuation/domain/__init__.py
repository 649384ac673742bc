"""Domain types for the valuation engine."""

from capittal_valuation.domain.types import CompanyFinancials
from capittal_valuation.domain.types import EmployeeRange
from capittal_valuation.domain.types import PolicyOutput
from capittal_valuation.domain.types import ScenarioResult
from capittal_valuation.domain.types import SectorResolution
from capittal_valuation.domain.types import SectorMultiple
from capittal_valuation.domain.types import TaxBreakdownItem
from capittal_valuation.domain.types import TaxCalculationResult
from capittal_valuation.domain.types import TaxpayerType
from capittal_valuation.domain.types import TaxScenarioInput
from capittal_valuation.domain.types import ValuationMethod
from capittal_valuation.domain.types import ValuationRange
from capittal_valuation.domain.types import ValuationResult

__all__ = [
    'CompanyFinancials',
    'EmployeeRange',
    'PolicyOutput',
    'ScenarioResult',
    'SectorResolution',
    'SectorMultiple',
    'TaxBreakdownItem',
    'TaxCalculationResult',
    'TaxpayerType',
    'TaxScenarioInput',
    'ValuationMethod',
    'ValuationRange',
    'ValuationResult',
]
