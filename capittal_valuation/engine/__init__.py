'''Pure math for multiple valuation and tax brackets.'''

from capittal_valuation.engine.brackets import (
    bracket_tax_cents,
    walk_brackets,
)
from capittal_valuation.engine.multiples import (
    adjust_multiple,
    apply_multiple,
    compute_range,
    round_currency,
)

__all__ = [
    'adjust_multiple',
    'apply_multiple',
    'bracket_tax_cents',
    'compute_range',
    'round_currency',
    'walk_brackets',
]
