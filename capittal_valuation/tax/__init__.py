"""Capital-gains overlay on a chosen sale valuation."""

from capittal_valuation.tax.overlay import apply_tax_overlay

__all__ = ['apply_tax_overlay']
