"""
Error taxonomy for the valuation engine.

Input errors are raised before any result is built, so a computation either
produces a complete result or nothing. Unknown sectors are not errors: the
warning below is attached to the result instead of being raised.
"""


class InvalidInputError(ValueError):
  """Financial inputs are non-finite, negative where not allowed, or unusable."""


class InvalidTaxInputError(ValueError):
  """Tax scenario inputs are out of range or cannot be parsed."""


class UnrecognizedSectorWarning(UserWarning):
  """
  Sector key did not match the multiples table.

  Carried in ValuationResult.warnings; the default sector entry was used.

  Attributes:
    sector_key: The key as supplied by the caller
    default_sector: The table entry used instead
  """

  def __init__(self, sector_key: str, default_sector: str):
    super().__init__(f"Sector '{sector_key}' not recognized, "
                     f"using '{default_sector}' multiples")
    self.sector_key = sector_key
    self.default_sector = default_sector

  def __eq__(self, other: object) -> bool:
    if not isinstance(other, UnrecognizedSectorWarning):
      return NotImplemented
    return (self.sector_key, self.default_sector) == (other.sector_key,
                                                      other.default_sector)

  def __hash__(self) -> int:
    return hash((self.sector_key, self.default_sector))
