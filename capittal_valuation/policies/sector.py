"""
Sector multiple resolution.

Maps a free-form sector label to its multiple bands. Lookup is exact
first, then on the normalized label (and its aliases), and finally falls
back to the table's default sector. The fallback is not an error: callers
see it through SectorResolution.match == 'default'.
"""

import logging
from typing import Optional

from capittal_valuation.domain.types import PolicyOutput, SectorResolution
from capittal_valuation.tables import default_sector_table
from capittal_valuation.tables import normalize_sector_key
from capittal_valuation.tables import SectorTable

logger = logging.getLogger(__name__)


class SectorResolver:
  """Resolve sector keys against a SectorTable."""

  def __init__(self, table: Optional[SectorTable] = None):
    """
    Initialize resolver.

    Args:
      table: Sector table (default: shared table from tables.py)
    """
    self.table = table if table is not None else default_sector_table()

  def compute(self, sector_key: str) -> PolicyOutput[SectorResolution]:
    """
    Resolve a sector key.

    Args:
      sector_key: Sector label as entered by the user

    Returns:
      PolicyOutput with SectorResolution and diagnostics
    """
    key = sector_key if isinstance(sector_key, str) else str(sector_key or '')

    if key in self.table:
      resolved, match = key, 'exact'
    else:
      resolved = self.table.lookup_normalized(normalize_sector_key(key))
      match = 'normalized'
      if resolved is None:
        resolved, match = self.table.default_sector, 'default'
        logger.warning("Sector '%s' not recognized, using '%s' multiples", key,
                       resolved)

    resolution = SectorResolution(
        sector_key=key,
        sector=resolved,
        ebitda=self.table.ebitda(resolved),
        revenue=self.table.revenue(resolved),
        match=match,
    )
    return PolicyOutput(value=resolution,
                        diag={
                            'sector_key': key,
                            'sector_resolved': resolved,
                            'sector_match': match,
                        })


def resolve_sector_multiple(
    sector_key: str,
    table: Optional[SectorTable] = None,
) -> SectorResolution:
  """
  Resolve a sector key to its multiple bands.

  Args:
    sector_key: Sector label (case, accents and spacing are forgiven)
    table: Sector table (default: shared table)

  Returns:
    SectorResolution; match == 'default' when the key was not recognized
  """
  return SectorResolver(table).compute(sector_key).value
