'''
Scenario generation.

Each ScenarioConfig scales the adjusted multiple of a base valuation and
recomputes valuation, net return and ROI against the caller's acquisition
cost. Output order always matches configuration order, since the forms
display scenarios positionally (conservative, base, optimistic).
'''

import logging
from math import isfinite
from typing import Optional, Sequence, Tuple

from capittal_valuation.domain.types import ScenarioResult, ValuationResult
from capittal_valuation.engine.multiples import apply_multiple
from capittal_valuation.engine.multiples import round_currency
from capittal_valuation.errors import InvalidInputError
from capittal_valuation.scenarios.config import ScenarioConfig

logger = logging.getLogger(__name__)


def _scenario_result(
    config: ScenarioConfig,
    metric_value: float,
    multiple: float,
    acquisition_cost: float,
) -> ScenarioResult:
  if not isfinite(config.multiplier_adjustment):
    raise InvalidInputError(
        f"Scenario '{config.id}': multiplier_adjustment must be finite")
  if config.multiplier_adjustment <= -1.0:
    raise InvalidInputError(
        f"Scenario '{config.id}': multiplier_adjustment must be > -1, "
        f'got {config.multiplier_adjustment}')

  scenario_multiple = multiple * (1.0 + config.multiplier_adjustment)
  valuation = apply_multiple(metric_value, scenario_multiple)
  net_return = valuation - acquisition_cost
  roi = None
  if acquisition_cost > 0:
    roi = round(net_return / acquisition_cost * 100.0, 2)

  return ScenarioResult(
      id=config.id,
      name=config.name,
      type=config.type.value,
      multiple=scenario_multiple,
      valuation=round_currency(valuation),
      unrounded_valuation=valuation,
      net_return=round_currency(net_return),
      roi=roi,
  )


def generate_scenarios(
    base: ValuationResult,
    configs: Optional[Sequence[ScenarioConfig]] = None,
    acquisition_cost: float = 0.0,
) -> Tuple[ScenarioResult, ...]:
  '''
  Generate scenario variants of a base valuation.

  Args:
    base: Valuation whose adjusted multiple and metric are reused
    configs: Scenario configurations (default: ScenarioConfig.defaults())
    acquisition_cost: What the buyer/owner paid, for ROI and net return

  Returns:
    One ScenarioResult per config, in the same order

  Raises:
    InvalidInputError: If acquisition_cost is negative or non-finite, or a
      multiplier adjustment would make the multiple non-positive
  '''
  if configs is None:
    configs = ScenarioConfig.defaults()

  if not isfinite(acquisition_cost) or acquisition_cost < 0:
    raise InvalidInputError(
        f'acquisition_cost must be finite and >= 0, got {acquisition_cost}')

  results = tuple(
      _scenario_result(config, base.metric_value, base.ebitda_multiple_used,
                       acquisition_cost) for config in configs)
  logger.debug('Generated %d scenarios for sector %s', len(results),
               base.sector)
  return results
