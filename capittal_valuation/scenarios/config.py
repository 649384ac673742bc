"""
Scenario and engine configuration.

ScenarioConfig describes one valuation variant (conservative, base,
optimistic or custom). EngineConfig selects which adjustment policies the
calculator uses. Both are serializable (JSON/dict) for reproducibility.
"""

from dataclasses import asdict
from dataclasses import dataclass
from enum import Enum
import json
from typing import Any


class ScenarioType(str, Enum):
  CONSERVATIVE = 'conservative'
  BASE = 'base'
  OPTIMISTIC = 'optimistic'
  CUSTOM = 'custom'


@dataclass(frozen=True)
class ScenarioConfig:
  """
  Configuration for one valuation scenario.

  Attributes:
    id: Identifier, unique within a scenario list
    name: Display name
    type: Scenario type
    multiplier_adjustment: Relative change applied to the adjusted
      multiple (-0.2 means 20% below it)
  """
  id: str
  name: str
  type: ScenarioType = ScenarioType.CUSTOM
  multiplier_adjustment: float = 0.0

  def __post_init__(self):
    object.__setattr__(self, 'type', ScenarioType(self.type))

  @classmethod
  def conservative(cls) -> 'ScenarioConfig':
    """Multiple 20% below the adjusted multiple."""
    return cls(id='conservative',
               name='Conservador',
               type=ScenarioType.CONSERVATIVE,
               multiplier_adjustment=-0.2)

  @classmethod
  def base(cls) -> 'ScenarioConfig':
    """The adjusted multiple itself."""
    return cls(id='base',
               name='Base',
               type=ScenarioType.BASE,
               multiplier_adjustment=0.0)

  @classmethod
  def optimistic(cls) -> 'ScenarioConfig':
    """Multiple 20% above the adjusted multiple."""
    return cls(id='optimistic',
               name='Optimista',
               type=ScenarioType.OPTIMISTIC,
               multiplier_adjustment=0.2)

  @classmethod
  def defaults(cls) -> tuple['ScenarioConfig', ...]:
    """Conservative, base and optimistic, in display order."""
    return (cls.conservative(), cls.base(), cls.optimistic())

  def to_dict(self) -> dict[str, Any]:
    """Convert to dictionary."""
    data = asdict(self)
    data['type'] = self.type.value
    return data

  def to_json(self) -> str:
    """Serialize to JSON string."""
    return json.dumps(self.to_dict(), indent=2)

  @classmethod
  def from_dict(cls, data: dict[str, Any]) -> 'ScenarioConfig':
    """Create from dictionary."""
    return cls(**data)

  @classmethod
  def from_json(cls, json_str: str) -> 'ScenarioConfig':
    """Create from JSON string."""
    return cls.from_dict(json.loads(json_str))


@dataclass
class EngineConfig:
  """
  Policy selection for the valuation calculator.

  All fields are strings (policy names) that map to factories in the registry.

  Attributes:
    name: Human-readable configuration name
    growth: Growth policy name (e.g., 'standard', 'conservative', 'none')
    size: Size policy name (e.g., 'standard', 'none')
  """
  name: str = 'default'
  growth: str = 'standard'
  size: str = 'standard'

  @classmethod
  def default(cls) -> 'EngineConfig':
    """
    Create default engine configuration.

    Uses:
      - Standard growth bands (+5/+10/+15%, -10% on decline)
      - Employee/revenue size premium
    """
    return cls(name='default', growth='standard', size='standard')

  @classmethod
  def conservative(cls) -> 'EngineConfig':
    """Smaller growth bonuses, no size premium."""
    return cls(name='conservative', growth='conservative', size='none')

  @classmethod
  def unadjusted(cls) -> 'EngineConfig':
    """Sector base multiple only."""
    return cls(name='unadjusted', growth='none', size='none')

  def to_dict(self) -> dict[str, Any]:
    """Convert to dictionary."""
    return asdict(self)

  def to_json(self) -> str:
    """Serialize to JSON string."""
    return json.dumps(self.to_dict(), indent=2)

  @classmethod
  def from_dict(cls, data: dict[str, Any]) -> 'EngineConfig':
    """Create from dictionary."""
    return cls(**data)

  @classmethod
  def from_json(cls, json_str: str) -> 'EngineConfig':
    """Create from JSON string."""
    return cls.from_dict(json.loads(json_str))
