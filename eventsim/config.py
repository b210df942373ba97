"""
Configuration management for the simulation engine

Defines configuration structure and loading from Hydra config.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Union

from omegaconf import DictConfig, OmegaConf

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "conf" / "config.yaml"


@dataclass
class DecayConfig:
    """Configuration for delta decay"""
    epsilon: float = 1e-6  # deltas below this are floored to zero


@dataclass
class CascadeConfig:
    """Configuration for event bus cascade bounding"""
    max_depth: int = 8
    history_size: int = 1000


@dataclass
class SalienceConfig:
    """Configuration for arousal-modulated memory salience"""
    species_weights: Dict[str, float] = field(default_factory=lambda: {
        "human": 1.0,
        "animal": 1.3,
        "robotic": 0.4,
    })
    arousal_gain: float = 0.5
    arousal_ceiling: float = 0.7  # arousal above this adds no salience
    extreme_arousal_threshold: float = 0.9  # arousal above this impairs encoding
    impairment_strength: float = 0.5  # fraction of salience lost at maximal arousal
    negativity_bias: float = 0.5
    half_life_days: float = 3652.5  # ten years

    def __post_init__(self):
        if not 0.0 <= self.arousal_ceiling <= self.extreme_arousal_threshold < 1.0:
            raise ValueError(
                "Expected 0 <= arousal_ceiling <= extreme_arousal_threshold < 1, got "
                f"{self.arousal_ceiling} and {self.extreme_arousal_threshold}"
            )
        if not 0.0 <= self.impairment_strength <= 1.0:
            raise ValueError(f"impairment_strength must be within [0, 1], got {self.impairment_strength}")

    @property
    def half_life(self) -> timedelta:
        return timedelta(days=self.half_life_days)

    def species_weight(self, species: Any) -> float:
        key = getattr(species, "value", species)
        return self.species_weights.get(key, 1.0)


@dataclass
class PrimingConfig:
    """Configuration for folding memories back into mood"""
    valence_weight: float = 0.3
    arousal_weight: float = 0.3
    dominance_weight: float = 0.15
    negligible: float = 1e-6  # contributions below this are dropped


@dataclass
class TrustConfig:
    """Configuration for perceived risk between entities"""
    base_risk: float = 0.3
    half_life_days: float = 7.0
    sensitivity: float = 0.5
    antecedent_threshold: float = 0.05

    @property
    def half_life(self) -> timedelta:
        return timedelta(days=self.half_life_days)


@dataclass
class LoggingConfig:
    """Configuration for CLI logging"""
    level: str = "INFO"


@dataclass
class EngineConfig:
    """Complete engine configuration"""
    decay: DecayConfig = field(default_factory=DecayConfig)
    cascade: CascadeConfig = field(default_factory=CascadeConfig)
    salience: SalienceConfig = field(default_factory=SalienceConfig)
    priming: PrimingConfig = field(default_factory=PrimingConfig)
    trust: TrustConfig = field(default_factory=TrustConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_hydra_config(cls, cfg: Any) -> "EngineConfig":
        """
        Load configuration from Hydra config object.

        Reads the `engine` section; missing sections and keys keep defaults.
        """
        if cfg is None:
            return cls()
        section = cfg.get("engine") if hasattr(cfg, "get") else getattr(cfg, "engine", None)
        if section is None:
            return cls()
        if isinstance(section, DictConfig):
            section = OmegaConf.to_container(section, resolve=True)

        return cls(
            decay=DecayConfig(**section.get("decay", {})),
            cascade=CascadeConfig(**section.get("cascade", {})),
            salience=SalienceConfig(**section.get("salience", {})),
            priming=PrimingConfig(**section.get("priming", {})),
            trust=TrustConfig(**section.get("trust", {})),
            logging=LoggingConfig(**section.get("logging", {})),
        )


def load_config(path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """Load an EngineConfig from a YAML file (defaults to conf/config.yaml)."""
    cfg = OmegaConf.load(str(path or DEFAULT_CONFIG_PATH))
    return EngineConfig.from_hydra_config(cfg)


DEFAULT_CONFIG = EngineConfig()
