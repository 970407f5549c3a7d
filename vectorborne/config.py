"""Configuration system for vectorborne.

Hierarchical YAML configuration with deep-merge support:
  base.yaml → scenario override → sweep overrides

Sections map 1:1 to YAML top-level keys. Parameters that the transmission
core consumes unchecked (efficiencies, bite rate, transmissibility) are
range-checked here, once, at load time.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from vectorborne.types import MAX_STRAINS


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION DATACLASSES
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class SimulationSection:
    """Top-level simulation timing and control."""
    seed: int = 42
    n_days: int = 365
    verbosity: int = 0     # 0 = warnings only, 1 = info, 2+ = debug


@dataclass
class VectorSection:
    """Vector population parameters, shared by every place and strain.

    Defaults are illustrative Aedes aegypti / dengue values.
    """
    infection_efficiency: float = 0.3     # P(infect vector | bite on infectious host)
    transmission_efficiency: float = 0.3  # P(infect host | bite by infectious vector)
    bite_rate: float = 0.76               # Bites per vector per day
    incubation_period: float = 11.0       # Extrinsic incubation (days)


@dataclass
class StrainSection:
    """One circulating strain (serotype)."""
    name: str = "DENV-1"
    transmissibility: float = 1.0


@dataclass
class DiseaseSection:
    """Disease natural history and the tracked strain set."""
    strains: List[StrainSection] = field(
        default_factory=lambda: [StrainSection(name="DENV-1")]
    )
    latent_period: int = 5        # Host intrinsic incubation (days)
    infectious_period: int = 5    # Host viraemic period (days)


@dataclass
class SimulationConfig:
    """Complete simulation configuration.

    Load from YAML via `load_config()`. Sections map 1:1 to YAML top-level keys.
    """
    simulation: SimulationSection = field(default_factory=SimulationSection)
    vectors: VectorSection = field(default_factory=VectorSection)
    disease: DiseaseSection = field(default_factory=DiseaseSection)


# ═══════════════════════════════════════════════════════════════════════
# YAML LOADING & MERGING
# ═══════════════════════════════════════════════════════════════════════

def deep_merge(base: Dict, override: Dict) -> Dict:
    """Recursively merge override into base. Modifies base in place.

    - Dict values are merged recursively
    - Non-dict values (including lists) are replaced
    - Keys in override but not base are added

    Args:
        base: Base dictionary (modified in place).
        override: Override dictionary.

    Returns:
        The merged base dictionary.
    """
    for key, value in override.items():
        if (
            key in base
            and isinstance(base[key], dict)
            and isinstance(value, dict)
        ):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _dict_to_section(section_cls, data: Dict) -> Any:
    """Convert a dict to a dataclass, ignoring unknown keys."""
    valid_fields = {f.name for f in dataclasses.fields(section_cls)}
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    return section_cls(**filtered)


def _yaml_to_config(data: Dict) -> SimulationConfig:
    """Convert a merged YAML dict to a SimulationConfig."""
    sections = {}
    section_map = {
        'simulation': SimulationSection,
        'vectors': VectorSection,
    }
    for key, cls in section_map.items():
        if key in data and isinstance(data[key], dict):
            sections[key] = _dict_to_section(cls, data[key])
        else:
            sections[key] = cls()

    # Strains are a list of mappings nested inside the disease section
    disease_data = data.get('disease')
    if isinstance(disease_data, dict):
        disease_data = dict(disease_data)  # don't mutate original
        strains = disease_data.pop('strains', None)
        disease = _dict_to_section(DiseaseSection, disease_data)
        if isinstance(strains, list):
            disease.strains = [
                _dict_to_section(StrainSection, s)
                for s in strains if isinstance(s, dict)
            ]
        sections['disease'] = disease
    else:
        sections['disease'] = DiseaseSection()

    return SimulationConfig(**sections)


def validate_config(config: SimulationConfig) -> None:
    """Validate configuration constraints. Raises ValueError on failure.

    Checks:
      - Seed and run length are non-negative
      - Vector efficiencies are probabilities, bite rate non-negative
      - Strain set is non-empty, bounded, uniquely named
      - Transmissibility non-negative
      - Natural-history durations are positive
    """
    sim = config.simulation
    if sim.seed < 0:
        raise ValueError("simulation.seed must be non-negative")
    if sim.n_days < 0:
        raise ValueError(
            f"simulation.n_days must be >= 0, got {sim.n_days}"
        )

    # Vector parameters
    v = config.vectors
    for name in ('infection_efficiency', 'transmission_efficiency'):
        value = getattr(v, name)
        if not (0.0 <= value <= 1.0):
            raise ValueError(
                f"vectors.{name} must be in [0, 1], got {value}"
            )
    if v.bite_rate < 0:
        raise ValueError(
            f"vectors.bite_rate must be >= 0, got {v.bite_rate}"
        )
    if v.incubation_period <= 0:
        raise ValueError(
            f"vectors.incubation_period must be positive, "
            f"got {v.incubation_period}"
        )

    # Strain set
    strains = config.disease.strains
    if len(strains) == 0:
        raise ValueError("disease.strains must list at least one strain")
    if len(strains) > MAX_STRAINS:
        raise ValueError(
            f"disease.strains supports at most {MAX_STRAINS} strains, "
            f"got {len(strains)}"
        )
    names = [s.name for s in strains]
    if len(set(names)) != len(names):
        raise ValueError(f"disease.strains names must be unique, got {names}")
    for i, s in enumerate(strains):
        if s.transmissibility < 0:
            raise ValueError(
                f"disease.strains[{i}].transmissibility must be >= 0, "
                f"got {s.transmissibility}"
            )

    # Host natural history
    if config.disease.latent_period < 1:
        raise ValueError(
            f"disease.latent_period must be >= 1 day, "
            f"got {config.disease.latent_period}"
        )
    if config.disease.infectious_period < 1:
        raise ValueError(
            f"disease.infectious_period must be >= 1 day, "
            f"got {config.disease.infectious_period}"
        )


def load_config(
    base_path: Union[str, Path],
    scenario_path: Optional[Union[str, Path]] = None,
    sweep_overrides: Optional[Dict] = None,
) -> SimulationConfig:
    """Load and merge hierarchical YAML configuration.

    Merge order: base → scenario → sweep overrides.
    Each layer overrides only the fields it specifies.

    Args:
        base_path: Path to base configuration YAML.
        scenario_path: Optional scenario override YAML.
        sweep_overrides: Optional dict of parameter sweep overrides.

    Returns:
        Validated SimulationConfig.

    Raises:
        FileNotFoundError: If base_path doesn't exist.
        ValueError: If validation fails.
    """
    base_path = Path(base_path)
    if not base_path.exists():
        raise FileNotFoundError(f"Config file not found: {base_path}")

    with open(base_path) as f:
        config_dict = yaml.safe_load(f) or {}

    if scenario_path is not None:
        scenario_path = Path(scenario_path)
        if scenario_path.exists():
            with open(scenario_path) as f:
                scenario = yaml.safe_load(f) or {}
            deep_merge(config_dict, scenario)

    if sweep_overrides is not None:
        deep_merge(config_dict, sweep_overrides)

    config = _yaml_to_config(config_dict)
    validate_config(config)
    return config


def default_config() -> SimulationConfig:
    """Return a SimulationConfig with all default values."""
    config = SimulationConfig()
    validate_config(config)
    return config
