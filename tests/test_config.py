"""Tests for vectorborne.config — configuration loading and validation."""

from pathlib import Path

import pytest
import yaml

from vectorborne.config import (
    DiseaseSection,
    SimulationConfig,
    SimulationSection,
    StrainSection,
    VectorSection,
    deep_merge,
    default_config,
    load_config,
    validate_config,
)
from vectorborne.types import MAX_STRAINS


# ── deep_merge tests ──────────────────────────────────────────────────

class TestDeepMerge:
    def test_simple_override(self):
        base = {'a': 1, 'b': 2}
        result = deep_merge(base, {'b': 3})
        assert result == {'a': 1, 'b': 3}

    def test_nested_merge(self):
        base = {'x': {'a': 1, 'b': 2}, 'y': 10}
        override = {'x': {'b': 3, 'c': 4}}
        result = deep_merge(base, override)
        assert result == {'x': {'a': 1, 'b': 3, 'c': 4}, 'y': 10}

    def test_lists_are_replaced(self):
        base = {'disease': {'strains': [{'name': 'A'}, {'name': 'B'}]}}
        override = {'disease': {'strains': [{'name': 'C'}]}}
        result = deep_merge(base, override)
        assert result['disease']['strains'] == [{'name': 'C'}]

    def test_empty_override(self):
        base = {'a': 1, 'b': 2}
        assert deep_merge(base, {}) == {'a': 1, 'b': 2}


# ── default_config tests ─────────────────────────────────────────────

class TestDefaultConfig:
    def test_creates_valid_config(self):
        config = default_config()
        assert isinstance(config, SimulationConfig)

    def test_default_values(self):
        config = default_config()
        assert config.simulation.seed == 42
        assert len(config.disease.strains) == 1
        assert config.disease.strains[0].transmissibility == 1.0
        assert 0.0 <= config.vectors.infection_efficiency <= 1.0
        assert 0.0 <= config.vectors.transmission_efficiency <= 1.0

    def test_sections_not_shared(self):
        """Mutable defaults must not leak between instances."""
        a = SimulationConfig()
        b = SimulationConfig()
        a.disease.strains.append(StrainSection(name="DENV-2"))
        assert len(b.disease.strains) == 1


# ── YAML loading tests ───────────────────────────────────────────────

class TestLoadConfig:
    def test_load_from_yaml(self, tmp_path):
        yaml_content = {
            'simulation': {'seed': 99, 'n_days': 30},
            'vectors': {'bite_rate': 0.5},
        }
        config_path = tmp_path / "test.yaml"
        with open(config_path, 'w') as f:
            yaml.dump(yaml_content, f)

        config = load_config(config_path)
        assert config.simulation.seed == 99
        assert config.simulation.n_days == 30
        assert config.vectors.bite_rate == 0.5
        # Unspecified fields and sections get defaults
        assert config.vectors.incubation_period == 11.0
        assert config.disease.latent_period == 5

    def test_load_strain_list(self, tmp_path):
        yaml_content = {
            'disease': {
                'latent_period': 4,
                'strains': [
                    {'name': 'DENV-1', 'transmissibility': 1.0},
                    {'name': 'DENV-2', 'transmissibility': 0.0},
                ],
            },
        }
        config_path = tmp_path / "strains.yaml"
        with open(config_path, 'w') as f:
            yaml.dump(yaml_content, f)

        config = load_config(config_path)
        assert config.disease.latent_period == 4
        assert [s.name for s in config.disease.strains] == ['DENV-1', 'DENV-2']
        assert all(isinstance(s, StrainSection) for s in config.disease.strains)
        assert config.disease.strains[1].transmissibility == 0.0

    def test_load_with_scenario_override(self, tmp_path):
        base = {'vectors': {'bite_rate': 0.76, 'infection_efficiency': 0.3}}
        scenario = {'vectors': {'bite_rate': 1.2}}
        base_path = tmp_path / "base.yaml"
        scen_path = tmp_path / "scenario.yaml"
        with open(base_path, 'w') as f:
            yaml.dump(base, f)
        with open(scen_path, 'w') as f:
            yaml.dump(scenario, f)

        config = load_config(base_path, scenario_path=scen_path)
        assert config.vectors.bite_rate == 1.2
        assert config.vectors.infection_efficiency == 0.3  # unchanged

    def test_load_with_sweep_overrides(self, tmp_path):
        base_path = tmp_path / "base.yaml"
        with open(base_path, 'w') as f:
            yaml.dump({'simulation': {'seed': 42}}, f)

        config = load_config(base_path, sweep_overrides={'simulation': {'seed': 123}})
        assert config.simulation.seed == 123

    def test_missing_scenario_is_ignored(self, tmp_path):
        base_path = tmp_path / "base.yaml"
        with open(base_path, 'w') as f:
            yaml.dump({'simulation': {'seed': 7}}, f)
        config = load_config(base_path, scenario_path=tmp_path / "nope.yaml")
        assert config.simulation.seed == 7

    def test_empty_yaml(self, tmp_path):
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        config = load_config(config_path)
        assert config.simulation.seed == 42

    def test_unknown_keys_ignored(self, tmp_path):
        config_path = tmp_path / "extra.yaml"
        with open(config_path, 'w') as f:
            yaml.dump({'vectors': {'bite_rate': 0.9, 'wing_span': 3}}, f)
        config = load_config(config_path)
        assert config.vectors.bite_rate == 0.9
        assert not hasattr(config.vectors, 'wing_span')

    def test_missing_base_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_values_raise_on_load(self, tmp_path):
        config_path = tmp_path / "bad.yaml"
        with open(config_path, 'w') as f:
            yaml.dump({'vectors': {'infection_efficiency': 1.5}}, f)
        with pytest.raises(ValueError, match="infection_efficiency"):
            load_config(config_path)

    def test_repo_config_loads(self):
        path = Path(__file__).resolve().parents[1] / "configs" / "dengue_town.yaml"
        config = load_config(path)
        assert len(config.disease.strains) == MAX_STRAINS


# ── validation tests ─────────────────────────────────────────────────

class TestValidateConfig:
    def test_negative_seed(self):
        config = SimulationConfig(simulation=SimulationSection(seed=-1))
        with pytest.raises(ValueError, match="seed"):
            validate_config(config)

    def test_negative_days(self):
        config = SimulationConfig(simulation=SimulationSection(n_days=-1))
        with pytest.raises(ValueError, match="n_days"):
            validate_config(config)

    @pytest.mark.parametrize("field_name", [
        'infection_efficiency', 'transmission_efficiency',
    ])
    @pytest.mark.parametrize("value", [-0.1, 1.01])
    def test_efficiency_out_of_range(self, field_name, value):
        config = SimulationConfig(vectors=VectorSection(**{field_name: value}))
        with pytest.raises(ValueError, match=field_name):
            validate_config(config)

    def test_efficiency_bounds_accepted(self):
        config = SimulationConfig(vectors=VectorSection(
            infection_efficiency=0.0, transmission_efficiency=1.0,
        ))
        validate_config(config)

    def test_negative_bite_rate(self):
        config = SimulationConfig(vectors=VectorSection(bite_rate=-0.5))
        with pytest.raises(ValueError, match="bite_rate"):
            validate_config(config)

    def test_zero_bite_rate_ok(self):
        validate_config(SimulationConfig(vectors=VectorSection(bite_rate=0.0)))

    def test_nonpositive_incubation(self):
        config = SimulationConfig(vectors=VectorSection(incubation_period=0.0))
        with pytest.raises(ValueError, match="incubation_period"):
            validate_config(config)

    def test_no_strains(self):
        config = SimulationConfig(disease=DiseaseSection(strains=[]))
        with pytest.raises(ValueError, match="at least one"):
            validate_config(config)

    def test_too_many_strains(self):
        strains = [StrainSection(name=f"S{i}") for i in range(MAX_STRAINS + 1)]
        config = SimulationConfig(disease=DiseaseSection(strains=strains))
        with pytest.raises(ValueError, match="at most"):
            validate_config(config)

    def test_duplicate_strain_names(self):
        strains = [StrainSection(name="A"), StrainSection(name="A")]
        config = SimulationConfig(disease=DiseaseSection(strains=strains))
        with pytest.raises(ValueError, match="unique"):
            validate_config(config)

    def test_negative_transmissibility(self):
        strains = [StrainSection(name="A", transmissibility=-1.0)]
        config = SimulationConfig(disease=DiseaseSection(strains=strains))
        with pytest.raises(ValueError, match="transmissibility"):
            validate_config(config)

    def test_zero_transmissibility_ok(self):
        strains = [StrainSection(name="A", transmissibility=0.0)]
        validate_config(SimulationConfig(disease=DiseaseSection(strains=strains)))

    def test_latent_period_positive(self):
        config = SimulationConfig(disease=DiseaseSection(latent_period=0))
        with pytest.raises(ValueError, match="latent_period"):
            validate_config(config)

    def test_infectious_period_positive(self):
        config = SimulationConfig(disease=DiseaseSection(infectious_period=0))
        with pytest.raises(ValueError, match="infectious_period"):
            validate_config(config)
