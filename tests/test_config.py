import json
from pathlib import Path

import pytest

from mvn_sampler.config import SamplerConfig, get_correlated_2d_config, load_config


def test_defaults():
    config = SamplerConfig()
    assert config.dim == 2
    assert config.covariance == [[1.0, 0.0], [0.0, 1.0]]
    assert config.seed is None
    assert config.dtype == "float64"


def test_values_are_coerced_to_float():
    config = SamplerConfig(mean=[1, 2], covariance=[[1, 0], [0, 1]])
    assert config.mean == [1.0, 2.0]
    assert all(isinstance(c, float) for row in config.covariance for c in row)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"num_samples": -1},
        {"seed": -5},
        {"tol": -1e-3},
        {"dtype": "float16"},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        SamplerConfig(**kwargs)


def test_unknown_keys_rejected():
    with pytest.raises(ValueError, match="Unknown config keys"):
        SamplerConfig.from_dict({"mean": [0.0], "covariance": [[1.0]], "samples": 3})


def test_save_and_load(tmp_path):
    path = tmp_path / "config.json"
    config = get_correlated_2d_config()
    config.save(path)
    loaded = load_config(path)
    assert loaded == config
    assert json.loads(path.read_text())["covariance"] == [[2.0, 1.0], [1.0, 2.0]]


def test_load_rejects_non_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ValueError):
        load_config(path)


def test_example_config_loads():
    path = Path(__file__).resolve().parent.parent / "configs" / "correlated_2d.json"
    config = load_config(path)
    assert config.mean == [5.0, -3.0]
    assert config.seed == 0


@pytest.mark.parametrize(
    "values",
    [
        {"seed": "3"},
        {"mean": [[1, 2]]},
        {"covariance": [1.0, 2.0]},
        {"num_samples": 2.5},
        {"tol": "small"},
        {"verbose": "yes"},
        {"output": 3},
    ],
)
def test_malformed_values_raise_value_error(values):
    with pytest.raises(ValueError):
        SamplerConfig.from_dict(values)
