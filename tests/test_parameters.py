import json
from pathlib import Path

import pytest

from icosa_lcd.parameters import (
    GeneratorParameters,
    apply_overrides,
    load_json_config,
    load_parameters,
    parse_cli_overrides,
)

REPO_ROOT = Path(__file__).resolve().parents[1]

def test_defaults_validate():
    params = GeneratorParameters()
    params.validate()
    assert params.frequencies == [2, 3, 4, 5, 6, 7]
    assert params.tolerance_rad == 1e-11
    assert params.max_iterations == 200


@pytest.mark.parametrize(
    "field, value",
    [
        ("frequencies", [8]),
        ("frequencies", []),
        ("tolerance_rad", 0.0),
        ("max_iterations", 0),
        ("initial_step_deg", -1.0),
        ("off_digits", 0),
        ("base_name", ""),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValueError):
        GeneratorParameters.from_dict({field: value})


def test_dict_round_trip():
    params = GeneratorParameters(frequencies=[5], base_name="lcd", generate_manifest=True)
    assert GeneratorParameters.from_dict(params.to_dict()) == params


def test_unknown_keys_rejected():
    with pytest.raises(KeyError):
        GeneratorParameters.from_dict({"radius_m": 3.0})
    with pytest.raises(KeyError):
        apply_overrides(GeneratorParameters(), {"radius_m": 3.0})


def test_nested_sections_flattened(tmp_path):
    path = tmp_path / "run.json"
    path.write_text(
        json.dumps({"frequencies": [5], "solver": {"max_iterations": 50}, "output": {"off_digits": 6}}),
        encoding="utf-8",
    )
    data = load_json_config(path)
    assert data == {"frequencies": [5], "max_iterations": 50, "off_digits": 6}
    params = GeneratorParameters.from_dict(data)
    assert params.max_iterations == 50
    assert params.off_digits == 6


def test_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_json_config(tmp_path / "missing.json")
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_json_config(path)
    assert load_json_config(None) == {}


def test_project_default_config_matches_defaults():
    params = load_parameters(REPO_ROOT / "configs" / "base.json")
    assert params == GeneratorParameters()


def test_cli_overrides():
    overrides, ns = parse_cli_overrides(
        ["--frequency", "5", "--frequency", "2", "--manifest", "--digits", "6", "--bogus"]
    )
    assert overrides == {"frequencies": [2, 5], "generate_manifest": True, "off_digits": 6}
    assert ns.out_dir == "exports"
    assert ns.verbose is False


def test_cli_takes_precedence_over_json(tmp_path):
    path = tmp_path / "run.json"
    path.write_text(json.dumps({"base_name": "json", "solver": {"max_iterations": 20}}), encoding="utf-8")
    overrides, _ = parse_cli_overrides(["--base-name", "cli", "--tolerance", "1e-9"])
    params = load_parameters(path, overrides)
    assert params.base_name == "cli"
    assert params.tolerance_rad == 1e-9
    assert params.max_iterations == 20
