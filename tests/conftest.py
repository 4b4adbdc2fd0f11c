import matplotlib
matplotlib.use("Agg")

import pytest
import yaml


def write_config(path, **overrides):
    cfg = {
        "data": {"source": "synthetic", "name": "synthetic"},
        "synthetic": {
            "n_points": 120,
            "extent": 100.0,
            "mean": 50.0,
            "nugget": 15.0,
            "sill": 160.0,
            "range": 30.0,
            "seed": 7,
        },
        "variogram": {
            "nlags": 12,
            "coordinates_type": "euclidean",
            "fit_method": "least_squares",
            "weight": True,
            "initial_guess": {"nugget": 10.0, "sill": 150.0, "range": 25.0},
        },
        "demo": {"nugget": 15.0, "sill": 160.0, "range": 30.0, "max_distance": 100.0},
        "exports": {"directory": str(path.parent / "exports")},
    }
    for section, values in overrides.items():
        if isinstance(values, dict) and isinstance(cfg.get(section), dict):
            cfg[section] = {**cfg[section], **values}
        else:
            cfg[section] = values
    with open(path, "w") as f:
        yaml.safe_dump(cfg, f)
    return str(path)


@pytest.fixture
def config_path(tmp_path):
    return write_config(tmp_path / "vario_tutorial.yaml")


@pytest.fixture
def plot_config_path(tmp_path):
    path = tmp_path / "plot_config.yaml"
    with open(path, "w") as f:
        yaml.safe_dump({
            "save_plots": True,
            "show_plots": False,
            "plots_directory": str(tmp_path / "plots"),
        }, f)
    return str(path)
