#!/usr/bin/env python3
"""
Rebuild fitted-variogram plots from saved exports.

- Looks in exports directory for BOTH:
    variogram_<name>.csv
    model_<name>.yaml
- Draws the empirical variogram with the fitted spherical model via
  visualizations.VariogramPlotter.

Usage examples:
  python Scripts/replot_from_exports.py --config configs/vario_tutorial.yaml
  python Scripts/replot_from_exports.py --config configs/vario_tutorial.yaml \
      --save-plots --no-show
  python Scripts/replot_from_exports.py --config configs/vario_tutorial.yaml \
      --only synthetic
"""

from __future__ import annotations

import argparse
import glob
import os
from typing import Optional, Tuple, List, Dict

import numpy as np
import yaml

# Project imports (works if installed with `pip install -e .`)
from core.variogram_math import VariogramParameters
from vis.visualizations import VariogramPlotter, PlotConfig

VARIO_PREFIX = "variogram_"
MODEL_PREFIX = "model_"

# ----------------------- CLI -----------------------

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Rebuild variogram plots from saved exports.")
    p.add_argument("--config", required=True, help="Path to YAML (e.g., configs/vario_tutorial.yaml)")
    p.add_argument("--exports-dir", default=None,
                   help="Override exports directory (defaults to exports.directory in YAML).")
    p.add_argument("--plot-config", default=None,
                   help="Path to plot_config.yaml (defaults to config['plot_config']).")
    p.add_argument("--only", nargs="*", default=None,
                   help="Specific export names to render.")

    # Optional overrides for plotting behavior
    p.add_argument("--save-plots", action="store_true", help="Force PlotConfig.save_plots=True")
    p.add_argument("--no-show", action="store_true", help="Force PlotConfig.show_plots=False")
    return p.parse_args(argv)


# ----------------------- Helpers -----------------------

def _name_from(path: str, prefix: str) -> str:
    base = os.path.splitext(os.path.basename(path))[0]
    return base[len(prefix):]


def list_export_pairs(exports_dir: str) -> Dict[str, Dict[str, str]]:
    """
    Return {name: {"vario": path_csv, "model": path_yaml}}
    (name appears only if both files exist)
    """
    seen: Dict[str, Dict[str, str]] = {}

    for csv in glob.glob(os.path.join(exports_dir, f"{VARIO_PREFIX}*.csv")):
        seen.setdefault(_name_from(csv, VARIO_PREFIX), {})["vario"] = csv

    for yml in glob.glob(os.path.join(exports_dir, f"{MODEL_PREFIX}*.yaml")):
        seen.setdefault(_name_from(yml, MODEL_PREFIX), {})["model"] = yml

    # Keep only names that have both
    return {n: v for n, v in seen.items() if "vario" in v and "model" in v}


class RestoredVariogram:
    """
    Minimal object that satisfies VariogramPlotter expectations:
      - name, distance_unit, plot_config_path
      - params (fitted VariogramParameters)
      - semivariogram cache (bin centers, semivariance, pair counts)
    """
    def __init__(self, name: str, plot_cfg_path: Optional[str]):
        self.name = name
        self.plot_config_path = plot_cfg_path
        self.distance_unit: Optional[str] = None
        self.params: Optional[VariogramParameters] = None
        self._semivar_cache: Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]] = None

    def semivariogram_ready(self) -> bool:
        return self._semivar_cache is not None


def load_variogram_csv(csv_path: str) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    arr = np.genfromtxt(csv_path, delimiter=",", names=True)
    return (np.atleast_1d(arr["bin_center"]),
            np.atleast_1d(arr["semivariance"]),
            np.atleast_1d(arr["pair_count"]))


def load_model_yaml(yaml_path: str) -> Tuple[VariogramParameters, Optional[str]]:
    with open(yaml_path, "r") as f:
        summary = yaml.safe_load(f) or {}
    p = summary["parameters"]
    params = VariogramParameters(nugget=float(p["nugget"]), sill=float(p["sill"]), range=float(p["range"]))
    return params, summary.get("distance_unit")


# ----------------------- Main -----------------------

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    with open(args.config, "r") as f:
        cfg = yaml.safe_load(f) or {}

    exports_dir = args.exports_dir or (cfg.get("exports", {}) or {}).get("directory")
    if not exports_dir:
        raise SystemExit("No exports directory provided (--exports-dir) and none found in config['exports']['directory'].")

    plot_cfg_path = args.plot_config or cfg.get("plot_config")

    pairs = list_export_pairs(exports_dir)
    if not pairs:
        print(f"No complete export pairs (variogram+model) found in {exports_dir}")
        return 0

    names = sorted(pairs.keys())
    if args.only:
        names = [n for n in names if n in set(args.only)]
    if not names:
        print("No exports match the filters.")
        return 0

    # Prepare a PlotConfig and optionally override save/show
    pc = PlotConfig(plot_cfg_path)
    if args.save_plots:
        pc.cfg["save_plots"] = True
    if args.no_show:
        pc.cfg["show_plots"] = False

    for name in names:
        try:
            lags, semi_var, counts = load_variogram_csv(pairs[name]["vario"])
            params, unit = load_model_yaml(pairs[name]["model"])
        except (OSError, KeyError, ValueError) as e:
            print(f"[{name}] failed to load exports: {e}")
            continue

        rv = RestoredVariogram(name, plot_cfg_path)
        rv._semivar_cache = (lags, semi_var, counts)
        rv.params = params
        rv.distance_unit = unit

        vp = VariogramPlotter(rv)
        vp.plot_cfg = pc
        vp.config = pc["variogram"]
        vp.plot()

    print("Done.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
