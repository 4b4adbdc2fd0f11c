#!/usr/bin/env python3
import argparse
import sys
import yaml

# If installed with `pip install -e .`, these imports just work:
from core.variogram_math import VariogramParameters, derived_statistics, spatial_dependence
from loaders.csv_loader import CSVLoader
from loaders.synthetic_loader import SyntheticLoader
from variography.tutorial_variogram import TutorialVariogram
from vis.visualizations import ModelCurvePlotter

LOADERS = {
    "csv": CSVLoader,
    "synthetic": SyntheticLoader,
}

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Spherical variogram tutorial: demo model, fit a sample, report statistics.")
    p.add_argument("--config", required=True, help="Path to vario_tutorial.yaml")
    p.add_argument("--plot-config", default=None,
                   help="Optional override: path to plot_config.yaml (otherwise uses config['plot_config']).")
    p.add_argument("--source", choices=sorted(LOADERS), default=None,
                   help="Sample data source (otherwise uses config['data']['source'], default synthetic).")
    p.add_argument("--skip-demo", action="store_true", help="Do not draw the theoretical model demo plot.")
    p.add_argument("--save-plots", action="store_true", help="Force save_plots=True")
    p.add_argument("--no-show", action="store_true", help="Force show_plots=False")
    return p.parse_args(argv)

def _apply_overrides(plotter, args):
    if args.save_plots:
        plotter.plot_cfg.cfg["save_plots"] = True
    if args.no_show:
        plotter.plot_cfg.cfg["show_plots"] = False

def run_demo(cfg, plot_cfg_path, args):
    dcfg = cfg.get("demo", {})
    params = VariogramParameters(
        nugget=float(dcfg.get("nugget", 15.0)),
        sill=float(dcfg.get("sill", 160.0)),
        range=float(dcfg.get("range", 30.0)),
    )
    max_distance = float(dcfg.get("max_distance", 100.0))

    stats = derived_statistics(params, max_distance)
    print(f"Demo spherical model (nugget={params.nugget:g}, sill={params.sill:g}, range={params.range:g}):")
    for key, value in stats.as_dict().items():
        print(f"  - {key}: {value:.4f}")
    print(f"  - spatial_dependence: {spatial_dependence(params)}")

    plotter = ModelCurvePlotter(params, plot_cfg_path)
    _apply_overrides(plotter, args)
    plotter.plot(max_distance=dcfg.get("plot_distance"))

def main(argv=None):
    args = parse_args(argv)

    with open(args.config, "r") as f:
        cfg = yaml.safe_load(f) or {}

    plot_cfg_path = args.plot_config or cfg.get("plot_config")
    if plot_cfg_path is None:
        print("WARNING: No plot_config path provided; using plot defaults.")

    # 1) Theoretical model
    if not args.skip_demo:
        run_demo(cfg, plot_cfg_path, args)

    # 2) Load sample
    source = args.source or cfg.get("data", {}).get("source", "synthetic")
    if source not in LOADERS:
        raise ValueError(f"Unknown data source '{source}'; expected one of {sorted(LOADERS)}.")
    loader = LOADERS[source](args.config)
    data = loader.get_observations()
    if not data:
        print(f"[{source}] No data returned.")
        return 0

    # 3) Empirical variogram and fit
    name = cfg.get("data", {}).get("name", source)
    vario = TutorialVariogram(data, args.config, name=name, plot_config_path=plot_cfg_path)
    _apply_overrides(vario.variogram_plotter, args)

    vario.compute_semivariogram()
    vario.fit_model()
    vario.summarize()
    vario.plot_variogram()
    vario_path, model_path = vario.export_all()
    print("data exported to")
    print(vario_path)
    print(model_path)

    return 0

if __name__ == "__main__":
    sys.exit(main())
