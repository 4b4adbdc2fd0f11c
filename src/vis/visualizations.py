# visualizations.py

import os
import matplotlib.pyplot as plt
import numpy as np
import yaml

from core.variogram_math import spherical_curve

class PlotConfig:
    def __init__(self, path=None):
        self.cfg = self._load_yaml_or_default(path)

    def _load_yaml_or_default(self, path):
        default = {
            "save_plots": False,
            "show_plots": True,
            "plots_directory": "./plots",
            "model_curve": {
                "figure_size": [8, 5],
                "n_points": 200,
                "extend_factor": 5.0 / 3.0,  # x-axis reaches this multiple of the range
                "color": "black",
                "label": "Spherical model",
                "sill_color": "tab:red",
                "nugget_color": "tab:blue",
                "range_color": "tab:green",
                "xlabel": "Distance (h)",
                "ylabel": "Semivariance γ(h)",
                "title": "Spherical Semivariogram",
                "annotate": True,
                "legend": True,
            },
            "variogram": {
                "figure_size": [8, 5],
                "color": "blue",
                "label": "Empirical Variogram",
                "model_color": "red",
                "model_label": "Fitted spherical model",
                "n_points": 200,
                "xlabel": "Distance",
                "ylabel": "Semi-variance",
                "title_prefix": "Empirical Variogram",
                "legend": True,
                "show_pair_counts": False,
                "min_value": None,   # y-axis lower bound
                "max_value": None,   # y-axis upper bound
                "ylog": False,       # log scale on y-axis
            },
        }

        if path and os.path.exists(path):
            try:
                with open(path, "r") as f:
                    cfg = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                print(f"⚠️ Could not read plot config {path}: {e}; using defaults.")
                cfg = {}
            for k, v in default.items():
                if k in cfg and isinstance(cfg[k], dict) and isinstance(v, dict):
                    merged = v.copy()
                    merged.update(cfg[k])
                    default[k] = merged
                elif k in cfg:
                    default[k] = cfg[k]
        return default

    def __getitem__(self, item):
        return self.cfg.get(item, {})


def _finish_figure(fig, plot_cfg, fname):
    """Save and/or show a figure created by a plotter, per the global flags."""
    save_plots = plot_cfg.cfg.get("save_plots", False)
    show_plots = plot_cfg.cfg.get("show_plots", True)
    plots_dir = plot_cfg.cfg.get("plots_directory", "./plots")
    path = None
    if save_plots:
        os.makedirs(plots_dir, exist_ok=True)
        path = os.path.join(plots_dir, fname)
        fig.savefig(path, dpi=300, bbox_inches="tight")
    if show_plots:
        plt.show()
    else:
        plt.close(fig)
    return path


class ModelCurvePlotter:
    """
    Draws a theoretical spherical variogram with its sill, nugget and range
    marked, the way the parameters are usually introduced.
    """

    def __init__(self, params, plot_config_path=None):
        self.params = params
        self.plot_cfg = PlotConfig(plot_config_path)
        self.config = self.plot_cfg["model_curve"]

    def curve(self, max_distance=None):
        """Returns (distances, semivariances) for the plotted line."""
        if max_distance is None:
            max_distance = self.params.range * self.config.get("extend_factor", 5.0 / 3.0)
        distances = np.linspace(0, max_distance, int(self.config.get("n_points", 200)))
        return distances, np.asarray(spherical_curve(distances, self.params))

    def plot(self, ax=None, max_distance=None):
        distances, gamma = self.curve(max_distance)
        p = self.params

        created_fig = False
        if ax is None:
            fig = plt.figure(figsize=self.config.get("figure_size", [8, 5]))
            ax = fig.add_subplot(111)
            created_fig = True
        else:
            fig = ax.figure

        ax.plot(distances, gamma, color=self.config.get("color", "black"),
                label=self.config.get("label", "Spherical model"))
        ax.axhline(p.sill, color=self.config.get("sill_color", "tab:red"), linestyle="--",
                   label=f"Sill = {p.sill:g}")
        ax.axhline(p.nugget, color=self.config.get("nugget_color", "tab:blue"), linestyle="--",
                   label=f"Nugget = {p.nugget:g}")
        ax.axvline(p.range, color=self.config.get("range_color", "tab:green"), linestyle=":",
                   label=f"Range = {p.range:g}")

        if self.config.get("annotate", True):
            ax.annotate("Partial sill", xy=(p.range, (p.sill + p.nugget) / 2),
                        xytext=(p.range * 1.05, (p.sill + p.nugget) / 2))
            ax.annotate("", xy=(p.range * 1.02, p.sill), xytext=(p.range * 1.02, p.nugget),
                        arrowprops={"arrowstyle": "<->"})

        ax.set_xlim(left=0)
        ax.set_ylim(bottom=0, top=p.sill * 1.15 if p.sill > 0 else None)
        ax.set_xlabel(self.config.get("xlabel", "Distance (h)"))
        ax.set_ylabel(self.config.get("ylabel", "Semivariance γ(h)"))
        ax.set_title(self.config.get("title", "Spherical Semivariogram"))

        if self.config.get("legend", True):
            ax.legend(loc="lower right")

        if created_fig:
            return _finish_figure(fig, self.plot_cfg, "spherical_model.png")
        return None


class VariogramPlotter:
    def __init__(self, variogram_obj):
        self.variogram = variogram_obj
        self.plot_cfg = PlotConfig(getattr(self.variogram, "plot_config_path", None))
        self.config = self.plot_cfg["variogram"]

    def plot(self, ax=None):
        if not self.variogram.semivariogram_ready():
            raise RuntimeError(
                "Semivariogram not computed. Call `variogram.compute_semivariogram()` before plotting."
            )

        bin_centers, semi_variance = self.variogram._semivar_cache[:2]
        params = getattr(self.variogram, "params", None)
        unit = getattr(self.variogram, "distance_unit", None)

        created_fig = False
        if ax is None:
            fig = plt.figure(figsize=self.config.get("figure_size", [8, 5]))
            ax = fig.add_subplot(111)
            created_fig = True
        else:
            fig = ax.figure

        ax.scatter(
            bin_centers, semi_variance,
            c=self.config.get("color", "blue"),
            label=self.config.get("label", "Empirical Variogram"),
        )

        if self.config.get("show_pair_counts", False) and len(self.variogram._semivar_cache) > 2:
            for x, y, n in zip(bin_centers, semi_variance, self.variogram._semivar_cache[2]):
                ax.annotate(f"{int(n)}", xy=(x, y), xytext=(0, 5),
                            textcoords="offset points", ha="center", fontsize=7)

        if params is not None:
            h = np.linspace(0, np.max(bin_centers), int(self.config.get("n_points", 200)))
            ax.plot(
                h, spherical_curve(h, params),
                color=self.config.get("model_color", "red"),
                label=self.config.get("model_label", "Fitted spherical model"),
            )

        xlabel = self.config.get("xlabel", "Distance")
        if unit:
            xlabel = f"{xlabel} ({unit})"
        ax.set_xlabel(xlabel)
        ax.set_ylabel(self.config.get("ylabel", "Semi-variance"))

        title_prefix = self.config.get("title_prefix", "Empirical Variogram")
        ax.set_title(f"{title_prefix} - {getattr(self.variogram, 'name', 'sample')}")

        # Axis limits / scale
        ymin_cfg = self.config.get("min_value", None)
        ymax_cfg = self.config.get("max_value", None)
        if self.config.get("ylog", False):
            ax.set_ylim(bottom=ymin_cfg if ymin_cfg is not None else 1, top=ymax_cfg)
            ax.set_yscale("log")
        else:
            if ymin_cfg is not None or ymax_cfg is not None:
                ax.set_ylim(bottom=ymin_cfg, top=ymax_cfg)

        if self.config.get("legend", True):
            ax.legend(loc="lower right")

        # Only save/show if we created the figure here
        if created_fig:
            fname = f"variogram_{getattr(self.variogram, 'name', 'sample')}.png"
            return _finish_figure(fig, self.plot_cfg, fname)
        return None
