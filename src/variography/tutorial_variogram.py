# tutorial_variogram.py

from __future__ import annotations

from core.base_variogram import BaseVariogram
from vis.visualizations import VariogramPlotter


class TutorialVariogram(BaseVariogram):
    """
    Thin wrapper around BaseVariogram for the tutorial sample data.
    Delegates all plotting to vis.visualizations.
    """

    def __init__(self, data, config_path, name="sample", plot_config_path=None):
        super().__init__(data, config_path, name=name)
        self.plot_config_path = plot_config_path or self.config.get("plot_config")
        self.variogram_plotter = VariogramPlotter(self)

    # --- Plotting API ----------------------------------------------------
    def plot_variogram(self, ax=None):
        return self.variogram_plotter.plot(ax=ax)
