# base_variogram.py

import os
import numpy as np
import pandas as pd
import yaml
import scipy.spatial.distance as dist
from scipy.optimize import curve_fit
from pyproj import Geod
from pykrige.ok import OrdinaryKriging

from core.variogram_math import (
    VariogramParameters,
    derived_statistics,
    spatial_dependence,
    spherical_curve,
)

# Approximate conversion (1° ≈ 111 km)
KM_PER_DEGREE = 111.0

FIT_METHODS = ("least_squares", "pykrige")
COORDINATE_TYPES = ("euclidean", "geographic")


class BaseVariogram:
    def __init__(self, data, config_path, name="sample"):
        if len(data) == 0:
            raise ValueError("Input data is empty.")

        self.data = np.array(data, dtype=float)
        if self.data.ndim != 2 or self.data.shape[1] < 3:
            raise ValueError("Input data must be (x, y, value) rows.")
        if self.data.shape[0] < 3:
            raise ValueError("At least 3 observations are needed for a variogram.")

        self.xs = self.data[:, 0]
        self.ys = self.data[:, 1]
        self.values = self.data[:, 2]
        self.name = name
        self.geod = Geod(ellps="WGS84")

        # Load variogram config
        with open(config_path, "r") as f:
            self.config = yaml.safe_load(f) or {}

        vcfg = self.config.get("variogram", {})

        # Validate config entries
        required_keys = ["nlags", "coordinates_type", "fit_method"]
        for key in required_keys:
            if key not in vcfg:
                raise KeyError(f"Missing '{key}' in variogram config.")

        self.nlags = int(vcfg["nlags"])
        self.coordinates_type = vcfg["coordinates_type"]
        self.fit_method = vcfg["fit_method"]
        self.initial_guess = vcfg.get("initial_guess") or {}
        self.weight = vcfg.get("weight", True)

        if self.nlags < 1:
            raise ValueError("nlags must be at least 1.")
        if self.coordinates_type not in COORDINATE_TYPES:
            raise ValueError(f"Unknown coordinates_type '{self.coordinates_type}'; expected one of {COORDINATE_TYPES}.")
        if self.fit_method not in FIT_METHODS:
            raise ValueError(f"Unknown fit_method '{self.fit_method}'; expected one of {FIT_METHODS}.")

        self.distance_unit = "km" if self.coordinates_type == "geographic" else "units"

        # Placeholders for results
        self._pair_distances = None
        self._semivar_cache = None
        self.params = None

    # --- Distances -------------------------------------------------------
    def pair_distances(self):
        """
        Condensed pairwise distances (same order as scipy's pdist).
        Geographic coordinates use WGS84 geodesics in km.
        """
        if self._pair_distances is not None:
            return self._pair_distances

        if self.coordinates_type == "geographic":
            i, j = np.triu_indices(len(self.xs), k=1)
            _, _, distance_m = self.geod.inv(self.xs[i], self.ys[i], self.xs[j], self.ys[j])
            self._pair_distances = np.asarray(distance_m) / 1000
        else:
            self._pair_distances = dist.pdist(np.column_stack([self.xs, self.ys]))

        return self._pair_distances

    def max_distance(self):
        return float(np.max(self.pair_distances()))

    # --- Empirical semivariogram -----------------------------------------
    def compute_semivariogram(self):
        """
        Bins half squared differences of all pairs into nlags equal-width
        bins from 0 to the largest pair distance. Empty bins are dropped.
        """
        distances = self.pair_distances()
        i, j = np.triu_indices(len(self.values), k=1)
        half_sq_diff = 0.5 * (self.values[i] - self.values[j]) ** 2

        bin_edges = np.linspace(0, np.max(distances), self.nlags + 1)
        bin_indices = np.clip(np.digitize(distances, bin_edges) - 1, 0, self.nlags - 1)
        counts = np.bincount(bin_indices, minlength=self.nlags)
        sums = np.bincount(bin_indices, weights=half_sq_diff, minlength=self.nlags)
        bin_centers = (bin_edges[:-1] + bin_edges[1:]) / 2

        keep = counts > 0
        semi_variance = sums[keep] / counts[keep]
        self._semivar_cache = (bin_centers[keep], semi_variance, counts[keep])
        return self._semivar_cache

    def semivariogram_ready(self):
        return self._semivar_cache is not None

    # --- Model fitting ---------------------------------------------------
    def fit_model(self):
        """
        Fits a spherical model and stores it in self.params.
        """
        print(f"Fitting spherical variogram using {self.fit_method}...")

        if self.fit_method == "pykrige":
            self.params = self._fit_pykrige()
        else:
            self.params = self._fit_least_squares()

        return self.params

    def _initial_guess(self, lags, semi_variance):
        sill = float(self.initial_guess.get("sill", np.max(semi_variance)))
        nugget = float(self.initial_guess.get("nugget", np.min(semi_variance)))
        rng = float(self.initial_guess.get("range", np.max(lags) / 2))
        nugget = min(max(nugget, 0.0), sill)
        return nugget, sill - nugget, rng

    def _fit_least_squares(self):
        if not self.semivariogram_ready():
            self.compute_semivariogram()

        lags, semi_variance, counts = self._semivar_cache
        if len(lags) < 3:
            raise ValueError("Need at least 3 non-empty lag bins to fit a spherical model.")

        def model(h, nugget, psill, rng):
            params = VariogramParameters(nugget=nugget, sill=nugget + psill, range=rng)
            return np.asarray(spherical_curve(h, params))

        max_lag = float(np.max(lags))
        max_gamma = float(np.max(semi_variance))
        if max_gamma <= 0:
            raise ValueError("Sample values have no spatial variance to fit.")

        p0 = self._initial_guess(lags, semi_variance)
        lower = [0.0, 0.0, 1e-6 * max_lag]
        upper = [max(max_gamma, p0[0]) * 2, max(max_gamma, p0[1]) * 2, max(max_lag, p0[2]) * 2]
        p0 = np.clip(p0, lower, upper)

        # More pairs -> smaller sigma -> larger weight
        sigma = 1.0 / np.sqrt(counts) if self.weight else None

        popt, _ = curve_fit(
            model, lags, semi_variance,
            p0=p0, bounds=(lower, upper), sigma=sigma, maxfev=10000,
        )
        nugget, psill, rng = (float(p) for p in popt)
        return VariogramParameters(nugget=nugget, sill=nugget + psill, range=rng)

    def _fit_pykrige(self):
        ok = OrdinaryKriging(
            self.xs, self.ys, self.values,
            variogram_model="spherical",
            nlags=self.nlags,
            weight=self.weight,
            coordinates_type=self.coordinates_type,
        )
        psill, rng, nugget = (float(p) for p in ok.variogram_model_parameters)

        if self.coordinates_type == "geographic":
            rng = rng * KM_PER_DEGREE

        nugget = max(nugget, 0.0)
        return VariogramParameters(nugget=nugget, sill=nugget + max(psill, 0.0), range=rng)

    def fitted_curve(self, distances):
        if self.params is None:
            raise RuntimeError("fit_model() must be run before evaluating the fitted curve.")
        return spherical_curve(distances, self.params)

    # --- Statistics ------------------------------------------------------
    def derived_statistics(self):
        if self.params is None:
            raise RuntimeError("fit_model() must be run before computing derived statistics.")
        return derived_statistics(self.params, self.max_distance())

    def summarize(self):
        stats = self.derived_statistics()
        p = self.params
        print(f"Fitted spherical variogram for {self.name} ({self.fit_method}):")
        print(f"  - Nugget: {p.nugget:.4f}")
        print(f"  - Sill: {p.sill:.4f}")
        print(f"  - Range: {p.range:.4f} {self.distance_unit}")
        print(f"  - Max distance: {self.max_distance():.4f} {self.distance_unit}")
        print(f"  - Sill - Nugget: {stats.structured_variance:.4f}")
        print(f"  - Relative nugget effect: {stats.relative_nugget_effect:.4f}")
        print(f"  - Range / max distance: {stats.range_to_distance_ratio:.4f}")
        print(f"  - Partial sill: {stats.partial_sill:.4f}")
        print(f"  - Proportion structured: {stats.proportion_structured:.4f}")
        print(f"  - Spatial dependence: {spatial_dependence(p)}")
        return stats

    # --- Exports ---------------------------------------------------------
    def export_all(self):
        """
        Writes the empirical/fitted variogram table (CSV) and the model
        summary (YAML) to exports.directory. Returns (csv_path, yaml_path).
        """
        if not self.semivariogram_ready():
            raise RuntimeError("compute_semivariogram() must be run before exporting.")
        if self.params is None:
            raise RuntimeError("fit_model() must be run before exporting.")

        out_dir = self.config.get("exports", {}).get("directory", "./exports")
        os.makedirs(out_dir, exist_ok=True)

        lags, semi_variance, counts = self._semivar_cache
        vario_path = os.path.join(out_dir, f"variogram_{self.name}.csv")
        pd.DataFrame({
            "bin_center": lags,
            "semivariance": semi_variance,
            "pair_count": counts,
            "model": self.fitted_curve(lags),
        }).to_csv(vario_path, index=False)

        stats = self.derived_statistics()
        model_path = os.path.join(out_dir, f"model_{self.name}.yaml")
        summary = {
            "name": self.name,
            "model": "spherical",
            "fit_method": self.fit_method,
            "coordinates_type": self.coordinates_type,
            "distance_unit": self.distance_unit,
            "max_distance": self.max_distance(),
            "parameters": {
                "nugget": self.params.nugget,
                "sill": self.params.sill,
                "range": self.params.range,
            },
            "derived_statistics": {k: float(v) for k, v in stats.as_dict().items()},
            "spatial_dependence": spatial_dependence(self.params),
        }
        with open(model_path, "w") as f:
            yaml.safe_dump(summary, f, sort_keys=False)

        return vario_path, model_path

    def plot_variogram(self):
        raise NotImplementedError("Use visualization module to plot variogram.")
