# synthetic_loader.py

import numpy as np
import scipy.spatial.distance as dist
from core.base_loader import BaseLoader
from core.variogram_math import VariogramParameters, spherical_curve

class SyntheticLoader(BaseLoader):
    """
    Draws a reproducible sample from a stationary field with a spherical
    covariance, so the fitted model can be compared with the true one.
    """

    def __init__(self, config_path):
        super().__init__(config_path)
        scfg = self.config.get("synthetic", {})

        self.n_points = int(scfg.get("n_points", 150))
        self.extent = float(scfg.get("extent", 100.0))
        self.mean = float(scfg.get("mean", 0.0))
        self.seed = scfg.get("seed", 42)
        self.params = VariogramParameters(
            nugget=float(scfg.get("nugget", 15.0)),
            sill=float(scfg.get("sill", 160.0)),
            range=float(scfg.get("range", 30.0)),
        )

        if self.n_points < 3:
            raise ValueError("synthetic.n_points must be at least 3.")

    def get_observations(self):
        rng = np.random.default_rng(self.seed)
        coords = rng.uniform(0.0, self.extent, size=(self.n_points, 2))

        # C(h) = sill - gamma(h); the nugget only appears on the diagonal
        lags = dist.pdist(coords)
        cov = self.params.sill - np.asarray(spherical_curve(lags, self.params))
        cov = dist.squareform(cov)
        np.fill_diagonal(cov, self.params.sill)

        values = rng.multivariate_normal(
            np.full(self.n_points, self.mean), cov, method="eigh"
        )

        self._report(f"synthetic sample (seed={self.seed})", values)

        return [(float(x), float(y), float(v)) for (x, y), v in zip(coords, values)]
