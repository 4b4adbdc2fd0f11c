# base_loader.py

from abc import ABC, abstractmethod
import numpy as np
import yaml

class BaseLoader(ABC):
    def __init__(self, config_path):
        self.config = self._load_config(config_path)

    def _load_config(self, path):
        with open(path, "r") as f:
            return yaml.safe_load(f) or {}

    @abstractmethod
    def get_observations(self):
        """
        Retrieve the sample dataset.
        Should return a list of tuples: (x, y, value)
        """
        pass

    def _report(self, label, values):
        values = np.asarray(values, dtype=float)
        print(f"Summary Statistics for {label}:")
        print(f"  - Observations: {len(values)}")
        print(f"  - Min: {np.min(values):.2f}")
        print(f"  - Max: {np.max(values):.2f}")
        print(f"  - Mean: {np.mean(values):.2f}")
        print(f"  - Std: {np.std(values):.2f}")
