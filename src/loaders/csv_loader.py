# csv_loader.py

import os
import pandas as pd
from core.base_loader import BaseLoader

class CSVLoader(BaseLoader):
    def __init__(self, config_path):
        super().__init__(config_path)
        dcfg = self.config.get("data", {})
        if "csv_file" not in dcfg:
            raise KeyError("Missing 'csv_file' in data config.")

        self.csv_file = dcfg["csv_file"]
        self.x_column = dcfg.get("x_column", "x")
        self.y_column = dcfg.get("y_column", "y")
        self.value_column = dcfg.get("value_column", "value")
        self.sep = dcfg.get("sep", ",")

    def get_observations(self):
        """
        Reads (x, y, value) rows from the configured CSV file, dropping rows with missing values.
        """
        df = pd.read_csv(self.csv_file, sep=self.sep)

        columns = [self.x_column, self.y_column, self.value_column]
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise KeyError(f"Columns {missing} not found in {os.path.basename(self.csv_file)}.")

        df = df[columns].apply(pd.to_numeric, errors="coerce")
        n_before = len(df)
        df = df.dropna().astype(float)
        dropped = n_before - len(df)
        if dropped:
            print(f"⚠️ Dropped {dropped} rows with missing values from {os.path.basename(self.csv_file)}.")

        if df.empty:
            print(f"No valid observations in {os.path.basename(self.csv_file)}.")
            return []

        self._report(os.path.basename(self.csv_file), df[self.value_column].values)

        return list(df.itertuples(index=False, name=None))
