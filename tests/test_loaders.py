import numpy as np
import pytest

from conftest import write_config
from loaders.csv_loader import CSVLoader
from loaders.synthetic_loader import SyntheticLoader


def _write_csv(path, text):
    path.write_text(text)
    return str(path)


class TestCSVLoader:
    def test_reads_configured_columns(self, tmp_path):
        csv = _write_csv(tmp_path / "obs.csv", "east,north,zinc,site\n0,0,1.5,a\n1,0,2.5,b\n0,1,3.0,c\n")
        cfg = write_config(tmp_path / "cfg.yaml", data={
            "csv_file": csv, "x_column": "east", "y_column": "north", "value_column": "zinc",
        })
        data = CSVLoader(cfg).get_observations()
        assert data == [(0.0, 0.0, 1.5), (1.0, 0.0, 2.5), (0.0, 1.0, 3.0)]

    def test_drops_incomplete_rows(self, tmp_path, capsys):
        csv = _write_csv(tmp_path / "obs.csv", "x,y,value\n0,0,1\n1,,2\n2,2,\n3,3,abc\n4,4,5\n")
        cfg = write_config(tmp_path / "cfg.yaml", data={"csv_file": csv})
        data = CSVLoader(cfg).get_observations()
        assert data == [(0.0, 0.0, 1.0), (4.0, 4.0, 5.0)]
        assert "Dropped 3 rows" in capsys.readouterr().out

    def test_missing_column(self, tmp_path):
        csv = _write_csv(tmp_path / "obs.csv", "x,y,z\n0,0,1\n")
        cfg = write_config(tmp_path / "cfg.yaml", data={"csv_file": csv})
        with pytest.raises(KeyError):
            CSVLoader(cfg).get_observations()

    def test_missing_csv_file_key(self, tmp_path):
        cfg = write_config(tmp_path / "cfg.yaml", data={"source": "csv"})
        with pytest.raises(KeyError):
            CSVLoader(cfg)

    def test_empty_after_cleaning(self, tmp_path):
        csv = _write_csv(tmp_path / "obs.csv", "x,y,value\n0,0,\n")
        cfg = write_config(tmp_path / "cfg.yaml", data={"csv_file": csv})
        assert CSVLoader(cfg).get_observations() == []


class TestSyntheticLoader:
    def test_shape_and_extent(self, config_path):
        data = np.array(SyntheticLoader(config_path).get_observations())
        assert data.shape == (120, 3)
        assert data[:, :2].min() >= 0
        assert data[:, :2].max() <= 100

    def test_same_seed_same_sample(self, config_path):
        first = SyntheticLoader(config_path).get_observations()
        second = SyntheticLoader(config_path).get_observations()
        assert first == second

    def test_different_seed_differs(self, tmp_path, config_path):
        other = write_config(tmp_path / "other.yaml", synthetic={"seed": 8})
        assert SyntheticLoader(config_path).get_observations() != SyntheticLoader(other).get_observations()

    def test_sample_variance_near_sill(self, tmp_path):
        cfg = write_config(tmp_path / "cfg.yaml", synthetic={"n_points": 300, "range": 5.0})
        values = np.array(SyntheticLoader(cfg).get_observations())[:, 2]
        # short range relative to the extent -> nearly independent draws
        assert 80 < np.var(values) < 260

    def test_rejects_invalid_model(self, tmp_path):
        cfg = write_config(tmp_path / "cfg.yaml", synthetic={"nugget": 200.0})
        with pytest.raises(ValueError):
            SyntheticLoader(cfg)

    def test_rejects_tiny_sample(self, tmp_path):
        cfg = write_config(tmp_path / "cfg.yaml", synthetic={"n_points": 2})
        with pytest.raises(ValueError):
            SyntheticLoader(cfg)
