import csv
import json
import logging

import pytest
import yaml

from bpsim.utils import load_config, parse_trace_path, save_results, setup_logging


class TestLoadConfig:

    def test_loads_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("predictor: bimodal\nM2: 6\n")
        assert load_config(path) == {'predictor': 'bimodal', 'M2': 6}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == {}

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- bimodal\n- 6\n")
        with pytest.raises(ValueError, match='must hold a mapping'):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")


class TestSaveResults:

    RESULTS = {
        'trace_name': 'gcc_trace.txt',
        'mispredictions': 4,
        'tables': {'bimodal': [2, 0, 3, 1]},
    }

    def test_json(self, tmp_path):
        paths = save_results(self.RESULTS, tmp_path, name="run")
        assert list(paths) == ['json']
        assert json.loads(paths['json'].read_text()) == self.RESULTS

    def test_yaml(self, tmp_path):
        paths = save_results(self.RESULTS, tmp_path, formats=('yaml',))
        assert yaml.safe_load(paths['yaml'].read_text()) == self.RESULTS

    def test_csv_flattens_tables(self, tmp_path):
        paths = save_results(self.RESULTS, tmp_path, formats=('csv',))
        with open(paths['csv'], newline='') as f:
            rows = list(csv.reader(f))
        assert ['mispredictions', '4'] in rows
        assert ['tables.bimodal.2', '3'] in rows

    def test_creates_output_dir(self, tmp_path):
        out_dir = tmp_path / "a" / "b"
        save_results(self.RESULTS, out_dir)
        assert out_dir.is_dir()


class TestSetupLogging:

    def test_level_and_handlers(self):
        logger = setup_logging("debug")
        assert logger.name == "bpsim"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeated_setup_replaces_handlers(self, tmp_path):
        setup_logging("INFO", tmp_path / "run.log")
        logger = setup_logging("INFO")
        assert len(logger.handlers) == 1

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        setup_logging("INFO", log_file)
        logging.getLogger("bpsim.simulation").info("hello")
        assert "bpsim.simulation - INFO - hello" in log_file.read_text()


class TestParseTracePath:

    def test_existing_path(self, write_trace):
        path = write_trace(["4 t"])
        assert parse_trace_path(str(path)) == path

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError, match='Unable to open file'):
            parse_trace_path(str(tmp_path / "nope.txt"))
