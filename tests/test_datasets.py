"""Tests for dataset loading and RunConfig parsing."""

import json
import math

import pytest

from iconscope.exceptions import ConfigurationError
from iconscope.io.datasets import get_dataset, load_datasets
from iconscope.io.framebuffer import ArrayFramebuffer
from iconscope.runner import RenderLoop, RunConfig

RECORD = {
    "lambda": -2.08, "alpha": 1.0, "beta": -0.1, "gamma": 0.167,
    "n": 7, "extent": 3.0,
    "palette": [[0.0, 0, 0, 0], [1.0, 255, 255, 255]],
}


class TestRunConfigFromDict:
    def test_defaults_for_optional_keys(self):
        config = RunConfig.from_dict(RECORD)
        assert config.lambda_ == -2.08
        assert config.delta == 0.0
        assert config.omega == 0.0
        assert config.p == 1
        assert config.n == 7
        assert len(config.palette) == 2
        assert config.palette[1].r == 255.0

    def test_run_keys_and_overrides(self):
        record = dict(RECORD, max_hit=500, total_iterations=5e7)
        config = RunConfig.from_dict(record, tick_iterations=1234, max_hit=None)
        assert config.max_hit == 500
        assert config.total_iterations == 50_000_000
        assert config.tick_iterations == 1234

    def test_missing_keys(self):
        record = dict(RECORD)
        del record["gamma"]
        del record["palette"]
        with pytest.raises(ConfigurationError, match="gamma"):
            RunConfig.from_dict(record)

    def test_non_numeric_value(self):
        with pytest.raises(ConfigurationError):
            RunConfig.from_dict(dict(RECORD, alpha="lots"))

    def test_fractional_order(self):
        with pytest.raises(ConfigurationError):
            RunConfig.from_dict(dict(RECORD, n=4.5))

    def test_not_a_mapping(self):
        with pytest.raises(ConfigurationError):
            RunConfig.from_dict([1, 2, 3])

    def test_from_json(self):
        config = RunConfig.from_json(json.dumps(dict(RECORD, delta=0.2, p=3)))
        assert config.delta == 0.2
        assert config.p == 3

    def test_from_json_invalid(self):
        with pytest.raises(ConfigurationError):
            RunConfig.from_json("{not json")


class TestLoadDatasets:
    def test_bundled_presets_are_valid(self):
        datasets = load_datasets()
        assert len(datasets) >= 5
        for name in datasets:
            config = get_dataset(name)
            config.validate(100, 100)

    def test_bundled_presets_render_an_icon(self):
        for name in load_datasets():
            config = get_dataset(name, tick_iterations=10_000, total_iterations=10_000)
            loop = RenderLoop(ArrayFramebuffer(100, 100))
            loop.start(config)
            loop.tick()

            assert not loop.running()
            assert math.isfinite(abs(loop.z)), f"{name} diverged"
            assert loop.canvas.occupied > 20, f"{name} hit only {loop.canvas.occupied} cells"
            assert loop.canvas.total_hits > 5_000, f"{name} left the plotted square"

    def test_custom_file(self, tmp_path):
        path = tmp_path / "datasets.json"
        path.write_text(json.dumps({"mine": RECORD}))
        assert list(load_datasets(path)) == ["mine"]
        assert get_dataset("mine", path).n == 7

    def test_unknown_name_lists_known(self, tmp_path):
        path = tmp_path / "datasets.json"
        path.write_text(json.dumps({"alpha": RECORD, "beta": RECORD}))
        with pytest.raises(ConfigurationError, match="alpha, beta"):
            get_dataset("gamma", path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_datasets(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[1, 2")
        with pytest.raises(ConfigurationError):
            load_datasets(path)

    def test_top_level_must_be_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(ConfigurationError):
            load_datasets(path)
