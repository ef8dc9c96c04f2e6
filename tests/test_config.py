"""Tests for configuration loading."""

import json
import os
import tempfile

import pytest

from eml_print.config import ConversionConfig


class TestConversionConfig:
    """Tests for ConversionConfig."""

    def test_defaults(self):
        config = ConversionConfig()
        assert config.get_page_format() == "A4"
        assert config.get_margins() == {
            "top": "0.5in", "right": "0.5in", "bottom": "0.5in", "left": "0.5in",
        }
        assert config.render_timeout_ms == 60000
        assert config.restart_every == 50
        assert config.timezone == "Australia/Brisbane"

    def test_letter(self):
        assert ConversionConfig(page_size="LETTER").get_page_format() == "Letter"

    def test_invalid_values(self):
        with pytest.raises(ValueError):
            ConversionConfig(restart_every=0)
        with pytest.raises(ValueError):
            ConversionConfig(render_timeout=0)

    def test_load_ignores_unknown_keys(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "config.json")
            with open(path, "w") as f:
                json.dump({"margin": "1cm", "theme": "darkly"}, f)

            config = ConversionConfig.load(path)

            assert config.margin == "1cm"
            assert config.page_size == "a4"

    def test_load_corrupt_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "config.json")
            with open(path, "w") as f:
                f.write("{not json")

            assert ConversionConfig.load(path) == ConversionConfig()

    def test_load_missing_file(self):
        assert ConversionConfig.load("/nonexistent/config.json") == ConversionConfig()

    def test_load_invalid_values(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "config.json")
            with open(path, "w") as f:
                json.dump({"restart_every": 0}, f)

            assert ConversionConfig.load(path) == ConversionConfig()
