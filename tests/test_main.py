"""
Smoke tests for configuration loading, validation and the CLI entry point.
"""

import os
import pytest
import numpy as np
from unittest.mock import MagicMock, patch

import cv2

from main import ConfigError, apply_cli_overrides, build_parser, load_config, main, validate_config


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_valid_config_passes(self, valid_config):
        is_valid, error = validate_config(valid_config)

        assert is_valid is True
        assert error is None

    def test_missing_input_path(self, valid_config):
        del valid_config["input_path"]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "input_path" in error

    def test_missing_detection_section(self, valid_config):
        del valid_config["detection"]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "detection" in error.lower()

    def test_empty_output_path(self, valid_config):
        valid_config["output_path"] = ""

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "output_path" in error

    def test_scale_factor_must_exceed_one(self, valid_config):
        valid_config["detection"]["scale_factor"] = 1.0

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "scale_factor" in error

    def test_negative_min_neighbors(self, valid_config):
        valid_config["detection"]["min_neighbors"] = -1

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "min_neighbors" in error

    def test_unknown_flag(self, valid_config):
        valid_config["detection"]["flags"] = "magic"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "flags" in error

    def test_invalid_min_size(self, valid_config):
        valid_config["detection"]["min_size"] = [30]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "min_size" in error

    def test_invalid_max_size(self, valid_config):
        valid_config["detection"]["max_size"] = [0, 100]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "max_size" in error

    def test_invalid_device_backend(self, valid_config):
        valid_config["device"]["backend"] = "opencl"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "backend" in error

    def test_pitch_alignment_power_of_two(self, valid_config):
        valid_config["device"]["pitch_alignment"] = 300

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "pitch_alignment" in error

    def test_invalid_color(self, valid_config):
        valid_config["annotation"]["color"] = 300

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "color" in error

    def test_filled_thickness_valid(self, valid_config):
        valid_config["annotation"]["thickness"] = -1

        is_valid, error = validate_config(valid_config)

        assert is_valid is True

    def test_invalid_log_level(self, valid_config):
        valid_config["log_level"] = "VERBOSE"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "log_level" in error


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_default_yaml(self, temp_config_dir):
        config = load_config(str(temp_config_dir / "config.yaml"))

        assert config["detection"]["scale_factor"] == 1.1
        assert config["device"]["backend"] == "host"

    def test_local_overrides_merge(self, temp_config_dir):
        config_yaml = temp_config_dir / "config.yaml"
        config_yaml.write_text("""
detection:
  min_neighbors: 5
""")

        config = load_config(str(config_yaml))

        assert config["detection"]["min_neighbors"] == 5
        assert config["detection"]["scale_factor"] == 1.1

    def test_explicit_file_overrides_last(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("log_level: WARNING\n")
        explicit = temp_config_dir / "job.yaml"
        explicit.write_text("log_level: DEBUG\n")

        config = load_config(str(explicit))

        assert config["log_level"] == "DEBUG"

    def test_missing_directory_gives_empty(self, tmp_path):
        assert load_config(str(tmp_path / "nowhere" / "config.yaml")) == {}

    def test_invalid_yaml_raises(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("detection: [unclosed\n")
        with pytest.raises(ConfigError):
            load_config(str(temp_config_dir / "config.yaml"))


class TestCliOverrides:
    def test_flags_override_config(self, valid_config):
        args = build_parser().parse_args(
            ["-i", "a.pgm", "-o", "b.pgm", "-f", "c.xml", "--device", "host", "--report", "r.json"]
        )

        config = apply_cli_overrides(valid_config, args)

        assert config["input_path"] == "a.pgm"
        assert config["output_path"] == "b.pgm"
        assert config["detection"]["cascade_path"] == "c.xml"
        assert config["device"]["backend"] == "host"
        assert config["output"]["report_path"] == "r.json"

    def test_unset_flags_keep_config(self, valid_config):
        args = build_parser().parse_args([])

        config = apply_cli_overrides(dict(valid_config), args)

        assert config["input_path"] == "Lena.pgm"
        assert config["detection"]["cascade_path"] == "haarcascade_frontalface_default.xml"

    def test_rejects_unknown_device(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--device", "opencl"])


class TestMain:
    def _args(self, tmp_path, *extra):
        return ["--config", str(tmp_path / "noconfig" / "config.yaml"), "--device", "host", *extra]

    def test_success(self, tmp_path, gray_image_path):
        output = tmp_path / "results" / "faces.pgm"
        report = tmp_path / "results" / "faces.json"

        code = main(self._args(tmp_path, "-i", gray_image_path, "-o", str(output), "--report", str(report)))

        assert code == 0
        assert output.is_file()
        assert report.is_file()

    def test_missing_input(self, tmp_path):
        code = main(self._args(tmp_path, "-i", str(tmp_path / "missing.pgm"), "-o", str(tmp_path / "o.pgm")))

        assert code == 1

    def test_bad_cascade(self, tmp_path, gray_image_path):
        output = tmp_path / "o.pgm"
        code = main(self._args(
            tmp_path, "-i", gray_image_path, "-o", str(output), "-f", str(tmp_path / "missing.xml"),
        ))

        assert code == 1
        assert not output.exists()

    def test_invalid_config(self, tmp_path, gray_image_path):
        code = main(self._args(tmp_path, "-i", gray_image_path, "--log-level", "LOUD"))

        assert code == 1

    def test_log_file(self, tmp_path, gray_image_path):
        config_dir = tmp_path / "cfg"
        config_dir.mkdir()
        log_path = tmp_path / "logs" / "run.log"
        (config_dir / "config.yaml").write_text(f"log_path: {log_path}\n")

        code = main([
            "--config", str(config_dir / "config.yaml"), "--device", "host",
            "-i", gray_image_path, "-o", str(tmp_path / "o.pgm"),
        ])

        assert code == 0
        assert "Face detection found" in log_path.read_text()

    def test_report_path_is_directory(self, tmp_path, gray_image_path):
        report_dir = tmp_path / "report"
        report_dir.mkdir()

        code = main(self._args(
            tmp_path, "-i", gray_image_path, "-o", str(tmp_path / "o.pgm"), "--report", str(report_dir),
        ))

        assert code == 1

    def test_cuda_device_selection_failure(self, tmp_path, gray_image_path):
        mock_cv2 = MagicMock()
        mock_cv2.error = cv2.error
        mock_cv2.cuda.setDevice.side_effect = cv2.error("no driver")

        with patch("device.cuda_transfer.cuda_device_count", return_value=1), \
                patch("device.cuda_transfer.cv2", mock_cv2):
            code = main([
                "--config", str(tmp_path / "noconfig" / "config.yaml"), "--device", "cuda",
                "-i", gray_image_path, "-o", str(tmp_path / "o.pgm"),
            ])

        assert code == 1

    def test_invalid_yaml_returns_error(self, tmp_path, gray_image_path):
        config_dir = tmp_path / "cfg"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("detection: [unclosed\n")

        code = main(["--config", str(config_dir / "config.yaml"), "-i", gray_image_path])

        assert code == 1
