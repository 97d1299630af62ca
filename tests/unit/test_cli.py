"""Unit tests for command-line parsing."""

from pathlib import Path

import pytest

from slimshift.cli import get_args
from slimshift.config.common import DEFAULT_LOG_LEVEL


class TestGetArgs:
    """Tests for get_args."""

    def test_defaults(self):
        """Test running without arguments uses the configured defaults."""
        args = get_args([])

        assert args.log_level == DEFAULT_LOG_LEVEL
        assert args.ffmpeg_dir is None

    def test_log_level_is_case_insensitive(self):
        """Test lower-case levels are accepted."""
        assert get_args(["--log-level", "debug"]).log_level == "DEBUG"

    def test_unknown_log_level(self):
        """Test unknown levels are rejected."""
        with pytest.raises(SystemExit):
            get_args(["--log-level", "chatty"])

    def test_trial_probe(self):
        """Test the trial probe switch."""
        assert get_args(["--trial-probe"]).trial_probe is True

    def test_ffmpeg_dir_resolved(self, tmp_path: Path):
        """Test the toolchain folder is resolved to an absolute path."""
        args = get_args(["--ffmpeg-dir", str(tmp_path / "tools")])

        assert args.ffmpeg_dir == (tmp_path / "tools").resolve()

    def test_ffmpeg_dir_must_be_directory(self, tmp_path: Path):
        """Test a file is refused as toolchain folder."""
        file_path = tmp_path / "ffmpeg.exe"
        file_path.touch()

        with pytest.raises(SystemExit):
            get_args(["--ffmpeg-dir", str(file_path)])
