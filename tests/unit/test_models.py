"""Unit tests for the core value types."""

from pathlib import Path

import pytest

from slimshift.domain.exceptions import ConversionFailedException, InvalidInputFileException
from slimshift.domain.models import CodecFamily, ConversionJob, EncoderSelection, ToolchainInstall


class TestCodecFamily:
    """Tests for CodecFamily labels."""

    def test_from_label(self):
        """Test menu labels map back to families."""
        assert CodecFamily.from_label("H.265") is CodecFamily.H265
        assert CodecFamily.from_label("MPEG-2") is None


class TestEncoderSelection:
    """Tests for EncoderSelection validation."""

    @pytest.mark.parametrize("quality", [0, 23, 51])
    def test_valid_quality(self, quality):
        """Test the bounds are inclusive."""
        assert EncoderSelection(CodecFamily.H264, "libx264", "medium", quality).quality == quality

    @pytest.mark.parametrize("quality", [-1, 52])
    def test_invalid_quality(self, quality):
        """Test values outside 0-51 are rejected."""
        with pytest.raises(ValueError):
            EncoderSelection(CodecFamily.H264, "libx264", "medium", quality)

    def test_empty_encoder(self):
        """Test an empty encoder name is rejected."""
        with pytest.raises(ValueError):
            EncoderSelection(CodecFamily.AV1, "", "medium", 30)


class TestConversionJob:
    """Tests for ConversionJob validation."""

    @pytest.fixture
    def selection(self) -> EncoderSelection:
        return EncoderSelection(CodecFamily.H264, "libx264", "medium", 23)

    def test_missing_input(self, tmp_path: Path, output_dir: Path, selection):
        """Test a missing input file is rejected."""
        with pytest.raises(InvalidInputFileException):
            ConversionJob(tmp_path / "gone.mp4", output_dir / "clip.mp4", selection, "-c:v libx264")

    def test_missing_output_folder(self, video_file: Path, tmp_path: Path, selection):
        """Test an output folder that does not exist is rejected."""
        with pytest.raises(InvalidInputFileException):
            ConversionJob(video_file, tmp_path / "nowhere" / "clip.mp4", selection, "-c:v libx264")


class TestToolchainInstall:
    """Tests for ToolchainInstall completeness."""

    def test_missing_binaries(self, install_dir: Path):
        """Test only absent binaries are reported."""
        install = ToolchainInstall(install_dir, install_dir / "ffmpeg", install_dir / "ffprobe")
        install.ffmpeg_path.touch()

        assert not install.is_complete()
        assert install.missing_binaries() == [install.ffprobe_path]


class TestConversionFailedException:
    """Tests for the failure message."""

    def test_tail_is_appended(self):
        """Test the stderr tail follows the message."""
        error = ConversionFailedException("FFmpeg exited with code 1", stderr_tail="Invalid argument")

        assert str(error) == "FFmpeg exited with code 1\nInvalid argument"
        assert str(ConversionFailedException("plain")) == "plain"
