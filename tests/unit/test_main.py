"""Unit tests for the program entry point."""

from unittest.mock import MagicMock, patch

import pytest

import main
from slimshift.domain.exceptions import PlatformNotSupportedException, ToolchainFetchException
from slimshift.domain.models import ToolchainInstall


@pytest.fixture
def prompter():
    with patch("main.ConsolePrompter") as prompter_cls:
        yield prompter_cls.return_value


class TestMain:
    """Tests for main()."""

    @pytest.mark.parametrize(
        "error",
        [PlatformNotSupportedException("Platform haiku-x64 is not supported."),
         ToolchainFetchException("Failed to install FFmpeg: 404")],
    )
    def test_toolchain_failure_exits_with_error(self, prompter, error):
        """Test a failed setup is reported and ends the program with code 1."""
        with patch("main.setup_toolchain", side_effect=error), patch("main.InteractiveFlow") as flow_cls:
            assert main.main([]) == 1

        prompter.show.assert_any_call(f"Failed to setup FFmpeg: {error}", style="red")
        prompter.wait_for_enter.assert_called_once()
        flow_cls.assert_not_called()

    def test_normal_exit(self, prompter, fake_install: ToolchainInstall):
        """Test the menu runs once the toolchain is ready."""
        with patch("main.setup_toolchain", return_value=fake_install), patch(
            "main.InteractiveFlow"
        ) as flow_cls:
            assert main.main(["--trial-probe"]) == 0

        flow_cls.return_value.run.assert_called_once()
        probe = flow_cls.call_args.kwargs["probe"]
        assert probe.trial_run is True

    def test_interrupt(self, prompter, fake_install: ToolchainInstall):
        """Test Ctrl+C at a prompt ends the program with code 130."""
        with patch("main.setup_toolchain", return_value=fake_install), patch(
            "main.InteractiveFlow"
        ) as flow_cls:
            flow_cls.return_value.run.side_effect = KeyboardInterrupt
            assert main.main([]) == 130

    def test_interrupt_during_download(self, prompter):
        """Test Ctrl+C while the toolchain is being fetched ends with code 130."""
        with patch("main.setup_toolchain", side_effect=KeyboardInterrupt), patch(
            "main.InteractiveFlow"
        ) as flow_cls:
            assert main.main([]) == 130

        flow_cls.assert_not_called()
        prompter.wait_for_enter.assert_not_called()


class TestSetupToolchain:
    """Tests for setup_toolchain()."""

    def test_existing_install_skips_download(self, fake_install: ToolchainInstall):
        """Test an installed toolchain is verified without fetching."""
        prompter = MagicMock()
        with patch("main.ToolchainFetcher") as fetcher_cls, patch(
            "main.ToolchainLocator.verify", return_value="ffmpeg version 7.1"
        ), patch("main.PlatformTarget.current") as current:
            current.return_value.is_windows = False
            install = main.setup_toolchain(prompter, fake_install.install_dir)

        assert install.ffmpeg_path == fake_install.ffmpeg_path.resolve()
        fetcher_cls.assert_not_called()
        prompter.progress.assert_not_called()

    def test_missing_install_downloads(self, install_dir):
        """Test a missing toolchain is fetched inside a transfer progress bar."""
        prompter = MagicMock()
        fetched = ToolchainInstall(install_dir, install_dir / "ffmpeg", install_dir / "ffprobe")
        with patch("main.ToolchainFetcher") as fetcher_cls, patch(
            "main.ToolchainLocator.verify", return_value="ffmpeg version 7.1"
        ), patch("main.PlatformTarget.current") as current:
            current.return_value.is_windows = False
            fetcher_cls.return_value.fetch.return_value = fetched
            install = main.setup_toolchain(prompter, install_dir)

        assert install is fetched
        fetcher_cls.return_value.fetch.assert_called_once_with(install_dir.resolve())
        prompter.progress.assert_called_once_with("Downloading FFmpeg", transfer=True)
