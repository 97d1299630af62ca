"""Shared test fixtures for SlimShift."""

from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional, Sequence

import pytest

from slimshift.domain.models import ToolchainInstall


class RecordingSink:
    """Progress sink that records every update."""

    def __init__(self):
        self.updates: List[tuple] = []

    def update(self, completed: Optional[float], total: Optional[float] = 100) -> None:
        self.updates.append((completed, total))


class ScriptedPrompter:
    """
    Prompter stand-in that replays scripted answers.

    Answers are consumed in order by every `ask_*` call. Messages passed to
    `show` are collected in `messages`.
    """

    def __init__(self, answers: Sequence):
        self.answers = list(answers)
        self.messages: List[str] = []
        self.questions: List[str] = []
        self.sinks: List[RecordingSink] = []

    def _next(self, question: str):
        self.questions.append(question)
        if not self.answers:
            raise AssertionError(f"No scripted answer left for: {question}")
        return self.answers.pop(0)

    def clear(self) -> None:
        pass

    def banner(self) -> None:
        pass

    def show(self, message: str, style: Optional[str] = None) -> None:
        self.messages.append(message)

    def ask_choice(self, title: str, choices: Sequence[str], default: Optional[str] = None) -> str:
        answer = self._next(title)
        assert answer in choices, f"{answer!r} is not one of {list(choices)} for {title!r}"
        return answer

    def ask_text(self, prompt: str, default: Optional[str] = None) -> str:
        return self._next(prompt)

    def ask_int(self, prompt: str, minimum: int, maximum: int, default: Optional[int] = None) -> int:
        while True:
            value = self._next(prompt)
            if minimum <= value <= maximum:
                return value
            self.messages.append(f"Value must be between {minimum} and {maximum}")

    def ask_confirm(self, prompt: str, default: bool = False) -> bool:
        return self._next(prompt)

    def wait_for_enter(self, prompt: str = "") -> None:
        pass

    @contextmanager
    def progress(self, description: str, transfer: bool = False):
        sink = RecordingSink()
        self.sinks.append(sink)
        yield sink

    def joined_messages(self) -> str:
        return "\n".join(self.messages)


@pytest.fixture
def install_dir(tmp_path: Path) -> Path:
    """Create an empty toolchain install directory."""
    path = tmp_path / "ffmpeg"
    path.mkdir()
    return path


@pytest.fixture
def fake_install(install_dir: Path) -> ToolchainInstall:
    """Create a ToolchainInstall whose binaries exist as empty files."""
    ffmpeg_path = install_dir / "ffmpeg"
    ffprobe_path = install_dir / "ffprobe"
    ffmpeg_path.touch()
    ffprobe_path.touch()
    return ToolchainInstall(install_dir, ffmpeg_path, ffprobe_path)


@pytest.fixture
def video_file(tmp_path: Path) -> Path:
    """Create a placeholder input video."""
    path = tmp_path / "holiday.mp4"
    path.write_bytes(b"\x00" * 16)
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Create the folder converted videos are written to."""
    path = tmp_path / "Videos" / "SlimShift"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def make_prompter():
    """Return a factory building a ScriptedPrompter from a list of answers."""
    return ScriptedPrompter
