import io

import pytest
from rich.console import Console

from tools.registry import build_default_registry
from ui import ChatUI


class CapturedUI(ChatUI):
    def __init__(self):
        self.buffer = io.StringIO()
        super().__init__(Console(file=self.buffer, force_terminal=False, color_system=None, width=400))

    @property
    def output(self):
        return self.buffer.getvalue()


@pytest.fixture
def ui():
    return CapturedUI()


@pytest.fixture
def workdir(tmp_path):
    (tmp_path / "a.txt").write_text("alpha\n", encoding="utf-8")
    (tmp_path / "b.txt").mkdir()
    return tmp_path


@pytest.fixture
def registry(workdir):
    return build_default_registry(workdir)
