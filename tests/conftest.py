from pathlib import Path

import pytest
from hypothesis import HealthCheck, settings

from promptshelf.config import init_config
from promptshelf.store import PromptStore

# Hypothesis builds its Unicode charmap cache on a cold run, which trips the
# input-generation speed check; that is setup cost, not a test problem.
settings.register_profile("default", suppress_health_check=[HealthCheck.too_slow])
settings.load_profile("default")


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point Path.home() at a scratch directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("USERPROFILE", str(home_dir))
    return home_dir


@pytest.fixture
def root(tmp_path: Path) -> Path:
    return tmp_path / "shelf"


@pytest.fixture
def store(root: Path) -> PromptStore:
    return PromptStore(root)


@pytest.fixture
def config_file(tmp_path: Path, root: Path) -> Path:
    return init_config(tmp_path / "promptshelf.toml", str(root))
