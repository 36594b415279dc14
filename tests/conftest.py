# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
from typing import Callable
import pytest

from vault_import.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """preview_rows: 2
table: credentials
error_log_dir: ./logs
keywords:
  notes: [notes, extra]
database:
  host: localhost
  port: 5432
  user: vault
  password: secret
  database: vaultdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_csv(temp_workdir: Path) -> Callable[[str, str], Path]:
    def _write(name: str, text: str) -> Path:
        f = temp_workdir / "data" / name
        f.write_text(text, encoding="utf-8")
        return f
    return _write


@pytest.fixture()
def site_user_pass_csv() -> str:
    return "Site,User,Pass\nBank,alice,secret1\n,bob,secret2\nMail,carol,\n"


@pytest.fixture()
def clean_logging():
    reset_logging()
    yield
    reset_logging()
