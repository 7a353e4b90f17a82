"""Tests for the command-line interface."""

import logging

import pytest
from typer.testing import CliRunner

from wayfinder.cli import app
from wayfinder.config import load_config

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_init_writes_config(tmp_path):
    result = runner.invoke(app, ["init", "--path", str(tmp_path), "--provider", "tavily"])

    assert result.exit_code == 0
    config = load_config(tmp_path / "wayfinder.toml")
    assert config.provider.name == "tavily"


def test_init_refuses_to_overwrite(tmp_path):
    (tmp_path / "wayfinder.toml").write_text("# existing\n")

    result = runner.invoke(app, ["init", "--path", str(tmp_path)])

    assert result.exit_code == 1
    assert (tmp_path / "wayfinder.toml").read_text() == "# existing\n"


def test_init_rejects_unknown_provider(tmp_path):
    result = runner.invoke(app, ["init", "--path", str(tmp_path), "--provider", "bing"])

    assert result.exit_code == 1
    assert not (tmp_path / "wayfinder.toml").exists()


def test_run_without_api_key_fails(tmp_path, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    result = runner.invoke(
        app,
        [
            "run",
            "EV costs",
            "Compare electric and gasoline cars",
            "--config",
            str(tmp_path / "missing.toml"),
            "--log-level",
            "ERROR",
        ],
    )

    assert result.exit_code == 1
    assert "OPENAI_API_KEY" in result.output


def test_run_rejects_unknown_format():
    result = runner.invoke(app, ["run", "EV costs", "Compare electric cars", "--format", "pdf"])

    assert result.exit_code == 1
    assert "Unsupported format" in result.output


def test_run_takes_logging_settings_from_config(tmp_path, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    log_file = tmp_path / "logs" / "wayfinder.log"
    config_path = tmp_path / "wayfinder.toml"
    config_path.write_text(f'[logging]\nlevel = "ERROR"\nfile = "{log_file.as_posix()}"\n')

    result = runner.invoke(app, ["run", "EV costs", "Compare electric cars", "--config", str(config_path)])

    assert result.exit_code == 1
    assert logging.getLogger().level == logging.ERROR
    assert log_file.exists()
