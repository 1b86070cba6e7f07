"""
Tests for the run_server and migrate_schema entry points.

uvicorn.run is patched out, so nothing listens on a socket; the tests check
argument parsing, configuration loading, exit codes and wiring.
"""

import logging
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from sqlalchemy import inspect

# Add project root to path so we can import actions modules
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from actions import migrate_schema, run_server
from widget_service.config.settings import AppConfig


@pytest.fixture(autouse=True)
def restore_root_logging():
    """main() reconfigures the root logger; put it back for later tests."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_parse_args_defaults():
    args = run_server.parse_args([])

    assert args.config is None
    assert args.log_level == "INFO"


def test_parse_args_config_dir(tmp_path):
    args = run_server.parse_args(["--config", str(tmp_path), "--log-level", "debug"])

    assert args.config == tmp_path
    assert args.log_level == "DEBUG"


def test_load_config_layers_env_over_files(clean_env, tmp_path):
    (tmp_path / "a.env").write_text("KTOR_DEMO_HTTP_PORT=7000\nKTOR_DEMO_DB_USER=file-user\n")
    clean_env.setenv("KTOR_DEMO_HTTP_PORT", "7001")

    config = run_server.load_config(tmp_path)

    assert config == AppConfig(http_port=7001, db_user="file-user")


@patch("actions.run_server.uvicorn.run")
def test_main_runs_uvicorn_on_configured_port(mock_run, clean_env):
    clean_env.setenv("KTOR_DEMO_HTTP_PORT", "9191")

    run_server.main([])

    mock_run.assert_called_once()
    assert mock_run.call_args.kwargs["port"] == 9191
    assert mock_run.call_args.kwargs["host"] == "0.0.0.0"


@patch("actions.run_server.uvicorn.run")
def test_main_exits_on_bad_config(mock_run, clean_env, capsys):
    clean_env.setenv("KTOR_DEMO_DB_PORT", "not-a-number")

    with pytest.raises(SystemExit) as exc_info:
        run_server.main([])

    assert exc_info.value.code == 1
    assert "KTOR_DEMO_DB_PORT" in capsys.readouterr().err
    mock_run.assert_not_called()


@pytest.mark.skipif(
    not hasattr(sys, "get_int_max_str_digits"), reason="interpreter has no int digit limit"
)
@patch("actions.run_server.uvicorn.run")
def test_main_exits_on_huge_port_value(mock_run, clean_env, capsys):
    clean_env.setenv("KTOR_DEMO_HTTP_PORT", "9" * 5000)

    with pytest.raises(SystemExit) as exc_info:
        run_server.main([])

    assert exc_info.value.code == 1
    assert capsys.readouterr().err.startswith("Error: KTOR_DEMO_HTTP_PORT")
    mock_run.assert_not_called()


@patch("actions.run_server.configure_logging")
@patch("actions.run_server.uvicorn.run")
def test_unknown_log_level_is_a_usage_error(mock_run, mock_configure, clean_env, capsys):
    with pytest.raises(SystemExit) as exc_info:
        run_server.main(["--log-level", "chatty"])

    assert exc_info.value.code == 2
    assert "invalid choice" in capsys.readouterr().err
    mock_configure.assert_not_called()
    mock_run.assert_not_called()


@patch("actions.run_server.uvicorn.run")
def test_main_exits_on_missing_config_dir(mock_run, clean_env, tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        run_server.main(["--config", str(tmp_path / "missing")])

    assert exc_info.value.code == 1
    mock_run.assert_not_called()


def test_migrate_creates_tables(sqlite_engine):
    migrate_schema.migrate(sqlite_engine)

    assert "widgets" in inspect(sqlite_engine).get_table_names()


def test_migrate_drop_first_clears_rows(sqlite_engine):
    with sqlite_engine.begin() as conn:
        conn.exec_driver_sql("INSERT INTO widgets (name) VALUES ('old')")

    migrate_schema.migrate(sqlite_engine, drop_first=True)

    with sqlite_engine.connect() as conn:
        assert conn.exec_driver_sql("SELECT COUNT(*) FROM widgets").scalar() == 0


def test_migrate_parse_args():
    args = migrate_schema.parse_args(["--drop-first"])

    assert args.drop_first is True
    assert args.config is None
