"""Tests for the ``scripts/resolve_snapshot.py`` command-line wrapper."""

from __future__ import annotations

import importlib.util
import json
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType

import httpx
import pytest
import respx
import structlog

from snapshot_resolver.wayback.config import WB_AVAILABILITY_URL

_SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "resolve_snapshot.py"

_FOUND_PAYLOAD = {
    "archived_snapshots": {
        "closest": {
            "available": True,
            "url": "https://web.archive.org/web/20230615000000/http://example.com",
            "timestamp": "20230615000000",
            "status": "200",
        }
    }
}


@pytest.fixture()
def cli() -> Iterator[ModuleType]:
    spec = importlib.util.spec_from_file_location("resolve_snapshot", _SCRIPT)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules["resolve_snapshot"] = module
    spec.loader.exec_module(module)

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield module
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    sys.modules.pop("resolve_snapshot", None)


def test_found_prints_snapshot_and_exits_zero(cli, capsys) -> None:
    with respx.mock:
        route = respx.get(WB_AVAILABILITY_URL).mock(
            return_value=httpx.Response(200, json=_FOUND_PAYLOAD)
        )
        code = cli.main(["http://example.com", "--from", "20230101", "--to", "20231231"])

    assert code == cli.EXIT_FOUND
    out = capsys.readouterr().out
    assert "https://web.archive.org/web/20230615000000/http://example.com" in out
    assert route.calls.last.request.url.params["to"] == "20231231"


def test_json_output(cli, capsys) -> None:
    with respx.mock:
        respx.get(WB_AVAILABILITY_URL).mock(return_value=httpx.Response(200, json=_FOUND_PAYLOAD))
        code = cli.main(["http://example.com", "--json"])

    assert code == cli.EXIT_FOUND
    record = json.loads(capsys.readouterr().out)
    assert record["result"] == "found"
    assert record["timestamp"] == "20230615000000"


def test_not_found_exit_code(cli, capsys) -> None:
    with respx.mock:
        respx.get(WB_AVAILABILITY_URL).mock(
            return_value=httpx.Response(200, json={"archived_snapshots": {}})
        )
        code = cli.main(["http://example.com/missing"])

    assert code == cli.EXIT_NOT_FOUND
    assert "No snapshot" in capsys.readouterr().out


def test_request_failed_exit_code(cli, capsys) -> None:
    with respx.mock:
        respx.get(WB_AVAILABILITY_URL).mock(return_value=httpx.Response(500))
        code = cli.main(["http://example.com", "--json"])

    assert code == cli.EXIT_REQUEST_FAILED
    record = json.loads(capsys.readouterr().out)
    assert record["result"] == "request_failed"
    assert record["status_code"] == 500


@pytest.mark.parametrize(
    "argv",
    [
        ["example.com"],
        ["http://example.com", "--from", "20231231", "--to", "20230101"],
        ["http://example.com", "--from", "20230101"],
        ["http://example.com", "--timeout", "-1"],
    ],
)
def test_invalid_input_exit_code(cli, capsys, argv: list[str]) -> None:
    code = cli.main(argv)

    assert code == cli.EXIT_INVALID_INPUT
    assert "ERROR" in capsys.readouterr().err


def test_non_finite_timeout_is_invalid_input(cli, capsys) -> None:
    code = cli.main(["http://example.com", "--timeout", "nan"])

    assert code == cli.EXIT_INVALID_INPUT
    assert "timeout" in capsys.readouterr().err


def test_bad_environment_is_config_error_not_invalid_input(cli, capsys, monkeypatch) -> None:
    """A broken SNAPSHOT_RESOLVER_* variable is reported apart from the user's input."""
    from snapshot_resolver.config.settings import get_settings  # noqa: PLC0415

    monkeypatch.setenv("SNAPSHOT_RESOLVER_REQUEST_TIMEOUT", "soon")
    get_settings.cache_clear()

    code = cli.main(["http://example.com", "--from", "20230101", "--to", "20231231"])

    assert code == cli.EXIT_CONFIG_ERROR
    assert "CONFIG ERROR" in capsys.readouterr().err
