"""CLI tests for the storage Typer commands."""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

from actors.cli import main as cli_main
from packages.bunny_shared.logging import clear_context
from packages.bunny_storage import BunnyStorageClient, BunnyStorageConfig, StorageObject
from tests.sdk.payloads import ACCESS_KEY, ZONE, object_payload

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop the handler the CLI installs so later tests never log to a closed stream."""
    yield
    logging.getLogger().handlers.clear()
    clear_context()


def _install_transport(monkeypatch: pytest.MonkeyPatch, handler: Handler) -> list[Any]:
    """Route CLI clients through a mock transport and record their settings."""
    configs: list[Any] = []

    def _with_client(cfg: Any) -> BunnyStorageClient:
        configs.append(cfg)
        return BunnyStorageClient(
            config=BunnyStorageConfig(
                zone_name=cfg.zone_name,
                access_key=cfg.access_key,
                region=cfg.region,
                timeout_seconds=cfg.timeout,
            ),
            transport=httpx.MockTransport(handler),
        )

    monkeypatch.setattr(cli_main, "_with_client", _with_client)
    return configs


def _base_args(tmp_path: Path) -> list[str]:
    return [
        "--config",
        str(tmp_path / "missing.yaml"),
        "--zone",
        ZONE,
        "--access-key",
        ACCESS_KEY,
    ]


def test_list_renders_human_listing(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Listings should show directories and files with sizes."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[object_payload("sub", is_directory=True), object_payload("a.txt", length=3)],
        )

    _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(cli_main.app, [*_base_args(tmp_path), "list", "myzone/dir"])

    assert result.exit_code == 0
    assert "d sub/" in result.output
    assert "- a.txt (3 B)" in result.output


def test_list_json_output(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """``--json`` should emit one compact JSON document."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[object_payload("a.txt")])

    _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(
        cli_main.app, [*_base_args(tmp_path), "--json", "list", "myzone/dir"]
    )

    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload[0]["object_name"] == "a.txt"
    assert payload[0]["path"] == "/myzone/dir/"


def test_get_renders_object_details(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """File metadata should render as labelled rows."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DESCRIBE"
        return httpx.Response(200, json=object_payload("a.txt", length=2048))

    _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(
        cli_main.app, [*_base_args(tmp_path), "get", "myzone/dir/a.txt"]
    )

    assert result.exit_code == 0
    assert "Path:         /myzone/dir/a.txt" in result.output
    assert "Size:         2.0 KiB" in result.output
    assert "Type:         file" in result.output


def test_storage_errors_exit_with_code_3(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Mapped storage errors should print the message and exit 3."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(
        cli_main.app, [*_base_args(tmp_path), "get", "myzone/dir/missing.txt"]
    )

    assert result.exit_code == 3
    assert "error: File not found: myzone/dir/missing.txt" in result.output


def test_transport_errors_exit_with_code_4(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Network failures should exit 4."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(
        cli_main.app, [*_base_args(tmp_path), "--json", "list", "myzone/"]
    )

    assert result.exit_code == 4
    assert "connection refused" in result.output


def test_delete_reports_rejection(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """A rejected file delete should exit 3 instead of printing ok."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(
        cli_main.app, [*_base_args(tmp_path), "delete", "myzone/a.txt"]
    )

    assert result.exit_code == 3
    assert "delete failed: myzone/a.txt" in result.output


def test_delete_success_prints_ok(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """An accepted file delete should print ok."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        return httpx.Response(200)

    _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(
        cli_main.app, [*_base_args(tmp_path), "delete", "myzone/a.txt"]
    )

    assert result.exit_code == 0
    assert result.output.strip() == "ok"


def test_upload_with_verify_sends_checksum(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """``--verify`` should hash the local file into the Checksum header."""
    source = tmp_path / "a.bin"
    source.write_bytes(b"payload")
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"HttpCode": 201, "Message": "File uploaded."})

    _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(
        cli_main.app,
        [*_base_args(tmp_path), "upload", str(source), "myzone/a.bin", "--verify"],
    )

    assert result.exit_code == 0
    assert seen[0].headers["Checksum"] == hashlib.sha256(b"payload").hexdigest()
    assert '"HttpCode": 201' in result.output


def test_download_writes_local_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Downloads should land on disk and print the local path."""
    target = tmp_path / "out" / "a.bin"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"hello")

    _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(
        cli_main.app, [*_base_args(tmp_path), "download", "myzone/a.bin", str(target)]
    )

    assert result.exit_code == 0
    assert target.read_bytes() == b"hello"
    assert str(target) in result.output


def test_cat_streams_bytes_to_stdout(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """``cat`` should copy the raw body to stdout."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"raw \x00 bytes")

    _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(cli_main.app, [*_base_args(tmp_path), "cat", "myzone/a.bin"])

    assert result.exit_code == 0
    assert result.stdout_bytes == b"raw \x00 bytes"


class _DroppedBody(httpx.SyncByteStream):
    def __iter__(self) -> Iterator[bytes]:
        yield b"abc"
        raise httpx.ReadError("connection reset")


def test_cat_interrupted_body_exits_with_code_4(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """A body that drops mid-copy is a network failure, not a crash."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=_DroppedBody())

    _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(cli_main.app, [*_base_args(tmp_path), "cat", "myzone/a.bin"])

    assert result.exit_code == 4
    assert "connection reset" in result.output


def test_mkdir_and_rmdir_target_directories(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Folder commands should address slash-terminated paths."""
    seen: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        return httpx.Response(201, json={"HttpCode": 201})

    _install_transport(monkeypatch, handler)
    runner = CliRunner()
    assert runner.invoke(cli_main.app, [*_base_args(tmp_path), "mkdir", "myzone/new"]).exit_code == 0
    assert runner.invoke(cli_main.app, [*_base_args(tmp_path), "rmdir", "myzone/new"]).exit_code == 0

    assert seen == [("PUT", "/myzone/new/"), ("DELETE", "/myzone/new/")]


def test_settings_fill_missing_options(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """YAML and environment settings should back unspecified options."""
    config_file = tmp_path / "storage.yaml"
    config_file.write_text(
        "storage:\n  zone_name: myzone\n  access_key: yaml-key\n  region: sg\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("BUNNY_STORAGE__TIMEOUT_SECONDS", "7")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    configs = _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(
        cli_main.app, ["--config", str(config_file), "--region", "uk", "list", "myzone/"]
    )

    assert result.exit_code == 0
    assert "No entries found." in result.output
    assert configs[0].zone_name == "myzone"
    assert configs[0].access_key == "yaml-key"
    assert configs[0].region == "uk"
    assert configs[0].timeout == 7.0


def test_missing_credentials_exit_with_code_3(tmp_path: Path) -> None:
    """Commands without a zone or key should fail before any request."""
    result = CliRunner().invoke(
        cli_main.app,
        ["--config", str(tmp_path / "missing.yaml"), "list", "myzone/"],
    )

    assert result.exit_code == 3
    assert "zone_name is required" in result.output


def test_usage_errors_are_left_to_typer(tmp_path: Path) -> None:
    """Missing arguments should produce Typer's usage exit code."""
    result = CliRunner().invoke(
        cli_main.app, ["--config", str(tmp_path / "missing.yaml"), "get"]
    )

    assert result.exit_code == 2


def test_serialize_flattens_models_paths_and_datetimes() -> None:
    """Serialization should flatten storage objects, paths and datetimes."""
    item = StorageObject.model_validate(object_payload("a.txt"))

    data = cli_main._serialize(
        {"items": [item], "target": Path("/tmp/a.bin"), "at": datetime(2024, 1, 1), "n": 3}
    )

    assert data["items"][0]["object_name"] == "a.txt"
    assert data["items"][0]["date_created"] == "2024-01-15 10:20:30.123000"
    assert data["target"] == "/tmp/a.bin"
    assert data["at"] == "2024-01-01 00:00:00"
    assert data["n"] == 3


def test_render_listing_and_sizes() -> None:
    """Human rendering helpers should cover empty listings and unit scaling."""
    assert cli_main._render_listing([]) == "No entries found."
    assert cli_main._format_size(512) == "512 B"
    assert cli_main._format_size(5 * 1024 * 1024) == "5.0 MiB"
    assert cli_main._format_size(None) == ""


def test_unknown_log_level_is_a_usage_error(tmp_path: Path) -> None:
    """Log levels outside the known set should be rejected by Typer."""
    result = CliRunner().invoke(
        cli_main.app, [*_base_args(tmp_path), "--log-level", "loud", "list", "myzone/"]
    )

    assert result.exit_code == 2


def test_log_level_accepts_any_case(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """``--log-level debug`` should configure the root logger at DEBUG."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    _install_transport(monkeypatch, handler)
    result = CliRunner().invoke(
        cli_main.app, [*_base_args(tmp_path), "--log-level", "debug", "list", "myzone/"]
    )

    assert result.exit_code == 0
    assert logging.getLogger().level == logging.DEBUG
