"""Bunny storage CLI actor implemented with Typer."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable

import typer
from packages.bunny_shared.config import load_settings
from packages.bunny_shared.logging import configure_logging
from packages.bunny_storage import (
    BunnyStorageClient,
    BunnyStorageConfig,
    BunnyStorageError,
    StorageObject,
    StorageTransportError,
)

SUCCESS_EXIT_CODE = 0
STORAGE_ERROR_EXIT_CODE = 3
TRANSPORT_ERROR_EXIT_CODE = 4


class LogLevel(str, Enum):
    """Log levels accepted by `--log-level`."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class CliConfig:
    """Global CLI runtime options propagated to SDK calls."""

    zone_name: str
    access_key: str
    region: str
    timeout: float
    as_json: bool


def _serialize(value: Any) -> Any:
    """Flatten storage objects, listings and API bodies into JSON-ready data."""
    if isinstance(value, StorageObject):
        return _serialize(value.model_dump(mode="python"))
    if isinstance(value, dict):
        return {str(key): _serialize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    if isinstance(value, (datetime, Path)):
        return str(value)
    return value


def _emit_output(result: Any, as_json: bool) -> None:
    """Render command output in requested format."""

    data = _serialize(result)
    if as_json:
        typer.echo(json.dumps(data, sort_keys=True, separators=(",", ":")))
        return
    rendered = _render_human(data)
    if rendered is not None:
        typer.echo(rendered)
        return
    if data is None:
        typer.echo("ok")
        return
    typer.echo(str(data))


def _emit_error(exc: Exception | str, as_json: bool) -> None:
    """Render mapped SDK errors to stderr."""

    if as_json:
        typer.echo(json.dumps({"error": str(exc)}), err=True)
        return
    typer.echo(f"error: {exc}", err=True)


def _render_human(data: Any) -> str | None:
    """Return human-oriented rendering for recognized response shapes."""
    if isinstance(data, dict) and _looks_like_storage_object(data):
        return _render_storage_object(data)
    if isinstance(data, list) and _looks_like_listing(data):
        return _render_listing(data)
    if isinstance(data, (dict, list)):
        return json.dumps(data, indent=2, sort_keys=True)
    return None


def _looks_like_storage_object(value: dict[str, Any]) -> bool:
    """Return True for decoded storage object payloads."""
    return "object_name" in value and "is_directory" in value


def _looks_like_listing(items: list[Any]) -> bool:
    """Return True for directory listing payloads."""
    return all(
        isinstance(item, dict) and _looks_like_storage_object(item) for item in items
    )


def _render_storage_object(data: dict[str, Any]) -> str:
    """Render one storage object as aligned key/value rows."""
    full_path = f"{data.get('path', '')}{data.get('object_name', '')}"
    rows = [
        ("Path", full_path),
        ("Type", "directory" if data.get("is_directory") else "file"),
        ("Size", _format_size(data.get("length"))),
        ("Content-Type", data.get("content_type") or ""),
        ("Checksum", data.get("checksum") or ""),
        ("Created", data.get("date_created", "")),
        ("Modified", data.get("last_changed", "")),
        ("Guid", data.get("guid", "")),
    ]
    return "\n".join(f"{label + ':':<14}{value}" for label, value in rows if value != "")


def _render_listing(items: list[Any]) -> str:
    """Render one directory listing, directories first as returned."""
    if len(items) == 0:
        return "No entries found."
    lines: list[str] = []
    for item in items:
        name = str(item.get("object_name", "")).strip() or "<unknown>"
        if item.get("is_directory"):
            lines.append(f"d {name}/")
        else:
            lines.append(f"- {name} ({_format_size(item.get('length'))})")
    return "\n".join(lines)


def _format_size(value: Any) -> str:
    """Return a compact human-readable byte size."""
    if not isinstance(value, int) or isinstance(value, bool):
        return ""
    size = float(value)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if size < 1024 or unit == "GiB":
            return f"{int(size)} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{value} B"


def _with_client(cfg: CliConfig) -> BunnyStorageClient:
    """Return one SDK client built from global CLI settings."""
    return BunnyStorageClient(
        config=BunnyStorageConfig(
            zone_name=cfg.zone_name,
            access_key=cfg.access_key,
            region=cfg.region,
            timeout_seconds=cfg.timeout,
        )
    )


def _run_command(
    cfg: CliConfig,
    invoke: Callable[[BunnyStorageClient], Any],
    *,
    emit: bool = True,
) -> None:
    """Execute one SDK call and map outputs/errors to process semantics."""
    try:
        with _with_client(cfg) as client:
            result = invoke(client)
    except StorageTransportError as exc:
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=TRANSPORT_ERROR_EXIT_CODE) from exc
    except BunnyStorageError as exc:
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=STORAGE_ERROR_EXIT_CODE) from exc

    if emit:
        _emit_output(result, cfg.as_json)
    raise typer.Exit(code=SUCCESS_EXIT_CODE)


def _require_config(ctx: typer.Context) -> CliConfig:
    """Return required CLI config from Typer context."""

    config = ctx.obj
    if not isinstance(config, CliConfig):
        raise RuntimeError("CLI configuration not initialized")
    return config


app = typer.Typer(no_args_is_help=True, help="BunnyCDN Edge Storage command-line interface")


@app.callback()
def main(
    ctx: typer.Context,
    zone: str | None = typer.Option(None, help="Storage zone name"),
    access_key: str | None = typer.Option(None, help="Storage zone access key"),
    region: str | None = typer.Option(None, help="Primary storage region code"),
    timeout: float | None = typer.Option(
        None,
        min=0.001,
        help="Request timeout in seconds",
    ),
    config_path: Path | None = typer.Option(
        None, "--config", help="YAML settings file"
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON output"),
    log_level: LogLevel | None = typer.Option(
        None, case_sensitive=False, help="Log level override"
    ),
) -> None:
    """Resolve settings and store global options for all commands."""

    settings = load_settings(config_path=config_path)
    configure_logging(
        level=log_level.value if log_level is not None else settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )
    storage = settings.storage
    ctx.obj = CliConfig(
        zone_name=zone if zone is not None else storage.zone_name,
        access_key=access_key if access_key is not None else storage.access_key,
        region=region if region is not None else storage.region,
        timeout=timeout if timeout is not None else storage.timeout_seconds,
        as_json=as_json,
    )


@app.command("list")
def list_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Directory path, starting with the zone"),
) -> None:
    """List one directory."""
    cfg = _require_config(ctx)
    _run_command(cfg, lambda client: client.list(path))


@app.command("get")
def get_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File path, starting with the zone"),
) -> None:
    """Describe one file."""
    cfg = _require_config(ctx)
    _run_command(cfg, lambda client: client.get(path))


@app.command("upload")
def upload_command(
    ctx: typer.Context,
    local_path: Path = typer.Argument(..., help="Local file to upload"),
    storage_path: str = typer.Argument(..., help="Target path, starting with the zone"),
    verify: bool = typer.Option(False, "--verify", help="Send a SHA-256 checksum"),
    checksum: str | None = typer.Option(None, help="Precomputed SHA-256 checksum"),
    content_type: str = typer.Option("", help="Override the stored content type"),
) -> None:
    """Upload one local file."""
    cfg = _require_config(ctx)
    _run_command(
        cfg,
        lambda client: client.upload(
            local_path,
            storage_path,
            validate_checksum=verify,
            sha256_checksum=checksum,
            content_type_override=content_type,
        ),
    )


@app.command("download")
def download_command(
    ctx: typer.Context,
    storage_path: str = typer.Argument(..., help="File path, starting with the zone"),
    local_path: Path = typer.Argument(..., help="Local destination file"),
) -> None:
    """Download one file to disk."""
    cfg = _require_config(ctx)
    _run_command(cfg, lambda client: client.download(storage_path, local_path))


@app.command("cat")
def cat_command(
    ctx: typer.Context,
    storage_path: str = typer.Argument(..., help="File path, starting with the zone"),
) -> None:
    """Write one file's bytes to stdout."""
    cfg = _require_config(ctx)

    def _copy(client: BunnyStorageClient) -> None:
        out = typer.get_binary_stream("stdout")
        with client.download_as_stream(storage_path) as stream:
            for chunk in stream:
                out.write(chunk)
        out.flush()

    _run_command(cfg, _copy, emit=False)


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    storage_path: str = typer.Argument(..., help="File path, starting with the zone"),
) -> None:
    """Delete one file."""
    cfg = _require_config(ctx)

    def _delete(client: BunnyStorageClient) -> None:
        if not client.delete(storage_path):
            _emit_error(f"delete failed: {storage_path}", cfg.as_json)
            raise typer.Exit(code=STORAGE_ERROR_EXIT_CODE)

    _run_command(cfg, _delete)


@app.command("mkdir")
def mkdir_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Directory path, starting with the zone"),
) -> None:
    """Create one directory."""
    cfg = _require_config(ctx)
    _run_command(cfg, lambda client: client.create_folder(path))


@app.command("rmdir")
def rmdir_command(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Directory path, starting with the zone"),
) -> None:
    """Delete one directory and its contents."""
    cfg = _require_config(ctx)
    _run_command(cfg, lambda client: client.delete_folder(path))


if __name__ == "__main__":
    app()
