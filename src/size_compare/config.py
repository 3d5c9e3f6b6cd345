"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from size_compare.collect.discovery import split_patterns
from size_compare.github.client import DEFAULT_API_URL
from size_compare.history.store import DEFAULT_HISTORY_FILE

CONFIG_FILE_NAME = "size-compare.toml"
DEFAULT_SERVER_URL = "https://github.com"


@dataclass(slots=True, frozen=True)
class StoreConfig:
    """Where the history log lives."""

    gist_id: str
    history_file: str


@dataclass(slots=True, frozen=True)
class GitHubConfig:
    """GitHub endpoints and tokens."""

    api_url: str
    server_url: str
    token: str
    gist_token: str


@dataclass(slots=True, frozen=True)
class ActionConfig:
    """Fully merged run configuration."""

    working_dir: Path
    files: tuple[str, ...]
    store: StoreConfig
    github: GitHubConfig
    audit_log: Path | None

    def to_public_dict(self) -> dict[str, object]:
        """Return a serializable snapshot without tokens."""
        return {
            "working_dir": str(self.working_dir),
            "files": list(self.files),
            "store": {
                "gist_id": self.store.gist_id,
                "history_file": self.store.history_file,
            },
            "github": {
                "api_url": self.github.api_url,
                "server_url": self.github.server_url,
                "separate_gist_token": self.github.gist_token != self.github.token,
            },
            "audit_log": str(self.audit_log) if self.audit_log is not None else None,
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    files: tuple[str, ...] | None = None
    gist_id: str | None = None
    history_file: str | None = None
    github_token: str | None = None
    gist_token: str | None = None
    audit_log: Path | None = None


@dataclass(slots=True, frozen=True)
class _PartialConfig:
    files: tuple[str, ...]
    gist_id: str
    history_file: str
    api_url: str
    server_url: str
    github_token: str
    gist_token: str
    audit_log: Path | None


def load_config_file(working_dir: Path) -> dict[str, object]:
    """Load optional size-compare.toml from the working directory."""
    config_path = working_dir / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, name: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{name}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{name}' must contain only strings.")
        if item.strip():
            output.append(item.strip())
    return tuple(output)


def _optional_string(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    return value.strip()


def _defaults(environ: Mapping[str, str]) -> _PartialConfig:
    return _PartialConfig(
        files=(),
        gist_id="",
        history_file=DEFAULT_HISTORY_FILE,
        api_url=environ.get("GITHUB_API_URL") or DEFAULT_API_URL,
        server_url=environ.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL,
        github_token="",
        gist_token="",
        audit_log=None,
    )


def _merge_file(
    base: _PartialConfig, payload: dict[str, object], working_dir: Path
) -> _PartialConfig:
    collect_payload = _get_table(payload, "collect")
    store_payload = _get_table(payload, "store")
    github_payload = _get_table(payload, "github")
    audit_payload = _get_table(payload, "audit")

    for key in ("token", "gist_token"):
        if key in github_payload:
            raise ValueError(
                f"Config field 'github.{key}' is not supported; "
                "pass tokens through action inputs or the environment."
            )

    files = base.files
    if "files" in collect_payload:
        files = _tuple_of_strings(collect_payload["files"], "collect.files")

    audit_log = base.audit_log
    if "path" in audit_payload:
        audit_log = working_dir / _optional_string(audit_payload["path"], "audit.path", "")

    return _PartialConfig(
        files=files,
        gist_id=_optional_string(store_payload.get("gist_id"), "store.gist_id", base.gist_id),
        history_file=_optional_string(
            store_payload.get("history_file"), "store.history_file", base.history_file
        ),
        api_url=_optional_string(github_payload.get("api_url"), "github.api_url", base.api_url),
        server_url=_optional_string(
            github_payload.get("server_url"), "github.server_url", base.server_url
        ),
        github_token=base.github_token,
        gist_token=base.gist_token,
        audit_log=audit_log,
    )


def _merge_inputs(base: _PartialConfig, environ: Mapping[str, str]) -> _PartialConfig:
    """Apply GitHub Actions inputs (INPUT_* variables)."""
    files = base.files
    raw_files = environ.get("INPUT_FILES", "")
    if raw_files.strip():
        files = split_patterns(raw_files)
    return _PartialConfig(
        files=files,
        gist_id=environ.get("INPUT_GIST_ID", "").strip() or base.gist_id,
        history_file=base.history_file,
        api_url=base.api_url,
        server_url=base.server_url,
        github_token=environ.get("INPUT_GITHUB_TOKEN", "").strip() or base.github_token,
        gist_token=environ.get("INPUT_GIST_TOKEN", "").strip() or base.gist_token,
        audit_log=base.audit_log,
    )


def apply_cli_overrides(base: _PartialConfig, overrides: CliOverrides) -> _PartialConfig:
    """Apply startup overrides at highest precedence."""
    return _PartialConfig(
        files=overrides.files if overrides.files else base.files,
        gist_id=overrides.gist_id or base.gist_id,
        history_file=overrides.history_file or base.history_file,
        api_url=base.api_url,
        server_url=base.server_url,
        github_token=overrides.github_token or base.github_token,
        gist_token=overrides.gist_token or base.gist_token,
        audit_log=overrides.audit_log or base.audit_log,
    )


def load_effective_config(
    working_dir: Path,
    environ: Mapping[str, str],
    overrides: CliOverrides | None = None,
) -> ActionConfig:
    """Load config using merge order defaults -> size-compare.toml -> inputs -> overrides."""
    resolved = working_dir.resolve()
    merged = _defaults(environ)
    merged = _merge_file(merged, load_config_file(resolved), resolved)
    merged = _merge_inputs(merged, environ)
    merged = apply_cli_overrides(merged, overrides or CliOverrides())

    if not merged.files:
        raise ValueError("Config field 'collect.files' must list at least one pattern.")
    if not merged.gist_id:
        raise ValueError("Config field 'store.gist_id' is required.")
    if not merged.github_token:
        raise ValueError("Input 'github_token' is required.")

    return ActionConfig(
        working_dir=resolved,
        files=merged.files,
        store=StoreConfig(gist_id=merged.gist_id, history_file=merged.history_file),
        github=GitHubConfig(
            api_url=merged.api_url,
            server_url=merged.server_url,
            token=merged.github_token,
            gist_token=merged.gist_token or merged.github_token,
        ),
        audit_log=merged.audit_log,
    )
