from __future__ import annotations

from pathlib import Path

import pytest

from size_compare.config import load_effective_config

VALID_INPUTS = {"INPUT_FILES": "dist/*.js", "INPUT_GIST_ID": "g1", "INPUT_GITHUB_TOKEN": "t"}


def _write_config(root: Path, text: str) -> None:
    (root / "size-compare.toml").write_text(text, encoding="utf-8")


@pytest.mark.parametrize(
    ("text", "message"),
    [
        ("collect = 3\n", "Config section 'collect' must be a table."),
        ("[collect]\nfiles = 'dist/*.js'\n", "Config field 'collect.files' must be a list of strings."),
        ("[collect]\nfiles = [1]\n", "Config field 'collect.files' must contain only strings."),
        ("[store]\ngist_id = ''\n", "Config field 'store.gist_id' must be a non-empty string."),
        ("[github]\ntoken = 'abc'\n", "Config field 'github.token' is not supported"),
        ("[github]\ngist_token = 'abc'\n", "Config field 'github.gist_token' is not supported"),
    ],
)
def test_invalid_config_file_errors(tmp_path: Path, text: str, message: str) -> None:
    _write_config(tmp_path, text)

    with pytest.raises(ValueError) as raised:
        load_effective_config(tmp_path, VALID_INPUTS)

    assert str(raised.value).startswith(message)


def test_missing_patterns_error(tmp_path: Path) -> None:
    environ = {key: value for key, value in VALID_INPUTS.items() if key != "INPUT_FILES"}

    with pytest.raises(ValueError, match="must list at least one pattern"):
        load_effective_config(tmp_path, environ)


def test_missing_gist_id_error(tmp_path: Path) -> None:
    environ = {key: value for key, value in VALID_INPUTS.items() if key != "INPUT_GIST_ID"}

    with pytest.raises(ValueError, match="'store.gist_id' is required"):
        load_effective_config(tmp_path, environ)


def test_missing_token_error(tmp_path: Path) -> None:
    environ = {key: value for key, value in VALID_INPUTS.items() if key != "INPUT_GITHUB_TOKEN"}

    with pytest.raises(ValueError, match="'github_token' is required"):
        load_effective_config(tmp_path, environ)


def test_blank_patterns_input_counts_as_missing(tmp_path: Path) -> None:
    environ = dict(VALID_INPUTS, INPUT_FILES="\n   \n")

    with pytest.raises(ValueError, match="at least one pattern"):
        load_effective_config(tmp_path, environ)
