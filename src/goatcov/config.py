"""Configuration parsing from ``.goatcov.yml`` and command-line flags."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from goatcov.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".goatcov.yml"
DEFAULT_PROFILE = "coverage"
DEFAULT_SOURCE_ROOT = "."

OUTPUT_FORMATS = frozenset({"text", "html", "json"})

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Resolve environment variables in string and list-of-string values."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


def split_prefixes(value: object) -> tuple[str, ...]:
    """Normalize exclude prefixes from a comma-separated string or a list.

    Raises:
        ConfigError: If *value* is neither a string nor a list.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        raise ConfigError("exclude must be a string or a list")
    return tuple(item.strip() for item in items if item.strip())


@dataclass(frozen=True)
class ReportConfig:
    """Settings for one goatcov run, built once and passed explicitly."""

    profile_path: str = DEFAULT_PROFILE
    """Coverage profile written by ``go test -coverprofile``."""

    diff_path: str = ""
    """Baseline profile to diff against; empty disables diff mode."""

    source_root: str = DEFAULT_SOURCE_ROOT
    """Directory the profiled files are resolved under."""

    exclude_prefixes: tuple[str, ...] = ()
    """File identifiers starting with any of these are skipped."""

    output_format: str = "text"
    """One of ``text``, ``html`` or ``json``."""

    link_template: str = ""
    """Link target for file names in HTML output (``github:owner/repo`` or a ``{path}`` URL)."""

    @property
    def is_diff(self) -> bool:
        return bool(self.diff_path)


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Read the YAML config file, returning an empty dict when it does not exist."""
    config_path = Path(path)
    if not config_path.is_file():
        return {}
    try:
        parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot load {config_path}: {e}") from e
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigError(f"{config_path}: expected a mapping at the top level")
    return _resolve_dict(parsed)


def _file_str(raw: dict[str, Any], key: str, default: str) -> str:
    """Return a scalar config value as a string; empty keys fall back to *default*."""
    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, (dict, list)):
        raise ConfigError(f"{key} must be a string")
    return str(value)


def _file_bool(raw: dict[str, Any], key: str) -> bool:
    value = raw.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false (got: {value!r})")
    return value


def _output_format(html: bool, as_json: bool, source: str) -> str:
    if html and as_json:
        raise ConfigError(
            f"invalid configuration: html and json output cannot both be enabled ({source})"
        )
    if html:
        return "html"
    if as_json:
        return "json"
    return "text"


def load_config(
    path: str | Path = DEFAULT_CONFIG_FILE,
    *,
    profile: str | None = None,
    diff: str | None = None,
    src: str | None = None,
    exclude: str | None = None,
    html: bool | None = None,
    as_json: bool | None = None,
    link: str | None = None,
) -> ReportConfig:
    """Build a ReportConfig from the YAML file and command-line overrides.

    Command-line values win over the file; the file wins over defaults.
    An output flag on the command line replaces both ``html`` and ``json``
    from the file.

    Raises:
        ConfigError: If the file is malformed or the result is invalid.
    """
    raw = load_config_file(path)

    if html or as_json:
        output_format = _output_format(bool(html), bool(as_json), "command line")
    else:
        output_format = _output_format(_file_bool(raw, "html"), _file_bool(raw, "json"), str(path))

    config = ReportConfig(
        profile_path=profile if profile is not None else _file_str(raw, "profile", DEFAULT_PROFILE),
        diff_path=diff if diff is not None else _file_str(raw, "diff", ""),
        source_root=src if src is not None else _file_str(raw, "src", DEFAULT_SOURCE_ROOT),
        exclude_prefixes=split_prefixes(exclude if exclude is not None else raw.get("exclude")),
        output_format=output_format,
        link_template=link if link is not None else _file_str(raw, "link", ""),
    )

    errors = validate_config(config)
    if errors:
        raise ConfigError("invalid configuration: " + "; ".join(errors))
    return config


def validate_config(config: ReportConfig) -> list[str]:
    """Return a list of problems with *config* (empty when valid)."""
    errors: list[str] = []

    if not config.profile_path:
        errors.append("profile must not be empty")

    if not config.source_root:
        errors.append("src must not be empty")

    if config.output_format not in OUTPUT_FORMATS:
        errors.append(
            f"output format must be one of {', '.join(sorted(OUTPUT_FORMATS))} "
            f"(got: {config.output_format})"
        )

    return errors
