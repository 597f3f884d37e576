"""Configuration for the radarcord client.

Configuration is optional: every setting has a default and clients can be
built from code alone. For deployments the same settings can be loaded
from a YAML file (with ``${ENV_VAR}`` references resolved) or from
``RADARCORD_*`` environment variables.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Final, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from radarcord.exceptions import ConfigurationError
from radarcord.utils.intervals import IntervalPreset, OverlapPolicy, resolve_interval

DEFAULT_API_ROOT: Final[str] = "https://radarcord.net/api"

ENV_PREFIX: Final[str] = "RADARCORD_"

# Matches ${VARIABLE_NAME} syntax where VARIABLE_NAME can contain letters, digits, and underscores
ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Z0-9_]+)\}")


class ReviewsEndpoint(StrEnum):
    """Path shape used to fetch a bot's reviews.

    The service has been observed answering on both shapes; neither is
    assumed canonical.
    """

    BOT = "bot"
    REVIEWS = "reviews"

    def path(self, bot_id: str) -> str:
        """Render the endpoint path for a bot id."""
        if self is ReviewsEndpoint.REVIEWS:
            return f"/bot/{bot_id}/reviews"
        return f"/bot/{bot_id}"


class RadarcordConfig(BaseModel):
    """Settings shared by the stats client and the CLI."""

    model_config: ConfigDict = ConfigDict(  # pyright: ignore[reportIncompatibleVariableOverride]
        extra="forbid",
        str_strip_whitespace=True,
        validate_default=True,
        frozen=True,
    )

    api_root: Annotated[
        str,
        Field(description="Base URL of the Radarcord API"),
    ] = DEFAULT_API_ROOT
    token: Annotated[
        SecretStr | None,
        Field(description="Radarcord API token sent as the Authorization header"),
    ] = None
    reviews_endpoint: Annotated[
        ReviewsEndpoint | None,
        Field(description="Reviews path shape, None uses the binding default"),
    ] = None
    autopost_interval: Annotated[
        IntervalPreset | float,
        Field(description="Interval preset name or seconds between autoposts"),
    ] = IntervalPreset.DEFAULT
    overlap_policy: Annotated[
        OverlapPolicy,
        Field(description="What to do when a tick fires while the previous one still runs"),
    ] = OverlapPolicy.ALLOW_CONCURRENT
    request_timeout: Annotated[
        float | None,
        Field(gt=0, description="Total HTTP request timeout in seconds, None for the library default"),
    ] = None
    log_level: Annotated[
        str,
        Field(description="Log level used by the CLI"),
    ] = "INFO"

    @field_validator("api_root", mode="after")
    @classmethod
    def validate_api_root(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            msg = f"api_root must be an http(s) URL, got: {v}"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("autopost_interval", mode="before")
    @classmethod
    def validate_autopost_interval(cls, v: object) -> object:
        """Accept preset names (``"safe"``, ``"SuperSafe"``) as well as seconds."""
        if isinstance(v, str):
            try:
                return float(v)
            except ValueError:
                return IntervalPreset.from_name(v)
        return v

    @field_validator("autopost_interval", mode="after")
    @classmethod
    def validate_positive_interval(cls, v: IntervalPreset | float) -> IntervalPreset | float:
        """Reject non-positive periods."""
        _ = resolve_interval(v)
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Unknown log level: {v}"
            raise ValueError(msg)
        return level

    @property
    def interval_seconds(self) -> float:
        """Autopost period in seconds."""
        return resolve_interval(self.autopost_interval)

    def token_value(self) -> str | None:
        """Return the plain token, if one is configured."""
        return self.token.get_secret_value() if self.token is not None else None


def resolve_env_vars(value: object, environ: Mapping[str, str] | None = None) -> object:
    """Recursively replace ``${VAR}`` references with environment values.

    Raises:
        ConfigurationError: If a referenced variable is not set
    """
    env = os.environ if environ is None else environ

    if isinstance(value, str):

        def _replace(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in env:
                msg = f"Environment variable {name} is referenced in configuration but not set"
                raise ConfigurationError(msg, env_var=name)
            return env[name]

        return ENV_VAR_PATTERN.sub(_replace, value)
    if isinstance(value, Mapping):
        return {key: resolve_env_vars(item, env) for key, item in value.items()}  # pyright: ignore[reportUnknownVariableType]
    if isinstance(value, list):
        return [resolve_env_vars(item, env) for item in value]  # pyright: ignore[reportUnknownVariableType]
    return value


def _validate(data: Mapping[str, object], *, source: str) -> RadarcordConfig:
    try:
        return RadarcordConfig.model_validate(data)
    except ValidationError as exc:
        lines = [f"Invalid configuration in {source}:"]
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"]) or "<root>"
            lines.append(f"  {location}: {error['msg']}")
        raise ConfigurationError("\n".join(lines)) from exc


def load_config(path: Path, environ: Mapping[str, str] | None = None) -> RadarcordConfig:
    """Load configuration from a YAML file.

    Args:
        path: YAML file path
        environ: Environment used to resolve ``${VAR}`` references

    Returns:
        Validated configuration

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read configuration file: {exc}", file_path=str(path)) from exc

    try:
        raw: object = yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML: {exc}", file_path=str(path)) from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Configuration root must be a mapping", file_path=str(path))

    resolved = cast(Mapping[str, object], resolve_env_vars(raw, environ))
    return _validate(resolved, source=str(path))


def load_config_from_env(environ: Mapping[str, str] | None = None) -> RadarcordConfig:
    """Load configuration from ``RADARCORD_*`` environment variables.

    ``RADARCORD_TOKEN`` maps to ``token``, ``RADARCORD_API_ROOT`` to
    ``api_root`` and so on.
    """
    env = os.environ if environ is None else environ
    fields = RadarcordConfig.model_fields
    data: dict[str, object] = {}
    for name, value in env.items():
        if not name.startswith(ENV_PREFIX):
            continue
        key = name[len(ENV_PREFIX) :].lower()
        if key in fields and value != "":
            data[key] = value
    return _validate(data, source="environment")
