"""
Configuration loader for mirror jobs.

Settings are layered: JSON config file, then ``PLUGIN_*`` / ``AWS_*``
environment variables, then explicit overrides (CLI flags).
"""
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..models.policy import PolicyKind, PolicyValue
from .errors import ConfigError

DEFAULT_REGION = "us-east-1"

# Environment variable -> config key; first variable found wins.
ENV_VARS = {
    "source": ("PLUGIN_SOURCE",),
    "target": ("PLUGIN_TARGET",),
    "bucket": ("PLUGIN_BUCKET",),
    "region": ("PLUGIN_REGION", "AWS_REGION", "AWS_DEFAULT_REGION"),
    "access_key": ("PLUGIN_ACCESS_KEY", "AWS_ACCESS_KEY_ID"),
    "secret_key": ("PLUGIN_SECRET_KEY", "AWS_SECRET_ACCESS_KEY"),
    "profile": ("PLUGIN_PROFILE", "AWS_PROFILE"),
    "endpoint_url": ("PLUGIN_ENDPOINT",),
    "access": ("PLUGIN_ACCESS", "PLUGIN_ACL"),
    "content_type": ("PLUGIN_CONTENT_TYPE",),
    "metadata": ("PLUGIN_METADATA",),
    "redirects": ("PLUGIN_REDIRECTS",),
    "delete": ("PLUGIN_DELETE",),
}

JSON_KEYS = ("access", "content_type", "metadata", "redirects")


@dataclass
class SyncConfig:
    """Fully parsed mirror job."""

    source: str
    bucket: str
    target: str = ""
    region: str = DEFAULT_REGION
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    profile: Optional[str] = None
    endpoint_url: Optional[str] = None
    access: PolicyValue = field(default_factory=PolicyValue.absent)
    content_type: PolicyValue = field(default_factory=PolicyValue.absent)
    metadata: PolicyValue = field(default_factory=PolicyValue.absent)
    redirects: Dict[str, str] = field(default_factory=dict)
    delete: bool = True


def _decode_env_value(key, value):
    """Decode JSON objects passed through the environment."""
    if key in JSON_KEYS and value.strip().startswith("{"):
        try:
            return json.loads(value)
        except ValueError as e:
            raise ConfigError(f"'{key}' is not valid JSON", original=e) from e
    return value


def _parse_bool(key, value):
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off", ""):
        return False
    raise ConfigError(f"'{key}' must be a boolean, got {value!r}")


def parse_metadata(raw) -> PolicyValue:
    """Metadata must be absent or a pattern -> {key: value} mapping."""
    policy = PolicyValue.from_raw(raw, "metadata")
    if policy.kind is PolicyKind.SCALAR:
        raise ConfigError("'metadata' must be a mapping of pattern -> {key: value}")
    for pattern, values in policy:
        if not isinstance(values, dict):
            raise ConfigError(f"'metadata' entry for '{pattern}' must be a mapping")
    return policy


def parse_redirects(raw) -> Dict[str, str]:
    if raw in (None, "", {}):
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("'redirects' must be a mapping of path -> location")
    return {str(path): str(location) for path, location in raw.items()}


class ConfigLoader:
    """Handles loading and layering mirror configuration."""

    @staticmethod
    def load_config_json(path):
        """
        Load a JSON config file.

        Args:
            path: Path to the JSON file

        Returns:
            Configuration dictionary

        Raises:
            ConfigError: If the file cannot be read or is not a JSON object
        """
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Error loading {path}", original=e) from e

        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a JSON object")
        return data

    @staticmethod
    def load_env(environ=None) -> Dict[str, Any]:
        """Collect settings from environment variables."""
        environ = os.environ if environ is None else environ
        values = {}
        for key, names in ENV_VARS.items():
            for name in names:
                if environ.get(name):
                    values[key] = _decode_env_value(key, environ[name])
                    break
        return values

    @staticmethod
    def load(path=None, overrides=None, environ=None) -> SyncConfig:
        """
        Build a :class:`SyncConfig` from file, environment and overrides.

        Args:
            path: Optional JSON config file
            overrides: Mapping of explicit values; ``None`` entries are ignored
            environ: Environment mapping (defaults to ``os.environ``)

        Raises:
            ConfigError: On missing required settings or malformed values
        """
        raw: Dict[str, Any] = {}
        if path:
            raw.update(ConfigLoader.load_config_json(path))
        raw.update(ConfigLoader.load_env(environ))
        raw.update({k: v for k, v in (overrides or {}).items() if v is not None})

        return ConfigLoader.from_dict(raw)

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> SyncConfig:
        missing = [key for key in ("source", "bucket") if not raw.get(key)]
        if missing:
            raise ConfigError(f"Missing required setting(s): {', '.join(missing)}")

        return SyncConfig(
            source=raw["source"],
            bucket=raw["bucket"],
            target=raw.get("target") or "",
            region=raw.get("region") or DEFAULT_REGION,
            access_key=raw.get("access_key") or None,
            secret_key=raw.get("secret_key") or None,
            profile=raw.get("profile") or None,
            endpoint_url=raw.get("endpoint_url") or None,
            access=PolicyValue.from_raw(raw.get("access"), "access"),
            content_type=PolicyValue.from_raw(raw.get("content_type"), "content_type"),
            metadata=parse_metadata(raw.get("metadata")),
            redirects=parse_redirects(raw.get("redirects")),
            delete=_parse_bool("delete", raw.get("delete", True)),
        )
