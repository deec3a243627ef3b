"""Aliases and per-host credentials.

The config is a JSON file::

    {
      "version": "1",
      "aliases": {"backup": "https://s3.example.com"},
      "hosts": {
        "s3.example.com": {"access_key": "...", "secret_key": "...", "region": "eu-west-1"},
        "*.amazonaws.com": {"access_key": "...", "secret_key": "..."}
      }
    }

A missing file means "built-in aliases, anonymous/default credentials".
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import Path

from platformdirs import user_config_dir

from .exceptions import ConfigError

APP_NAME = "mirrorcp"
CONFIG_FILENAME = "config.json"
CONFIG_VERSION = "1"

DEFAULT_ALIASES = {
    "s3": "https://s3.amazonaws.com",
    "play": "https://play.min.io",
    "localhost": "http://localhost:9000",
}


def default_config_path() -> Path:
    return Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass
class HostConfig:
    access_key: str = ""
    secret_key: str = ""
    region: str = ""


@dataclass
class Config:
    """Loaded configuration.

    Attributes:
        aliases: Alias name → endpoint URL (built-ins merged with the file).
        hosts: Host glob → :class:`HostConfig`, in file order.
        path: File the config was loaded from, if any.
    """
    aliases: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ALIASES))
    hosts: dict[str, HostConfig] = field(default_factory=dict)
    path: str | None = None

    def host_config(self, host: str) -> HostConfig | None:
        """Return the first host entry whose glob matches *host*."""
        for pattern, host_config in self.hosts.items():
            if fnmatch(host, pattern):
                return host_config
        return None

    def expand_alias(self, arg: str) -> str:
        """Expand ``alias:bucket/key`` into a full URL.

        Arguments whose prefix is not a known alias are returned as-is,
        so local paths containing ``:`` keep working.
        """
        if "://" in arg:
            return arg
        name, sep, rest = arg.partition(":")
        if not sep or name not in self.aliases:
            return arg
        base = self.aliases[name].rstrip("/")
        rest = rest.lstrip("/")
        return f"{base}/{rest}" if rest else base


def load_config(path: str | os.PathLike[str] | None = None) -> Config:
    """Load the config from *path* (default: the per-user config file).

    Raises :class:`~mirrorcp.exceptions.ConfigError` if the file exists
    but is not valid.
    """
    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.exists():
        return Config()
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(str(config_path), str(exc)) from exc
    if not isinstance(data, dict):
        raise ConfigError(str(config_path), "top-level value must be an object")

    version = str(data.get("version", CONFIG_VERSION))
    if version != CONFIG_VERSION:
        raise ConfigError(str(config_path), f"unsupported version {version!r}")

    aliases = dict(DEFAULT_ALIASES)
    raw_aliases = data.get("aliases", {})
    if not isinstance(raw_aliases, dict):
        raise ConfigError(str(config_path), "'aliases' must be an object")
    for name, url in raw_aliases.items():
        if len(name) < 2 or not isinstance(url, str):
            raise ConfigError(str(config_path), f"invalid alias {name!r}")
        aliases[name] = url

    hosts: dict[str, HostConfig] = {}
    raw_hosts = data.get("hosts", {})
    if not isinstance(raw_hosts, dict):
        raise ConfigError(str(config_path), "'hosts' must be an object")
    for pattern, entry in raw_hosts.items():
        if not isinstance(entry, dict):
            raise ConfigError(str(config_path), f"host {pattern!r} must be an object")
        hosts[pattern] = HostConfig(
            access_key=entry.get("access_key", ""),
            secret_key=entry.get("secret_key", ""),
            region=entry.get("region", ""),
        )

    return Config(aliases=aliases, hosts=hosts, path=str(config_path))
