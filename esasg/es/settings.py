"""The ``GET`` and ``PUT /_cluster/settings`` APIs."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence

from esasg.es.client import Client

_PATH = "/_cluster/settings"
_MISSING = object()


def _lookup(node: Any, parts: list[str]) -> tuple[bool, Any]:
    """Follow dotted path parts through nested or flat-keyed objects."""
    if not parts:
        return True, node
    if not isinstance(node, dict):
        return False, None
    for i in range(len(parts), 0, -1):
        key = ".".join(parts[:i])
        if key in node:
            found, value = _lookup(node[key], parts[i:])
            if found:
                return True, value
    return False, None


class Settings:
    """A value within a settings document, which may be missing."""

    __slots__ = ("_value",)

    def __init__(self, value: Any = _MISSING) -> None:
        self._value = value

    @property
    def value(self) -> Any:
        """The decoded JSON value, or None when missing."""
        return None if self._value is _MISSING else self._value

    @property
    def text(self) -> str:
        """The value as a string; empty when missing or null."""
        value = self._value
        if value is _MISSING or value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        return json.dumps(value, separators=(",", ":"))

    def get(self, path: str) -> "Settings":
        """Return the value at a dotted path such as ``cluster.routing``.

        Both nested objects and flat dotted keys are followed.
        """
        if self._value is _MISSING:
            return Settings()
        if not path:
            return self
        found, value = _lookup(self._value, path.split("."))
        return Settings(value) if found else Settings()

    def items(self) -> Iterator[tuple[str, "Settings"]]:
        """Yield the members of an object value; nothing for other values."""
        if isinstance(self._value, dict):
            for key, value in self._value.items():
                yield key, Settings(value)

    def __bool__(self) -> bool:
        return self._value is not _MISSING

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Settings):
            return self._value == other._value
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._value is _MISSING:
            return "Settings()"
        return f"Settings({self._value!r})"


@dataclass
class ClusterSettingsResponse:
    """Settings returned by the cluster settings APIs."""

    # Settings that persist between cluster restarts.
    persistent: Settings
    # Settings that do not persist between cluster restarts.
    transient: Settings
    # Default values; only present when requested.
    defaults: Optional[Settings] = None


@dataclass
class ClusterGetSettingsService:
    """Gets the settings of an Elasticsearch cluster."""

    client: Client
    include_defaults: bool = False
    pretty: bool = False
    # Return version and creation date values in human-readable form.
    human: Optional[bool] = None
    # Response filtering paths.
    filter_path: Sequence[str] = field(default_factory=list)

    def build_url(self) -> tuple[str, dict[str, str]]:
        """Return the request path and query parameters."""
        params: dict[str, str] = {}
        if self.pretty:
            params["pretty"] = "true"
        if self.include_defaults:
            params["include_defaults"] = "true"
        if self.filter_path:
            params["filter_path"] = ",".join(self.filter_path)
        if self.human is not None:
            params["human"] = "true" if self.human else "false"
        return _PATH, params

    def do(self) -> ClusterSettingsResponse:
        """Perform the request and return the settings."""
        path, params = self.build_url()
        root = Settings(self.client.perform_request("GET", path, params))
        response = ClusterSettingsResponse(
            persistent=root.get("persistent"),
            transient=root.get("transient"),
        )
        if self.include_defaults:
            response.defaults = root.get("defaults")
        return response


@dataclass
class ClusterPutSettingsService:
    """Updates the settings of an Elasticsearch cluster."""

    client: Client
    pretty: bool = False
    flat_settings: Optional[bool] = None
    master_timeout: str = ""
    # A complete request body, used instead of the collected settings.
    body_json: Any = None
    body_string: str = ""
    _transient: dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    _persistent: dict[str, Any] = field(default_factory=dict, init=False, repr=False)

    def transient(self, setting: str, value: Any) -> "ClusterPutSettingsService":
        """Add a transient setting; None removes it."""
        self._transient[setting] = value
        return self

    def persistent(self, setting: str, value: Any) -> "ClusterPutSettingsService":
        """Add a persistent setting; None removes it."""
        self._persistent[setting] = value
        return self

    def build_url(self) -> tuple[str, dict[str, str]]:
        """Return the request path and query parameters."""
        params: dict[str, str] = {}
        if self.pretty:
            params["pretty"] = "true"
        if self.flat_settings is not None:
            params["flat_settings"] = "true" if self.flat_settings else "false"
        if self.master_timeout:
            params["master_timeout"] = self.master_timeout
        return _PATH, params

    def _body(self) -> Any:
        if self.body_json is not None:
            return self.body_json
        if self.body_string:
            return self.body_string
        return {"persistent": self._persistent, "transient": self._transient}

    def do(self) -> ClusterSettingsResponse:
        """Perform the request and return the new values of changed settings."""
        path, params = self.build_url()
        root = Settings(self.client.perform_request("PUT", path, params, self._body()))
        return ClusterSettingsResponse(
            persistent=root.get("persistent"),
            transient=root.get("transient"),
        )