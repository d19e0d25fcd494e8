"""Shard allocation exclusion settings of a cluster."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Optional

from esasg.es.settings import Settings

# Path of the shard allocation exclusions within cluster settings.
SHARD_ALLOC_EXCLUDE_SETTING = "cluster.routing.allocation.exclude"


def _in_sorted(values: Optional[list[str]], x: str) -> bool:
    if not values:
        return False
    i = bisect_left(values, x)
    return i < len(values) and values[i] == x


def _joined(values: list[str]) -> Optional[str]:
    return ",".join(values) if values else None


@dataclass
class ShardAllocationExcludeSettings:
    """Nodes excluded from shard allocation, by name, host, IP or attribute.

    A list of None means the setting is absent; an empty list means it is
    to be cleared.
    """

    name: Optional[list[str]] = None
    host: Optional[list[str]] = None
    ip: Optional[list[str]] = None
    attr: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ShardAllocationExcludeSettings":
        """Read the exclusions from persistent or transient cluster settings."""
        result = cls()
        for key, value in settings.get(SHARD_ALLOC_EXCLUDE_SETTING).items():
            values = sorted(value.text.split(","))
            if key == "_name":
                result.name = values
            elif key == "_ip":
                result.ip = values
            elif key == "_host":
                result.host = values
            else:
                result.attr[key] = values
        return result

    def to_map(self) -> dict[str, Optional[str]]:
        """Return the settings to send; None values clear a setting."""
        out: dict[str, Optional[str]] = {}
        for key, values in (("_name", self.name), ("_host", self.host), ("_ip", self.ip)):
            if values is not None:
                out[f"{SHARD_ALLOC_EXCLUDE_SETTING}.{key}"] = _joined(values)
        for key, values in self.attr.items():
            out[f"{SHARD_ALLOC_EXCLUDE_SETTING}.{key}"] = _joined(values)
        return out

    def has_name(self, name: str) -> bool:
        """True if the node name is excluded."""
        return _in_sorted(self.name, name)

    def has_host(self, host: str) -> bool:
        """True if the host name is excluded."""
        return _in_sorted(self.host, host)

    def has_ip(self, ip: str) -> bool:
        """True if the IP address is excluded."""
        return _in_sorted(self.ip, ip)

    def has_attr(self, attr: str, value: str) -> bool:
        """True if the attribute value is excluded."""
        return _in_sorted(self.attr.get(attr), value)