"""Registry mapping CloudWatch event sources and detail types to decoders."""

from __future__ import annotations

import threading
from typing import Any, Callable

DetailFactory = Callable[[Any], Any]

_lock = threading.Lock()
_registry: dict[tuple[str, str], DetailFactory] = {}


class DetailTypeAlreadyRegistered(Exception):
    """Raised when a source and detail type pair is registered twice."""


def register_detail_type(source: str, detail_type: str, factory: DetailFactory) -> None:
    """Register ``factory`` to decode the detail of events of this kind.

    ``factory`` is called with the decoded JSON value of the event's
    ``detail`` field and returns the object to store in its place.
    """
    key = (source, detail_type)
    with _lock:
        if key in _registry:
            raise DetailTypeAlreadyRegistered(
                f"detail type already registered: {source}:{detail_type}"
            )
        _registry[key] = factory


def decode_detail(source: str, detail_type: str, data: Any) -> Any:
    """Decode an event detail with the factory registered for its kind.

    Unknown kinds are returned as the plain decoded JSON value, and a
    null detail is returned as None.
    """
    if data is None:
        return None
    with _lock:
        factory = _registry.get((source, detail_type))
    if factory is None:
        return data
    return factory(data)