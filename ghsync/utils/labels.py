"""Conversion between GitHub label lists and the stored label string."""

from collections.abc import Iterable, Mapping
from typing import Any


def _label_name(label: Any) -> str:
    if isinstance(label, str):
        return label.strip()

    if isinstance(label, Mapping):
        name = label.get("name")
    else:
        name = getattr(label, "name", None)

    return name.strip() if isinstance(name, str) else ""


def encode_labels(labels: Iterable[Any]) -> str:
    """Join label names with commas.

    Labels can be bare names or objects carrying a ``name``, as returned by the
    GitHub API. Only the name survives; a label without one becomes an empty
    segment.

    >>> encode_labels([{"id": 1, "name": "type/feature"}, "status/can-merge"])
    'type/feature,status/can-merge'
    """
    return ",".join(_label_name(label) for label in labels)


def decode_labels(value: str | None) -> list[str]:
    """Split a stored label string back into label names."""
    if not value:
        return []
    return value.split(",")
