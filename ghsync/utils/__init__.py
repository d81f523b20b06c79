"""Small helpers shared by the services and event handlers."""

from .labels import decode_labels, encode_labels
from .patch import extract_email_from_patch
from .time import Time, is_before, parse_timestamp, time

__all__ = [
    "Time",
    "decode_labels",
    "encode_labels",
    "extract_email_from_patch",
    "is_before",
    "parse_timestamp",
    "time",
]
