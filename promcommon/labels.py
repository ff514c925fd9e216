"""Label names, label values and well-known label constants."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import dataclass

__all__ = [
    "ALERT_NAME_LABEL",
    "EXPORTED_LABEL_PREFIX",
    "METRIC_NAME_LABEL",
    "SCHEME_LABEL",
    "ADDRESS_LABEL",
    "METRICS_PATH_LABEL",
    "SCRAPE_INTERVAL_LABEL",
    "SCRAPE_TIMEOUT_LABEL",
    "RESERVED_LABEL_PREFIX",
    "META_LABEL_PREFIX",
    "TMP_LABEL_PREFIX",
    "PARAM_LABEL_PREFIX",
    "JOB_LABEL",
    "INSTANCE_LABEL",
    "BUCKET_LABEL",
    "QUANTILE_LABEL",
    "LABEL_NAME_RE",
    "LabelPair",
    "is_valid_label_name",
    "is_valid_label_value",
    "parse_label_name",
    "format_label_names",
]

ALERT_NAME_LABEL = "alertname"
EXPORTED_LABEL_PREFIX = "exported_"
METRIC_NAME_LABEL = "__name__"
SCHEME_LABEL = "__scheme__"
ADDRESS_LABEL = "__address__"
METRICS_PATH_LABEL = "__metrics_path__"
SCRAPE_INTERVAL_LABEL = "__scrape_interval__"
SCRAPE_TIMEOUT_LABEL = "__scrape_timeout__"
RESERVED_LABEL_PREFIX = "__"
META_LABEL_PREFIX = "__meta_"
TMP_LABEL_PREFIX = "__tmp_"
PARAM_LABEL_PREFIX = "__param_"
JOB_LABEL = "job"
INSTANCE_LABEL = "instance"
BUCKET_LABEL = "le"
QUANTILE_LABEL = "quantile"

# Use fullmatch: a plain "$" would also accept a trailing newline.
LABEL_NAME_RE = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")

_LABEL_NAME_FIRST = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
_LABEL_NAME_REST = _LABEL_NAME_FIRST | frozenset("0123456789")


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def is_valid_label_name(name: str) -> bool:
    """True iff name matches LABEL_NAME_RE."""
    if not isinstance(name, str) or not name:
        return False
    return name[0] in _LABEL_NAME_FIRST and all(c in _LABEL_NAME_REST for c in name[1:])


def is_valid_label_value(value: str | bytes) -> bool:
    """True iff the value is valid UTF-8 (a str without lone surrogates)."""
    try:
        if isinstance(value, bytes):
            value.decode("utf-8")
        else:
            value.encode("utf-8")
    except UnicodeError:
        return False
    return True


def parse_label_name(value: object) -> str:
    """Return value as a label name, raising ValueError if it is not valid."""
    if not isinstance(value, str):
        raise TypeError(f"label name must be a string, not {type(value).__name__}")
    if not is_valid_label_name(value):
        raise ValueError(f"{_quote(value)} is not a valid label name")
    return value


def format_label_names(names: Iterable[str]) -> str:
    """Join label names with ", "."""
    return ", ".join(names)


@dataclass(frozen=True, order=True)
class LabelPair:
    """A label name with its value; orders by name, then value."""

    name: str
    value: str