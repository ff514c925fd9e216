"""FNV-1a based fingerprints and signatures for label sets."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Optional

__all__ = [
    "SEPARATOR_BYTE",
    "Fingerprint",
    "fingerprint_from_string",
    "parse_fingerprint",
    "labels_to_signature",
    "fingerprint_of",
    "fast_fingerprint_of",
    "signature_for_labels",
    "signature_without_labels",
]

_OFFSET64 = 14695981039346656037
_PRIME64 = 1099511628211
_MASK64 = (1 << 64) - 1

# A byte that cannot occur in valid UTF-8; separates names and values when hashing.
SEPARATOR_BYTE = 255

_EMPTY_LABEL_SIGNATURE = _OFFSET64
_HEX_RE = re.compile(r"[0-9a-fA-F]+")


def _to_bytes(s: str) -> bytes:
    # surrogateescape keeps undecodable bytes (e.g. "\udcff") as their raw value.
    return s.encode("utf-8", "surrogateescape")


def _hash_add(h: int, s: str) -> int:
    for b in _to_bytes(s):
        h = ((h ^ b) * _PRIME64) & _MASK64
    return h


def _hash_add_byte(h: int, b: int) -> int:
    return ((h ^ b) * _PRIME64) & _MASK64


def _hash_pairs(pairs: Iterable[tuple[str, str]]) -> int:
    total = _OFFSET64
    for name, value in pairs:
        total = _hash_add(total, name)
        total = _hash_add_byte(total, SEPARATOR_BYTE)
        total = _hash_add(total, value)
        total = _hash_add_byte(total, SEPARATOR_BYTE)
    return total


class Fingerprint(int):
    """A 64-bit hash of a label set, shown as 16 hex digits."""

    def __new__(cls, value: int = 0) -> "Fingerprint":
        value = int(value)
        if not 0 <= value <= _MASK64:
            raise ValueError(f"fingerprint out of range: {value}")
        return super().__new__(cls, value)

    def __str__(self) -> str:
        return format(int(self), "016x")

    def __repr__(self) -> str:
        return f"Fingerprint(0x{self})"


def parse_fingerprint(s: str) -> Fingerprint:
    """Parse a hexadecimal string into a Fingerprint."""
    if not isinstance(s, str) or not _HEX_RE.fullmatch(s):
        raise ValueError(f"invalid syntax for fingerprint: {s!r}")
    value = int(s, 16)
    if value > _MASK64:
        raise ValueError(f"value out of range for fingerprint: {s!r}")
    return Fingerprint(value)


def fingerprint_from_string(s: str) -> Fingerprint:
    """Transform a hexadecimal string representation into a Fingerprint."""
    return parse_fingerprint(s)


def labels_to_signature(labels: Optional[Mapping[str, str]]) -> int:
    """Return a quasi-unique signature for a plain name-to-value mapping."""
    if not labels:
        return _EMPTY_LABEL_SIGNATURE
    return _hash_pairs((name, labels[name]) for name in sorted(labels))


def fingerprint_of(labels: Optional[Mapping[str, str]]) -> Fingerprint:
    """Return the fingerprint of a label set."""
    return Fingerprint(labels_to_signature(labels))


def fast_fingerprint_of(labels: Optional[Mapping[str, str]]) -> Fingerprint:
    """Return an order-independent fingerprint that is cheaper but collides more easily."""
    if not labels:
        return Fingerprint(_EMPTY_LABEL_SIGNATURE)
    result = 0
    for name, value in labels.items():
        total = _hash_add(_OFFSET64, name)
        total = _hash_add_byte(total, SEPARATOR_BYTE)
        total = _hash_add(total, value)
        result ^= total
    return Fingerprint(result)


def signature_for_labels(metric: Mapping[str, str], *args: str) -> int:
    """Signature over only the given label names; missing labels count as empty."""
    if not args:
        return _EMPTY_LABEL_SIGNATURE
    return _hash_pairs((name, metric.get(name, "")) for name in sorted(args))


def signature_without_labels(
    metric: Mapping[str, str], labels: Optional[Iterable[str]]
) -> int:
    """Signature over all labels of the metric except the excluded names."""
    if not metric:
        return _EMPTY_LABEL_SIGNATURE
    excluded = set(labels) if labels is not None else set()
    names = sorted(name for name in metric if name not in excluded)
    if not names:
        return _EMPTY_LABEL_SIGNATURE
    return _hash_pairs((name, metric[name]) for name in names)