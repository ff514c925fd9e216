"""Leveled key/value loggers with a standard timestamp and caller annotation."""

from __future__ import annotations

import json
import os
import sys
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, TextIO, Union

import yaml

__all__ = [
    "AllowedLevel",
    "AllowedFormat",
    "Config",
    "Logger",
    "DynamicLogger",
    "new",
    "new_dynamic",
]

_LEVEL_RANKS = {"debug": 0, "info": 1, "warn": 2, "error": 3}
_FORMATS = ("logfmt", "json")
_MISSING_VALUE = "(MISSING)"
_THIS_FILE = os.path.normcase(os.path.abspath(__file__))


class AllowedLevel:
    """The minimum level that a log entry must have to be written."""

    def __init__(self, value: str = "") -> None:
        self.value = ""
        self._rank = 0
        if value:
            self.set(value)

    def set(self, s: str) -> None:
        """Set the level to one of debug, info, warn or error."""
        if s not in _LEVEL_RANKS:
            raise ValueError(f"unrecognized log level {json.dumps(s)}")
        self._rank = _LEVEL_RANKS[s]
        self.value = s

    @property
    def rank(self) -> int:
        return self._rank

    @classmethod
    def from_yaml(cls, text: Union[str, bytes]) -> AllowedLevel:
        """Decode a level from a YAML scalar; an empty document leaves it unset."""
        data = yaml.safe_load(text)
        if data is None or data == "":
            return cls()
        if not isinstance(data, str):
            raise ValueError("log level must be a string")
        return cls(data)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"AllowedLevel({self.value!r})"


class AllowedFormat:
    """The output format of a logger: logfmt or json."""

    def __init__(self, value: str = "") -> None:
        self.value = ""
        if value:
            self.set(value)

    def set(self, s: str) -> None:
        """Set the format to logfmt or json."""
        if s not in _FORMATS:
            raise ValueError(f"unrecognized log format {json.dumps(s)}")
        self.value = s

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"AllowedFormat({self.value!r})"


@dataclass
class Config:
    """Settings for creating a logger."""

    level: Optional[AllowedLevel] = None
    format: Optional[AllowedFormat] = None


class _Valuer:
    """A context value computed anew for every log entry."""

    def __init__(self, func: Callable[[], Any]) -> None:
        self._func = func

    def __call__(self) -> Any:
        return self._func()


def _timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def _in_this_module(filename: str) -> bool:
    return os.path.normcase(os.path.abspath(filename)) == _THIS_FILE


def _caller() -> str:
    frame = sys._getframe(1)
    while frame is not None and _in_this_module(frame.f_code.co_filename):
        frame = frame.f_back
    if frame is None:
        return "???"
    return f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"


_DEFAULT_CONTEXT = ("ts", _Valuer(_timestamp), "caller", _Valuer(_caller))


def _pairs(keyvals: tuple) -> list[tuple[Any, Any]]:
    items = list(keyvals)
    if len(items) % 2:
        items.append(_MISSING_VALUE)
    return list(zip(items[::2], items[1::2]))


def _needs_quoting(text: str) -> bool:
    return text == "" or any(
        c <= " " or c in '="\\' or not c.isprintable() for c in text
    )


def _logfmt_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _logfmt_key(key: Any) -> str:
    text = _logfmt_text(key)
    if not text:
        raise ValueError("invalid key")
    return "".join("_" if c <= " " or c in '="' or not c.isprintable() else c for c in text)


def _logfmt_value(value: Any) -> str:
    text = _logfmt_text(value)
    return json.dumps(text, ensure_ascii=False) if _needs_quoting(text) else text


def _json_value(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class _StreamSink:
    """Writes each entry as one line of logfmt or JSON, one writer at a time."""

    def __init__(self, stream: TextIO, use_json: bool) -> None:
        self._stream = stream
        self._json = use_json
        self._lock = threading.Lock()

    def _format(self, keyvals: tuple) -> str:
        pairs = _pairs(keyvals)
        if self._json:
            record = {str(key): _json_value(value) for key, value in pairs}
            return json.dumps(record, sort_keys=True, ensure_ascii=False)
        return " ".join(f"{_logfmt_key(k)}={_logfmt_value(v)}" for k, v in pairs)

    def log(self, *keyvals: Any) -> None:
        line = self._format(keyvals)
        with self._lock:
            self._stream.write(line + "\n")
            self._stream.flush()


class Logger:
    """Writes key/value entries to a sink, with context and an optional level filter."""

    def __init__(
        self,
        sink: Any,
        context: tuple = (),
        level: Optional[AllowedLevel] = None,
    ) -> None:
        self._sink = sink
        self._context = tuple(context)
        self._min_rank = level.rank if level is not None else None

    def _allowed(self, keyvals: tuple) -> bool:
        if self._min_rank is None:
            return True
        for key, value in _pairs(keyvals):
            if key == "level" and value in _LEVEL_RANKS:
                return _LEVEL_RANKS[value] >= self._min_rank
        return True

    def log(self, *args: Any) -> None:
        """Write one entry made of alternating keys and values."""
        if not self._allowed(args):
            return
        context = tuple(v() if isinstance(v, _Valuer) else v for v in self._context)
        self._sink.log(*context, *args)

    def debug(self, *args: Any) -> None:
        self.log("level", "debug", *args)

    def info(self, *args: Any) -> None:
        self.log("level", "info", *args)

    def warn(self, *args: Any) -> None:
        self.log("level", "warn", *args)

    def error(self, *args: Any) -> None:
        self.log("level", "error", *args)


class DynamicLogger(Logger):
    """A logger whose level can be changed while it is in use."""

    def __init__(self, base: Any) -> None:
        self.base = base
        self._leveled: Any = base
        self._current_level: Optional[AllowedLevel] = None
        self._lock = threading.Lock()

    @property
    def current_level(self) -> Optional[AllowedLevel]:
        return self._current_level

    def log(self, *args: Any) -> None:
        with self._lock:
            self._leveled.log(*args)

    def set_level(self, level: Optional[AllowedLevel]) -> None:
        """Change the minimum level; None removes the filter."""
        with self._lock:
            if level is None:
                self._leveled = Logger(self.base, _DEFAULT_CONTEXT)
                self._current_level = None
                return
            current = self._current_level
            if current is not None and current.value != level.value:
                self.base.log(
                    "msg", "Log level changed", "prev", current, "current", level
                )
            self._current_level = level
            self._leveled = Logger(self.base, _DEFAULT_CONTEXT, level)


def _sink_for(config: Config, stream: Optional[TextIO]) -> _StreamSink:
    use_json = config.format is not None and config.format.value == "json"
    return _StreamSink(stream if stream is not None else sys.stderr, use_json)


def new(config: Config, stream: Optional[TextIO] = None) -> Logger:
    """Return a logger annotating every entry with a timestamp and the caller."""
    return Logger(_sink_for(config, stream), _DEFAULT_CONTEXT, config.level)


def new_dynamic(config: Config, stream: Optional[TextIO] = None) -> DynamicLogger:
    """Return a logger whose level can be changed later."""
    logger = DynamicLogger(_sink_for(config, stream))
    if config.level is not None:
        logger.set_level(config.level)
    return logger