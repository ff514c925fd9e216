"""Silences and the label matchers they are made of."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from .labels import is_valid_label_name, is_valid_label_value, parse_label_name

__all__ = ["Matcher", "Silence"]


def _quote(value: str) -> str:
    text = json.dumps(value, ensure_ascii=False)
    try:
        raw = text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        raw = text.encode("utf-8", "surrogatepass")
    return raw.decode("utf-8", "backslashreplace")


@dataclass
class Matcher:
    """Matches the value of one label, literally or by regular expression."""

    name: str
    value: str
    is_regex: bool = False

    def validate(self) -> None:
        """Raise ValueError unless every field has a valid value."""
        if not is_valid_label_name(self.name):
            raise ValueError(f"invalid name {_quote(str(self.name))}")
        if self.is_regex:
            try:
                re.compile(self.value)
            except re.error as err:
                raise ValueError(
                    f"invalid regular expression {_quote(self.value)}"
                ) from err
        elif not self.value or not is_valid_label_value(self.value):
            raise ValueError(f"invalid value {_quote(self.value)}")

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> Matcher:
        """Decode a matcher from a JSON object with name, value and isRegex."""
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("matcher must be a JSON object")
        name = parse_label_name(data["name"]) if "name" in data else ""
        value = data.get("value", "")
        is_regex = data.get("isRegex", False)
        if not isinstance(value, str):
            raise ValueError("matcher value must be a string")
        if not isinstance(is_regex, bool):
            raise ValueError("matcher isRegex must be a boolean")
        if not name:
            raise ValueError("label name in matcher must not be empty")
        if is_regex:
            try:
                re.compile(value)
            except re.error as err:
                raise ValueError(str(err)) from err
        return cls(name=name, value=value, is_regex=is_regex)


@dataclass
class Silence:
    """A silence definition: matchers, a time range and who set it up and why."""

    matchers: list[Matcher] = field(default_factory=list)
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    created_by: str = ""
    comment: str = ""
    id: int = 0

    def validate(self) -> None:
        """Raise ValueError unless every field has a valid value."""
        if not self.matchers:
            raise ValueError("at least one matcher required")
        for matcher in self.matchers:
            try:
                matcher.validate()
            except ValueError as err:
                raise ValueError(f"invalid matcher: {err}") from err
        if self.starts_at is None:
            raise ValueError("start time missing")
        if self.ends_at is None:
            raise ValueError("end time missing")
        if self.ends_at < self.starts_at:
            raise ValueError("start time must be before end time")
        if not self.created_by:
            raise ValueError("creator information missing")
        if not self.comment:
            raise ValueError("comment missing")
        if self.created_at is None:
            raise ValueError("creation timestamp missing")