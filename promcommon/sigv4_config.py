"""Configuration for signing requests with the AWS SigV4 process."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Union

import yaml

__all__ = ["SigV4Config"]


class _StrictLoader(yaml.BaseLoader):
    """Loads every scalar as a string and rejects duplicate mapping keys."""


def _construct_mapping(loader: _StrictLoader, node: yaml.MappingNode) -> dict:
    loader.flatten_mapping(node)
    seen = set()
    for key_node, _ in node.value:
        key = loader.construct_object(key_node, deep=True)
        if key in seen:
            raise yaml.constructor.ConstructorError(
                None, None, f"duplicate key {key!r}", key_node.start_mark
            )
        seen.add(key)
    return loader.construct_mapping(node, deep=True)


_StrictLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_mapping
)


@dataclass
class SigV4Config:
    """Region, credentials, profile and role for SigV4 signing.

    Empty values are left to the default credentials chain.
    """

    region: str = ""
    access_key: str = ""
    secret_key: str = field(default="", repr=False)
    profile: str = ""
    role_arn: str = ""

    def validate(self) -> None:
        """Raise ValueError if only one of access key and secret key is set."""
        if (self.access_key == "") != (self.secret_key == ""):
            raise ValueError(
                "must provide a AWS SigV4 Access key and Secret Key if "
                "credentials are specified in the SigV4 config"
            )

    @classmethod
    def from_yaml(cls, text: Union[str, bytes]) -> SigV4Config:
        """Decode and validate a config, rejecting unknown or duplicate keys."""
        try:
            data: Any = yaml.load(text, Loader=_StrictLoader)
        except yaml.YAMLError as err:
            raise ValueError(str(err)) from err
        if data is None or data == "":
            data = {}
        if not isinstance(data, dict):
            raise ValueError("sigv4 config must be a mapping")
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                raise ValueError(f"field {key} not found in sigv4 config")
            if not isinstance(value, str):
                raise ValueError(f"field {key} must be a string")
            values[key] = value
        config = cls(**values)
        config.validate()
        return config