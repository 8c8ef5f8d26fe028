"""SMS provider types and the options shared by every SMS provider."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Union

import yaml

from probenotify.base import DefaultNotify

_ENUM_LABEL = "SMS Provider"


class ProviderType(IntEnum):
    """The supported SMS providers."""

    UNKNOWN = 0
    YUNPIAN = 1
    TWILIO = 2
    NEXMO = 3

    def __str__(self) -> str:
        return PROVIDER_NAMES[self]


PROVIDER_NAMES: dict[ProviderType, str] = {
    ProviderType.YUNPIAN: "yunpian",
    ProviderType.TWILIO: "twilio",
    ProviderType.NEXMO: "nexmo",
    ProviderType.UNKNOWN: "unknown",
}

PROVIDER_TYPES: dict[str, ProviderType] = {name: kind for kind, name in PROVIDER_NAMES.items()}


def provider_type_from_name(name: str) -> ProviderType:
    """Return the provider for ``name``, or UNKNOWN when there is none."""
    return PROVIDER_TYPES.get(name, ProviderType.UNKNOWN)


def _name_of(provider: Union[ProviderType, int]) -> str:
    try:
        return PROVIDER_NAMES[ProviderType(provider)]
    except ValueError:
        raise ValueError(f"{_ENUM_LABEL} {provider} is not supported") from None


def _type_of(value: object) -> ProviderType:
    if not isinstance(value, str):
        raise ValueError(f"{_ENUM_LABEL} must be a string, got {value!r}")
    try:
        return PROVIDER_TYPES[value]
    except KeyError:
        raise ValueError(f"{_ENUM_LABEL} {value!r} is not supported") from None


def provider_to_json(provider: Union[ProviderType, int]) -> str:
    """Encode a provider as a JSON string."""
    return json.dumps(_name_of(provider))


def provider_from_json(text: str) -> ProviderType:
    """Decode a provider from a JSON string; raise ValueError if it is not one."""
    return _type_of(json.loads(text))


def provider_to_yaml(provider: Union[ProviderType, int]) -> str:
    """Encode a provider as a YAML document."""
    dumped = yaml.safe_dump(_name_of(provider))
    end_marker = "...\n"
    if dumped.endswith(end_marker):
        dumped = dumped[: -len(end_marker)]
    return dumped


def provider_from_yaml(text: str) -> ProviderType:
    """Decode a provider from a YAML document; raise ValueError if it is not one."""
    try:
        value = yaml.safe_load(text)
    except yaml.YAMLError as err:
        raise ValueError(f"{_ENUM_LABEL}: invalid YAML - {err}") from err
    return _type_of(value)


@dataclass
class SmsOptions(DefaultNotify):
    """Configuration common to the SMS providers."""

    provider_type: ProviderType = ProviderType.UNKNOWN
    mobile: str = ""
    sender: str = ""
    key: str = ""
    secret: str = ""
    url: str = ""
    sign: str = ""