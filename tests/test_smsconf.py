import pytest

from probenotify.base import DEFAULT_CHANNEL_NAME, NotifySettings
from probenotify.smsconf import (
    ProviderType,
    SmsOptions,
    provider_from_json,
    provider_from_yaml,
    provider_to_json,
    provider_to_yaml,
    provider_type_from_name,
)

GOOD = [
    ("yunpian", ProviderType.YUNPIAN),
    ("twilio", ProviderType.TWILIO),
    ("nexmo", ProviderType.NEXMO),
    ("unknown", ProviderType.UNKNOWN),
]


@pytest.mark.parametrize("name,provider", GOOD)
def test_yaml_round_trip(name, provider):
    assert provider_from_yaml(name + "\n") == provider
    assert provider_to_yaml(provider) == name + "\n"


@pytest.mark.parametrize("name,provider", GOOD)
def test_json_round_trip(name, provider):
    assert provider_from_json('"' + name + '"') == provider
    assert provider_to_json(provider) == '"' + name + '"'


def test_bad_name_rejected():
    with pytest.raises(ValueError):
        provider_from_yaml("bad\n")
    with pytest.raises(ValueError):
        provider_from_json('"bad"')


def test_unknown_value_cannot_be_encoded():
    with pytest.raises(ValueError):
        provider_to_yaml(10)
    with pytest.raises(ValueError):
        provider_to_json(10)


def test_yaml_list_rejected():
    with pytest.raises(ValueError):
        provider_from_yaml("- xxx")


def test_json_object_rejected():
    with pytest.raises(ValueError):
        provider_from_json('{"x":"y"}')


def test_str_of_provider():
    assert str(provider_type_from_name("yunpian")) == "yunpian"
    assert str(provider_type_from_name("unknown")) == "unknown"
    assert str(provider_type_from_name("bad")) == "unknown"


def test_provider_type_from_name():
    assert provider_type_from_name("bad") == ProviderType.UNKNOWN
    assert provider_type_from_name("nexmo") == ProviderType.NEXMO


def test_options_configure_like_a_notifier():
    opts = SmsOptions(name="sms", key="placeholder", secret="secret", mobile="0000")
    assert opts.provider_type == ProviderType.UNKNOWN
    opts.config(NotifySettings())
    assert opts.channels == [DEFAULT_CHANNEL_NAME]
    assert opts.key == "placeholder"