import pytest
import requests
import responses

from probenotify.base import DEFAULT_CHANNEL_NAME, Format, NotifySettings, Retry
from probenotify.slack import SlackError, SlackNotify

URL = "https://hooks.example.com/services/slack"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


@pytest.fixture
def conf():
    notifier = SlackNotify(name="dummy", webhook_url=URL, retry=Retry(times=1))
    notifier.config(NotifySettings())
    return notifier


def test_config(conf):
    assert conf.kind == "slack"
    assert conf.format == Format.SLACK
    assert conf.channels == [DEFAULT_CHANNEL_NAME]
    assert conf.send_func == conf.send_slack


def test_send_ok(conf, rsps):
    rsps.add(responses.POST, URL, body="ok", status=200)
    assert conf.send_slack("title", "message") is None
    assert rsps.calls[0].request.body == b"message"
    assert rsps.calls[0].request.headers["Content-Type"] == "application/json"


def test_send_error_status(conf, rsps):
    rsps.add(responses.POST, URL, body="not found", status=404)
    with pytest.raises(SlackError) as exc:
        conf.send_slack("title", "message")
    assert str(exc.value) == "Error response from Slack - code [404] - msg [not found]"


def test_http_error(conf, rsps):
    rsps.add(responses.POST, URL, body=requests.ConnectionError("http do error"))
    with pytest.raises(requests.ConnectionError, match="http do error"):
        conf.send_slack("title", "message")


def test_bad_url():
    notifier = SlackNotify(name="dummy", webhook_url="")
    notifier.config(NotifySettings())
    with pytest.raises(requests.exceptions.MissingSchema):
        notifier.send_slack("title", "message")


def test_send_with_retry_reports_outcome(conf, rsps):
    rsps.add(responses.POST, URL, body="ok", status=200)
    assert conf.send_with_retry("title", "message", "Notification") is True
    rsps.replace(responses.POST, URL, body="bad", status=500)
    assert conf.send_with_retry("title", "message", "Notification") is False