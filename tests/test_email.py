import smtplib
from unittest import mock

import pytest

from probenotify.base import DEFAULT_CHANNEL_NAME, Format, NotifySettings
from probenotify.email import EmailNotify


def make_fake_smtp(calls, fail=None, auth=True):
    class FakeSMTP:
        def __init__(self, host, port, timeout=None):
            calls.append(("connect", host, port))
            if fail == "connect":
                raise OSError("dial error")

        def ehlo_or_helo_if_needed(self):
            calls.append(("ehlo",))

        def has_extn(self, name):
            return auth and name.lower() == "auth"

        def login(self, user, password):
            calls.append(("login", user, password))
            if fail == "auth":
                raise smtplib.SMTPAuthenticationError(535, b"auth error")

        def mail(self, sender):
            calls.append(("mail", sender))
            if fail == "mail":
                return (550, b"mail error")
            return (250, b"ok")

        def rcpt(self, addr):
            calls.append(("rcpt", addr))
            if fail == "rcpt":
                return (550, b"rcpt error")
            return (250, b"ok")

        def data(self, msg):
            if fail == "data":
                raise smtplib.SMTPDataError(554, b"data error")
            calls.append(("data", msg))
            return (250, b"ok")

        def quit(self):
            calls.append(("quit",))
            return (221, b"bye")

        def close(self):
            calls.append(("close",))

    return FakeSMTP


@pytest.fixture
def conf():
    password = "password"
    c = EmailNotify(
        name="mail",
        server="smtp.example.com:465",
        user="user@example.com",
        password=password,
        to="a@example.com;b@example.com,c@example.com",
        sender="from@example.com",
    )
    c.config(NotifySettings())
    return c


def test_config(conf):
    assert conf.kind == "email"
    assert conf.format == Format.HTML
    assert conf.channels == [DEFAULT_CHANNEL_NAME]
    assert conf.send_func == conf.send_mail


def test_missing_port(conf):
    conf.server = "smtp.example.com"
    with pytest.raises(ValueError, match="missing port"):
        conf.send_mail("title", "message")


def test_send_ok(conf):
    calls = []
    with mock.patch("smtplib.SMTP_SSL", make_fake_smtp(calls)):
        assert conf.send_mail("title", "message") is None
    assert calls[0] == ("connect", "smtp.example.com", 465)
    assert ("login", "user@example.com", "password") in calls
    assert ("mail", "user@example.com") in calls
    rcpts = [c[1] for c in calls if c[0] == "rcpt"]
    assert rcpts == ["a@example.com", "b@example.com", "c@example.com"]
    data = next(c[1] for c in calls if c[0] == "data")
    assert b"From: from@example.com\r\n" in data
    assert b"Subject: title\r\n" in data
    assert b"Content-Type: text/html; charset=UTF-8\r\n" in data
    assert data.endswith(b"\r\n\r\nmessage")
    assert calls[-2:] == [("quit",), ("close",)]


def test_default_from_header(conf):
    conf.sender = ""
    calls = []
    with mock.patch("smtplib.SMTP_SSL", make_fake_smtp(calls)):
        assert conf.send_mail("title", "message") is None
    data = next(c[1] for c in calls if c[0] == "data")
    assert b"From: Notification<user@example.com>\r\n" in data


def test_no_auth_extension_skips_login(conf):
    calls = []
    with mock.patch("smtplib.SMTP_SSL", make_fake_smtp(calls, auth=False)):
        assert conf.send_mail("title", "message") is None
    assert not [c for c in calls if c[0] == "login"]
    assert ("quit",) in calls


def test_data_error(conf):
    calls = []
    with mock.patch("smtplib.SMTP_SSL", make_fake_smtp(calls, fail="data")):
        with pytest.raises(smtplib.SMTPDataError):
            conf.send_mail("title", "message")
    assert ("close",) in calls
    assert ("quit",) not in calls


def test_rcpt_error_stops_at_first(conf):
    calls = []
    with mock.patch("smtplib.SMTP_SSL", make_fake_smtp(calls, fail="rcpt")):
        with pytest.raises(smtplib.SMTPRecipientsRefused) as info:
            conf.send_mail("title", "message")
    assert list(info.value.recipients) == ["a@example.com"]
    assert [c for c in calls if c[0] == "rcpt"] == [("rcpt", "a@example.com")]


def test_mail_error(conf):
    calls = []
    with mock.patch("smtplib.SMTP_SSL", make_fake_smtp(calls, fail="mail")):
        with pytest.raises(smtplib.SMTPSenderRefused) as info:
            conf.send_mail("title", "message")
    assert info.value.smtp_code == 550


def test_auth_error(conf):
    calls = []
    with mock.patch("smtplib.SMTP_SSL", make_fake_smtp(calls, fail="auth")):
        with pytest.raises(smtplib.SMTPAuthenticationError):
            conf.send_mail("title", "message")
    assert not [c for c in calls if c[0] == "mail"]


def test_dial_error(conf):
    calls = []
    with mock.patch("smtplib.SMTP_SSL", make_fake_smtp(calls, fail="connect")):
        with pytest.raises(OSError, match="dial error"):
            conf.send_mail("title", "message")
    assert calls == [("connect", "smtp.example.com", 465)]