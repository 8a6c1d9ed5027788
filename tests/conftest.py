"""In-memory stand-in for smtplib.SMTP / SMTP_SSL used by the mail tests."""

import smtplib

import pytest


class FakeSMTP:
    instances = []
    fail_login = False
    fail_connect = False
    fail_send = False

    def __init__(self, host, port, timeout=None):
        if FakeSMTP.fail_connect:
            raise smtplib.SMTPConnectError(421, b"service not available")
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        if FakeSMTP.fail_login:
            raise smtplib.SMTPAuthenticationError(535, b"bad credentials")
        self.logged_in = (user, password)

    def sendmail(self, sender, recipients, message):
        if FakeSMTP.fail_send:
            raise smtplib.SMTPDataError(554, b"rejected")
        self.sent.append((sender, recipients, message))

    @classmethod
    def reset(cls):
        cls.instances = []
        cls.fail_login = False
        cls.fail_connect = False
        cls.fail_send = False


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.reset()
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(smtplib, "SMTP_SSL", FakeSMTP)
    yield FakeSMTP
    FakeSMTP.reset()
