import logging

import pytest

from src.adapter.services.notifier import (
    LogTransport,
    Notifier,
    Transport,
    TransportError,
    build_notifier,
)
from src.domain.entities import NotificationChannel
from tests.fakes import make_config


class FlakyTransport(Transport):
    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0

    async def deliver(self, destination, payload):
        self.calls += 1
        if self.calls <= self.failures:
            raise TransportError(f"provider unavailable (attempt {self.calls})")


@pytest.mark.asyncio
async def test_send_retries_until_delivered():
    transport = FlakyTransport(failures=2)
    notifier = Notifier({NotificationChannel.sms: transport}, retry_attempts=3, retry_delay_seconds=0)

    assert await notifier.send("+911234567890", NotificationChannel.sms, {"body": "hi"}) is True
    assert transport.calls == 3


@pytest.mark.asyncio
async def test_send_gives_up_after_bounded_attempts():
    transport = FlakyTransport(failures=10)
    notifier = Notifier({NotificationChannel.email: transport}, retry_attempts=3, retry_delay_seconds=0)

    assert await notifier.send("a@x.com", NotificationChannel.email, {"body": "hi"}) is False
    assert transport.calls == 3


@pytest.mark.asyncio
async def test_send_without_transport_for_channel_fails():
    notifier = Notifier({}, retry_attempts=3, retry_delay_seconds=0)

    assert await notifier.send("a@x.com", NotificationChannel.email, {"body": "hi"}) is False


@pytest.mark.asyncio
async def test_log_transport_masks_code_at_info(caplog):
    transport = LogTransport(NotificationChannel.sms)

    with caplog.at_level(logging.INFO, logger="src.adapter.services.notifier"):
        await transport.deliver("+911234567890", {"body": "Your verification code is 482913."})

    info_lines = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
    assert len(info_lines) == 1
    assert "482913" not in info_lines[0]
    assert "+911******90" in info_lines[0]


def test_build_notifier_selects_transports_by_backend():
    dev = build_notifier(make_config(NOTIFIER_BACKEND="log"))
    assert all(isinstance(t, LogTransport) for t in dev.transports.values())
    assert set(dev.transports) == {NotificationChannel.email, NotificationChannel.sms}
    assert dev.retry_attempts == 3
