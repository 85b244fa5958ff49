"""Tests for code delivery."""

import asyncio
import logging

import pytest

from modules.auth.delivery import LoggingCodeSender, deliver_code
from modules.auth.models import CodeKind

from tests.fakes import RecordingCodeSender


class SlowSender:
    async def send(self, target, code, kind):
        await asyncio.sleep(1)


class TestDeliverCode:
    @pytest.mark.asyncio
    async def test_success(self):
        sender = RecordingCodeSender()

        assert await deliver_code(sender, "+15551234567", "042042", CodeKind.PHONE_LOGIN_OTP) is True
        assert sender.sent == [("+15551234567", "042042", CodeKind.PHONE_LOGIN_OTP)]

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, caplog):
        sender = RecordingCodeSender(error=ConnectionError("gateway down"))

        with caplog.at_level(logging.WARNING, logger="modules.auth.delivery"):
            delivered = await deliver_code(sender, "ana@example.com", "123456", CodeKind.EMAIL_VERIFY)

        assert delivered is False
        assert "gateway down" in caplog.text

    @pytest.mark.asyncio
    async def test_timeout_is_a_failed_delivery(self, caplog):
        with caplog.at_level(logging.WARNING, logger="modules.auth.delivery"):
            delivered = await deliver_code(SlowSender(), "+15551234567", "123456", CodeKind.PHONE_VERIFY, timeout=0.01)

        assert delivered is False
        assert "Timed out" in caplog.text


class TestLoggingCodeSender:
    @pytest.mark.asyncio
    async def test_logs_code(self, caplog):
        with caplog.at_level(logging.INFO, logger="modules.auth.delivery"):
            await LoggingCodeSender().send("+15551234567", "042042", CodeKind.PHONE_LOGIN_OTP)

        assert "042042" in caplog.text
