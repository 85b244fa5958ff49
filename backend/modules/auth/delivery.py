"""
Code delivery channels.

No SMS or email provider is wired yet; LoggingCodeSender writes codes to
the log so development and QA builds can complete the flows.

deliver_code() is what services call: it bounds the send with a timeout
and never raises, because a stored code stays valid whether or not the
message went out.
"""

import asyncio
import logging

from .interfaces import ICodeSender
from .models import CodeKind

logger = logging.getLogger(__name__)

DELIVERY_TIMEOUT = 5.0


class LoggingCodeSender:
    """ICodeSender that logs codes instead of sending them."""

    async def send(self, target: str, code: str, kind: CodeKind) -> None:
        logger.info(f"[DEV] {kind.value} code for {target}: {code}")


async def deliver_code(
    sender: ICodeSender,
    target: str,
    code: str,
    kind: CodeKind,
    timeout: float = DELIVERY_TIMEOUT,
) -> bool:
    """Hand a code to the delivery channel. Returns False if delivery failed."""
    try:
        await asyncio.wait_for(sender.send(target, code, kind), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Timed out delivering {kind.value} code to {target}")
        return False
    except Exception as e:
        logger.warning(f"Failed to deliver {kind.value} code to {target}: {e}")
        return False
    return True
