# src/taskboard/notify.py

from __future__ import annotations

import logging
from datetime import datetime

from .core.ports import Severity

logger = logging.getLogger(__name__)

_LEVELS = {
    Severity.SUCCESS: logging.INFO,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class LoggingNotifier:
    """Notices go to the log only (headless runs, scripts)."""

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        logger.log(_LEVELS.get(Severity(severity), logging.INFO), "[%s] %s", severity, message)


class ConsoleNotifier:
    """Print notices for the interactive console; also keep them in the debug log."""

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        tag = Severity(severity).value.upper()
        print(f"[{_ts_local()}] [{tag}] {message}", flush=True)
        logger.debug("notify severity=%s message=%s", severity, message)
