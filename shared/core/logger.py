import json
import logging

from shared.core.config import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)


class AppLogger:
    """Structured logger: `message | {"key": "value"}`."""

    def __init__(self, name: str = "app"):
        self.logger = logging.getLogger(name)

    def info(self, message: str, meta: dict = None):
        self.logger.info(self._format(message, meta))

    def warn(self, message: str, meta: dict = None):
        self.logger.warning(self._format(message, meta))

    def error(self, message: str, meta: dict = None, exc_info: bool = False):
        self.logger.error(self._format(message, meta), exc_info=exc_info)

    @staticmethod
    def _format(message: str, meta: dict = None) -> str:
        if not meta:
            return message
        # default=str covers UUIDs, datetimes and exceptions
        return f"{message} | {json.dumps(meta, default=str)}"
