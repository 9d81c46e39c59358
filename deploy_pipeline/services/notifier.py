# deploy_pipeline/services/notifier.py
"""Notification channels for deployment summaries"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Optional

import requests

from ..api.exceptions import NotificationError
from ..constants import TELEGRAM_API_URL, TELEGRAM_TIMEOUT, NotificationType
from ..models.config import NotificationConfig

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Outbound, fire-and-forget message channel"""

    @abstractmethod
    def notify(self, message: str) -> None:
        """
        Send a message

        Raises:
            NotificationError: If the channel rejected or never received it
        """
        pass


class NullNotifier(Notifier):
    """Channel that sends nothing"""

    def notify(self, message: str) -> None:
        logger.debug(f"Notification suppressed: {message}")


class LogNotifier(Notifier):
    """Channel that writes the message to the log"""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.logger = log or logger

    def notify(self, message: str) -> None:
        self.logger.info(message)


class TelegramNotifier(Notifier):
    """Send messages through the Telegram Bot API"""

    def __init__(self, token: str, chat_id: str, timeout: float = TELEGRAM_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.token = token
        self.chat_id = chat_id
        self.timeout = timeout
        self.session = session

    @property
    def url(self) -> str:
        return TELEGRAM_API_URL.format(token=self.token)

    def notify(self, message: str) -> None:
        post = self.session.post if self.session is not None else requests.post
        try:
            response = post(
                self.url,
                json={'chat_id': self.chat_id, 'text': message},
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            # the token is part of the URL, keep it out of the message
            raise NotificationError(
                f"Telegram sendMessage failed: {type(e).__name__}"
            ) from e

        logger.info("Deployment notification sent")


def create_notifier(config: NotificationConfig, enabled: bool = True) -> Notifier:
    """
    Create the notifier described by the configuration

    Args:
        config: Notification configuration
        enabled: False to suppress notifications entirely

    Returns:
        Notifier instance; Telegram without credentials falls back to the log
    """
    if not enabled or config.type == NotificationType.NONE:
        return NullNotifier()

    if config.type == NotificationType.TELEGRAM:
        token = os.environ.get(config.token_env)
        chat_id = os.environ.get(config.chat_id_env)
        if token and chat_id:
            return TelegramNotifier(token, chat_id)
        logger.warning(
            f"Telegram credentials not set ({config.token_env}, {config.chat_id_env}), "
            "notifications will only be logged"
        )

    return LogNotifier()
