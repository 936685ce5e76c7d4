from abc import ABC, abstractmethod
from typing import Any, Dict

from src.domain.entities import NotificationChannel


class INotifier(ABC):
    """
    Email/SMS delivery capability consumed by the core.

    Implementations own their retry policy; callers only see the final outcome.
    """

    @abstractmethod
    async def send(
        self,
        destination: str,
        channel: NotificationChannel,
        payload: Dict[str, Any],
    ) -> bool:
        """
        Deliver a message.

        Args:
            destination: Email address or phone number
            channel: email or sms
            payload: "subject" (email only) and "body"

        Returns:
            True if the provider accepted the message
        """
        pass

    async def close(self) -> None:
        """Release transport resources"""
        pass
