# File: messages.py

"""
Transient messages shown to the end user.

Listing operations never fail hard because of a backend problem; instead they
post a notice here and carry on with whatever they already have. Front-ends
either drain the queue after a call or register a callback.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

STATUS = 'status'
WARNING = 'warning'
ERROR = 'error'


class MessageQueue:
    """Collects transient messages for display."""

    def __init__(self):
        self.messages: List[Dict[str, Any]] = []
        self.message_callbacks: List[Callable[[Dict[str, Any]], None]] = []

    def register_message_callback(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        """
        Register a callback for new messages.

        Args:
            callback: Function to call with each message
        """
        self.message_callbacks.append(callback)

    def unregister_message_callback(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        """
        Unregister a message callback.

        Args:
            callback: Function to remove from callbacks
        """
        if callback in self.message_callbacks:
            self.message_callbacks.remove(callback)

    def set_message(self, text: str, level: str = STATUS) -> None:
        """
        Queue a message for the user.

        Args:
            text: Message text
            level: One of 'status', 'warning' or 'error'
        """
        message = {
            "text": text,
            "level": level,
            "timestamp": datetime.now().isoformat(),
        }
        self.messages.append(message)

        for callback in self.message_callbacks:
            try:
                callback(message)
            except Exception as e:
                logger.error(f"Error in message callback: {e}")

    def get_messages(self, clear: bool = True) -> List[Dict[str, Any]]:
        """
        Return queued messages.

        Args:
            clear: Empty the queue after reading

        Returns:
            List of message dictionaries
        """
        messages = list(self.messages)
        if clear:
            self.messages = []
        return messages
