"""Message exchange simulator.

This module defines the Message record, the MessageExchange that keeps the
chat log and fabricates remote replies, and the TerminalInput control the user
types into.
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from echo_mesh.config import DashboardConfig
from echo_mesh.core.enums import MessageSender
from echo_mesh.core.hooks import HookRegistry
from echo_mesh.traffic.generators import canned_response, encryption_flag
from echo_mesh.utils.rng import SyntheticSource

logger = logging.getLogger(__name__)

ENCRYPTED_BANNER = "MESSAGE WILL BE ENCRYPTED WITH AES-256-GCM"
PLAINTEXT_BANNER = "WARNING: MESSAGE WILL BE SENT UNENCRYPTED"


@dataclass(frozen=True)
class Message:
    """One chat line.

    Attributes:
        id: Unique identifier, monotonic by creation.
        content: Text of the message.
        encrypted: Whether the message is flagged as encrypted.
        sender: LOCAL for user input, REMOTE for simulated replies.
        timestamp: Creation time in milliseconds.
        hash: Short synthetic identifier shown next to the message.
    """

    id: int
    content: str
    encrypted: bool
    sender: MessageSender
    timestamp: float
    hash: str

    @property
    def direction(self) -> str:
        return "TX" if self.sender is MessageSender.LOCAL else "RX"


class MessageExchange(HookRegistry):
    """Owns the chat log.

    Attributes:
        config: Session configuration.
        source: Random source for hashes and remote replies.
        clock: Returns the current time in milliseconds.
        hooks: Callbacks keyed by event type.
    """

    def __init__(
        self,
        config: DashboardConfig,
        source: SyntheticSource,
        clock: Callable[[], float],
    ):
        self.config = config
        self.source = source
        self.clock = clock
        self._log: List[Message] = []
        self._ids = itertools.count(1)
        self._next_response = canned_response(source, config.responses)
        self._next_encrypted = encryption_flag(
            source, config.remote_encryption_probability
        )

        self.hooks: Dict[str, List[Callable[..., Any]]] = {
            "message_added": [],  # any message appended to the log
            "message_sent": [],  # the user sent a message
        }

    @property
    def messages(self) -> Tuple[Message, ...]:
        """Read-only snapshot of the log in insertion order."""
        return tuple(self._log)

    def __len__(self) -> int:
        return len(self._log)

    def _append(self, content: str, encrypted: bool, sender: MessageSender) -> Message:
        message = Message(
            id=next(self._ids),
            content=content,
            encrypted=encrypted,
            sender=sender,
            timestamp=self.clock(),
            hash=self.source.hex_digest(self.config.hash_length),
        )
        self._log.append(message)
        self.call_hooks("message_added", message)
        return message

    def submit(self, content: str, encrypted: bool) -> Optional[Message]:
        """Send a message typed by the user.

        Args:
            content: Raw text. Surrounding whitespace is stripped.
            encrypted: State of the encryption toggle.

        Returns:
            The appended Message, or None if the content was blank.
        """
        content = content.strip()
        if not content:
            return None
        message = self._append(content, encrypted, MessageSender.LOCAL)
        logger.debug("Local message %d (#%s)", message.id, message.hash)
        self.call_hooks("message_sent", content, encrypted)
        return message

    def on_remote_tick(self, now: float) -> Optional[Message]:
        """Maybe inject a reply from the simulated peer.

        Nothing happens until the user has sent something.

        Args:
            now: Current time in milliseconds.

        Returns:
            The injected Message, or None.
        """
        if not self._log:
            return None
        if not self.source.chance(self.config.remote_probability):
            return None
        message = self._append(
            self._next_response(), self._next_encrypted(), MessageSender.REMOTE
        )
        logger.debug("Remote message %d at %.0f ms", message.id, now)
        return message


class TerminalInput:
    """Text field plus encryption toggle feeding a MessageExchange."""

    def __init__(self, exchange: MessageExchange, encrypted: bool = True):
        self.exchange = exchange
        self.text = ""
        self.encrypted = encrypted

    def type(self, text: str) -> None:
        self.text += text

    def toggle_encryption(self) -> bool:
        self.encrypted = not self.encrypted
        return self.encrypted

    @property
    def can_send(self) -> bool:
        return bool(self.text.strip())

    def send(self) -> Optional[Message]:
        """Submit the buffer; it is cleared only when a message was sent."""
        message = self.exchange.submit(self.text, self.encrypted)
        if message is not None:
            self.text = ""
        return message

    def mode_banner(self) -> str:
        return ENCRYPTED_BANNER if self.encrypted else PLAINTEXT_BANNER
