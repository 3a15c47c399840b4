"""
Command Queue
=============

Per-plant mailboxes of pending commands.

HOW IT WORKS:
------------
1. A user issues a command for a plant they own -> enqueue()
2. The plant polls on its own schedule -> drain()
3. drain() hands back everything queued so far, oldest first, and empties
   the mailbox in the same step

Each command is delivered to exactly one drain. Draining a plant with
nothing queued (or a plant we have never heard of) gives an empty list.

THIS LIVES IN MEMORY ONLY:
-------------------------
Pending commands are lost when the process restarts;
the plant simply never sees them and the user can issue them again.

This class does not check ownership and knows nothing about the database.
Callers must confirm the user owns the plant before calling enqueue().
"""

import logging
import threading
from collections import deque

logger = logging.getLogger(__name__)


class CommandQueue:
    """
    Thread-safe mailbox store keyed by plant ID.

    FastAPI runs sync endpoints in a thread pool, so enqueue and drain can
    race. One lock guards the whole map; it is only ever held for
    in-memory list operations.
    """

    def __init__(self, max_commands_per_plant: int = 0):
        """
        Args:
            max_commands_per_plant: Maximum pending commands per plant. When
                reached, the oldest command is dropped to make room. 0 means
                no limit.
        """
        if max_commands_per_plant < 0:
            raise ValueError("max_commands_per_plant must be >= 0")
        self.max_commands_per_plant = max_commands_per_plant
        self._mailboxes: dict[str, deque[str]] = {}
        self._lock = threading.Lock()

    def enqueue(self, plant_id: str, command: str):
        """Append `command` to the plant's mailbox, creating it if needed."""
        dropped = None
        with self._lock:
            mailbox = self._mailboxes.get(plant_id)
            if mailbox is None:
                mailbox = deque()
                self._mailboxes[plant_id] = mailbox
            if self.max_commands_per_plant and len(mailbox) >= self.max_commands_per_plant:
                dropped = mailbox.popleft()
            mailbox.append(command)
            pending = len(mailbox)

        if dropped is not None:
            logger.warning(
                f"[{plant_id}] Mailbox full ({self.max_commands_per_plant}), "
                f"dropped oldest command {dropped!r}"
            )
        logger.debug(f"[{plant_id}] Queued command {command!r} ({pending} pending)")

    def drain(self, plant_id: str) -> list[str]:
        """
        Take every pending command for the plant, oldest first.

        The mailbox is removed under the lock, so a command queued while this
        runs ends up either in this result or in the next drain, never both.
        """
        with self._lock:
            mailbox = self._mailboxes.pop(plant_id, None)

        if not mailbox:
            return []

        commands = list(mailbox)
        logger.debug(f"[{plant_id}] Drained {len(commands)} command(s)")
        return commands

    def pending_count(self, plant_id: str) -> int:
        """How many commands are waiting for this plant."""
        with self._lock:
            mailbox = self._mailboxes.get(plant_id)
            return len(mailbox) if mailbox else 0

    def clear(self):
        """Drop every mailbox."""
        with self._lock:
            total = sum(len(m) for m in self._mailboxes.values())
            self._mailboxes.clear()
        if total:
            logger.warning(f"Discarded {total} pending command(s)")

    def __len__(self) -> int:
        """Number of plants with at least one pending command."""
        with self._lock:
            return len(self._mailboxes)
