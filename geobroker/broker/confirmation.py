"""
Confirmation Broker
-------------------
Pairs a request thread blocked on the HTTP connection with a decision taken by
the operator from the UI side. Every pending entry owns a single-use reply
channel (a ``concurrent.futures.Future``) and is resolved exactly once: by a
confirmation, a rejection, or the timeout.
"""
import enum
import logging
import threading
import time
import uuid
from collections import OrderedDict
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from geobroker.broker.events import CONFIRMATION_NEEDED, CONFIRMATION_RESOLVED, EventBus
from geobroker.models.record import AddressRecord

DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger(__name__)


class Outcome(str, enum.Enum):
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class Resolution:
    outcome: Outcome
    record: AddressRecord


@dataclass
class PendingEntry:
    request_id: str
    record: AddressRecord
    deadline: float
    reply: "Future[Resolution]" = field(default_factory=Future)


class WaitHandle:
    """Returned by ``submit``; the request thread blocks on ``wait``."""

    def __init__(self, broker: "ConfirmationBroker", entry: PendingEntry):
        self._broker = broker
        self._entry = entry

    @property
    def request_id(self) -> str:
        return self._entry.request_id

    def wait(self, timeout: Optional[float] = None) -> Resolution:
        """
        Block until the entry is resolved or its deadline passes.

        ``timeout`` overrides the remaining time until the broker deadline.
        On timeout the entry is withdrawn; if a decision slipped in first, that
        decision is returned instead.
        """
        if timeout is None:
            timeout = max(0.0, self._entry.deadline - time.monotonic())
        try:
            return self._entry.reply.result(timeout=timeout)
        except FutureTimeout:
            if self._broker._withdraw(self.request_id):
                logger.warning(f"Confirmation {self.request_id} timed out after {self._broker.timeout:.0f}s")
                resolution = Resolution(Outcome.TIMEOUT, AddressRecord.timed_out())
                self._broker._announce(self.request_id, resolution)
                return resolution
            # Popped by a decision that has not set its result yet
            return self._entry.reply.result()


class ConfirmationBroker:
    def __init__(self, events: Optional[EventBus] = None, timeout: float = DEFAULT_TIMEOUT):
        self.events = events or EventBus()
        self.timeout = timeout
        self._pending: "OrderedDict[str, PendingEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def submit(self, record: AddressRecord) -> WaitHandle:
        entry = PendingEntry(
            request_id=uuid.uuid4().hex,
            record=record,
            deadline=time.monotonic() + self.timeout,
        )
        with self._lock:
            self._pending[entry.request_id] = entry
        logger.info(f"Awaiting confirmation {entry.request_id}")
        self.events.emit(CONFIRMATION_NEEDED, {"request_id": entry.request_id, "record": record.to_wire()})
        return WaitHandle(self, entry)

    def decide(self, decision: Optional[AddressRecord], request_id: Optional[str] = None) -> bool:
        """
        Resolve one pending entry with a record (confirm) or ``None`` (reject).

        With ``request_id`` only that entry is eligible; without it the oldest
        pending entry is resolved. Returns False when nothing was pending.
        """
        with self._lock:
            entry = self._take(request_id)
        if entry is None:
            logger.info(f"No pending confirmation for decision (request_id={request_id})")
            return False

        if decision is None:
            resolution = Resolution(Outcome.REJECTED, AddressRecord.rejected())
        else:
            if decision.gen_type in (None, "auto"):
                decision = decision.model_copy(update={"gen_type": "manual"})
            resolution = Resolution(Outcome.CONFIRMED, decision)
        entry.reply.set_result(resolution)
        logger.info(f"Confirmation {entry.request_id} {resolution.outcome.value}")
        self._announce(entry.request_id, resolution)
        return True

    def confirm(self, record: AddressRecord, request_id: Optional[str] = None) -> bool:
        return self.decide(record, request_id)

    def reject(self, request_id: Optional[str] = None) -> bool:
        return self.decide(None, request_id)

    def pending(self) -> List[Tuple[str, AddressRecord]]:
        with self._lock:
            return [(entry.request_id, entry.record) for entry in self._pending.values()]

    def cancel_all(self) -> int:
        """Resolve every pending entry as timed out, e.g. on shutdown."""
        with self._lock:
            entries = list(self._pending.values())
            self._pending.clear()
        for entry in entries:
            resolution = Resolution(Outcome.TIMEOUT, AddressRecord.timed_out())
            entry.reply.set_result(resolution)
            self._announce(entry.request_id, resolution)
        if entries:
            logger.info(f"Cancelled {len(entries)} pending confirmations")
        return len(entries)

    def _take(self, request_id: Optional[str]) -> Optional[PendingEntry]:
        if request_id is not None:
            return self._pending.pop(request_id, None)
        if not self._pending:
            return None
        _, entry = self._pending.popitem(last=False)
        return entry

    def _withdraw(self, request_id: str) -> bool:
        with self._lock:
            return self._pending.pop(request_id, None) is not None

    def _announce(self, request_id: str, resolution: Resolution) -> None:
        self.events.emit(
            CONFIRMATION_RESOLVED,
            {"request_id": request_id, "outcome": resolution.outcome.value},
        )


def pending_as_dicts(pending: List[Tuple[str, AddressRecord]]) -> List[Dict[str, object]]:
    return [{"request_id": request_id, "record": record.to_wire()} for request_id, record in pending]
