"""
One-Way Notifications

DESIGN DECISION: Collaborators that live across a network (the
spreadsheet mirror, for now) are NOT part of the transaction flow.
The ledger commits and persists first, then hands a flattened copy of
the new transaction to the dispatcher and moves on.

GUARANTEES:
- dispatch() returns immediately; it never waits on a sink
- A failing sink is logged and audited, never raised to the caller
- No return value of a sink is ever observed by the ledger

Inside a running event loop the sinks become tasks on that loop.
Outside one (the usual synchronous case) they run on a small worker
pool, each delivery in its own short-lived event loop.
"""

import asyncio
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, field_serializer

from pocketledger.audit import AuditLogger, get_logger
from pocketledger.models.audit import AuditEventBuilder
from pocketledger.models.category import get_category
from pocketledger.models.transaction import (
    Currency,
    Transaction,
    TransactionType,
    serialize_amount,
)


logger = get_logger(__name__)


class TransactionAdded(BaseModel):
    """Flattened copy of a new transaction, as mirrored to the sheet."""
    model_config = ConfigDict(frozen=True)

    transaction_id: str
    date: datetime
    amount: Decimal
    type: TransactionType
    category_name: str
    note: str
    currency: Currency

    @field_serializer("amount", when_used="json")
    def dump_amount(self, value: Decimal) -> Union[int, float]:
        return serialize_amount(value)

    @classmethod
    def from_transaction(
        cls,
        transaction: Transaction,
        currency: Currency = Currency.VND,
    ) -> "TransactionAdded":
        return cls(
            transaction_id=transaction.id,
            date=transaction.date,
            amount=transaction.amount,
            type=transaction.type,
            category_name=get_category(transaction.category).name,
            note=transaction.note,
            currency=currency,
        )


class NotificationSink(ABC):
    """Receiver of new-transaction notifications."""

    name: str = "sink"

    @abstractmethod
    async def handle(self, payload: TransactionAdded) -> None:
        """
        Deliver one notification.

        May raise; the dispatcher contains the failure.
        """
        pass


class NotificationDispatcher:
    """
    Fire-and-forget delivery of notifications to every registered sink.
    """

    def __init__(
        self,
        sinks: Optional[Iterable[NotificationSink]] = None,
        audit_logger: Optional[AuditLogger] = None,
        max_workers: int = 2,
    ):
        self._sinks: list[NotificationSink] = list(sinks or [])
        self._audit_logger = audit_logger
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._futures: set[Future] = set()
        self._tasks: set[asyncio.Task] = set()
        self._lock = threading.Lock()

    @property
    def sinks(self) -> tuple[NotificationSink, ...]:
        return tuple(self._sinks)

    def add_sink(self, sink: NotificationSink) -> None:
        self._sinks.append(sink)

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="pocketledger-notify",
                )
            return self._executor

    async def _deliver(self, sink: NotificationSink, payload: TransactionAdded) -> None:
        try:
            await sink.handle(payload)
            logger.debug(
                "notification_delivered",
                sink=sink.name,
                transaction_id=payload.transaction_id,
            )
        except Exception as e:
            logger.warning(
                "notification_failed",
                sink=sink.name,
                transaction_id=payload.transaction_id,
                error=str(e),
            )
            if self._audit_logger:
                self._audit_logger.log(AuditEventBuilder.external_service_error(
                    service=sink.name,
                    error_message=str(e),
                    details={"transaction_id": payload.transaction_id},
                ))

    def _run_in_thread(self, sink: NotificationSink, payload: TransactionAdded) -> None:
        asyncio.run(self._deliver(sink, payload))

    def dispatch(self, payload: TransactionAdded) -> None:
        """Schedule delivery to every sink and return at once."""
        if not self._sinks:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        for sink in self._sinks:
            if loop is not None:
                task = loop.create_task(self._deliver(sink, payload))
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)
            else:
                future = self._get_executor().submit(self._run_in_thread, sink, payload)
                with self._lock:
                    self._futures.add(future)
                future.add_done_callback(self._forget)

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._futures.discard(future)

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._futures) + len(self._tasks)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until worker-thread deliveries finish.

        Returns True if nothing is left pending in the worker pool.
        """
        with self._lock:
            futures = list(self._futures)
        if not futures:
            return True
        _, not_done = wait_futures(futures, timeout=timeout)
        return not not_done

    async def drain(self) -> None:
        """Await deliveries scheduled on the running event loop."""
        tasks = list(self._tasks)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def close(self, timeout: Optional[float] = None) -> None:
        """Wait for pending deliveries, then stop the worker pool."""
        self.wait(timeout)
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False)
