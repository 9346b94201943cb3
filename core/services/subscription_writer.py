# =============================================================================
# core/services/subscription_writer.py - Serialized Store Writes
# =============================================================================
# All appends to the subscriber store go through one asyncio task fed by a
# queue. Request handlers enqueue a record and await its future; the task
# runs the appends one at a time, so the store's read-check-write sequence
# never interleaves with another write inside this process.
#
# Usage:
#   writer = SubscriptionWriter(store)
#   writer.start()                      # from the app lifespan
#   stored = await writer.submit(record)
#   await writer.stop()
# =============================================================================

import asyncio
import logging

from core.models.subscriber import Subscriber
from core.services.subscriber_store import SubscriberStore

logger = logging.getLogger(__name__)

# How long stop() waits for queued appends to finish
DRAIN_TIMEOUT_SECONDS = 5.0


class WriterNotRunningError(RuntimeError):
    """Raised when a record is submitted while the writer is stopped."""


class SubscriptionWriter:
    """
    Single consumer that performs every SubscriberStore.append.

    A failure in one append is delivered to the caller that submitted it;
    the consumer keeps serving the rest of the queue.
    """

    def __init__(self, store: SubscriberStore):
        self.store = store
        self._queue: asyncio.Queue[tuple[Subscriber, asyncio.Future]] | None = None
        self._task: asyncio.Task | None = None
        self._closing = False

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def pending(self) -> int:
        """Number of records waiting to be written."""
        return self._queue.qsize() if self._queue is not None else 0

    def start(self) -> asyncio.Task:
        """
        Start the consumer task on the running event loop.

        Calling start() on a running writer returns the existing task.
        """
        if self.is_running:
            return self._task

        self._queue = asyncio.Queue()
        self._task = asyncio.create_task(self._run(), name="subscription-writer")
        logger.info(f"Subscription writer started for {self.store.path}")
        return self._task

    async def stop(self, drain_timeout: float = DRAIN_TIMEOUT_SECONDS) -> None:
        """
        Stop the consumer.

        New submissions are refused at once. Records already queued, and the
        one being written, get up to drain_timeout seconds to finish so their
        callers see the real outcome. Whatever is left after that is failed
        with WriterNotRunningError; an append cut off mid-write may or may
        not have reached the file.
        """
        if self._task is None:
            return

        self._closing = True
        if self.is_running:
            try:
                await asyncio.wait_for(self._queue.join(), drain_timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Subscription writer stopping with {self.pending} record(s) unwritten")

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self._closing = False

        while self._queue is not None and not self._queue.empty():
            _, future = self._queue.get_nowait()
            if not future.done():
                future.set_exception(WriterNotRunningError("Subscription writer stopped"))

    async def submit(self, record: Subscriber) -> Subscriber:
        """
        Queue a record for appending and wait for the outcome.

        Returns:
            The stored record

        Raises:
            WriterNotRunningError: If the writer is not running or is stopping
            DuplicateSubscriberError: If the email was stored meanwhile
            StorageIOError: If the write failed
        """
        if not self.is_running or self._closing:
            raise WriterNotRunningError("Subscription writer is not running")

        future = asyncio.get_running_loop().create_future()
        await self._queue.put((record, future))
        return await future

    async def _run(self) -> None:
        """Main consumer loop."""
        try:
            while True:
                record, future = await self._queue.get()
                try:
                    await self._process(record, future)
                finally:
                    self._queue.task_done()
        except asyncio.CancelledError:
            logger.info("Subscription writer cancelled")
            raise
        finally:
            logger.info("Subscription writer stopped")

    async def _process(self, record: Subscriber, future: asyncio.Future) -> None:
        # Caller went away before its turn
        if future.cancelled():
            return

        try:
            stored = await self.store.append(record)
        except asyncio.CancelledError:
            if not future.done():
                future.set_exception(WriterNotRunningError("Subscription writer stopped"))
            raise
        except Exception as e:
            if not future.done():
                future.set_exception(e)
        else:
            if not future.done():
                future.set_result(stored)
