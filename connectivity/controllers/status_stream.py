"""
Status Stream

Consumer side of a subscription: buffers emitted statuses so callers can
iterate over them (or block on get()) from their own thread.
"""

import logging
import queue
from typing import Callable, Iterator, Optional

from connectivity.constants import Status

# Marks the end of the stream in the buffer
_END = object()


class StatusStream:
    """
    Iterable stream of Status values for one subscription.

    Usage:
        stream = monitor.subscribe()
        for status in stream:       # blocks; ends after unsubscribe()
            print(to_wire(status))
    """

    def __init__(self, on_status: Optional[Callable[[Status], None]] = None):
        """
        Initialize stream.

        Args:
            on_status: Optional callback invoked for every pushed status
                       (on the notifier's thread)
        """
        self.logger = logging.getLogger(__name__)
        self.on_status = on_status

        self._buffer: queue.Queue = queue.Queue()
        self._closed = False
        self._exhausted = False
        self.received_count = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, status: Status) -> None:
        """
        Add a status to the stream (the notifier's listener).

        Ignored once the stream is closed.
        """
        if self._closed:
            self.logger.debug(f"Dropping {status.name}, stream closed")
            return

        self.received_count += 1
        self._buffer.put(status)

        if self.on_status:
            try:
                self.on_status(status)
            except Exception as e:
                self.logger.error(f"Error in status callback: {e}")

    def close(self) -> None:
        """
        End the stream.

        Values already buffered are still delivered before iteration stops.
        """
        if self._closed:
            return
        self._closed = True
        self._buffer.put(_END)

    def get(self, timeout: Optional[float] = None) -> Optional[Status]:
        """
        Wait for the next status.

        Args:
            timeout: Seconds to wait, None to wait forever

        Returns:
            Next Status, or None on timeout or end of stream
        """
        if self._exhausted:
            return None

        try:
            item = self._buffer.get(timeout=timeout)
        except queue.Empty:
            return None

        if item is _END:
            self._exhausted = True
            return None

        return item

    def drain(self) -> list:
        """Return all currently buffered statuses without blocking"""
        items = []
        while not self._exhausted:
            try:
                item = self._buffer.get_nowait()
            except queue.Empty:
                break
            if item is _END:
                self._exhausted = True
                break
            items.append(item)
        return items

    def __iter__(self) -> Iterator[Status]:
        while True:
            status = self.get()
            if status is None:
                return
            yield status
