"""
Change Notifier

Holds the last reported status for the live subscription and reports a
new status only when a fresh classification differs from it.

Two producers feed it:
- Event path: the OS reachability notifier (via SignalSourceAdapter)
- Poll path: PollTimer ticks

Both only enqueue a trigger. A single worker thread per subscription
consumes the queue and runs the one classify -> compare -> emit step.
Classification (which may query the modem) runs without the lock; only
the compare, the last_status write and the emit are serialized, so dedup
holds whatever the trigger source and unsubscribe never waits on a read.

State Flow:
    IDLE --activate()--> ACTIVE --deactivate()--> IDLE
"""

import itertools
import logging
import queue
import threading
import time
from typing import Any, Callable, Dict, Optional

from config.settings import TRIGGER_QUEUE_SIZE, WORKER_IDLE_TIMEOUT, WORKER_JOIN_TIMEOUT
from connectivity.classifier import classify_snapshot
from connectivity.constants import NotifierState, Status, TriggerSource
from connectivity.controllers.signal_source import SignalSourceAdapter
from connectivity.interfaces.reachability_interface import SourceError
from connectivity.utils.wire_format import to_wire

StatusListener = Callable[[Status], None]

# Queue sentinel telling the worker to exit
_STOP = object()


class Subscription:
    """
    State owned by one live subscription.

    Holds the listener, the last emitted status and the trigger queue
    consumed by this subscription's worker thread.
    """

    _ids = itertools.count(1)

    def __init__(self, listener: StatusListener, queue_size: int = TRIGGER_QUEUE_SIZE):
        self.id = next(Subscription._ids)
        self.listener = listener
        self.last_status: Optional[Status] = None
        self.active = True
        self.created_at = time.time()
        self.emit_count = 0
        # Read order of the newest classification applied to last_status
        self.applied_read = 0

        self.triggers: queue.Queue = queue.Queue(maxsize=queue_size)
        self.stop_event = threading.Event()
        self.worker: Optional[threading.Thread] = None

    def __repr__(self) -> str:
        last = self.last_status.name if self.last_status else None
        return f"Subscription(id={self.id}, active={self.active}, last_status={last})"


class ChangeNotifier:
    """
    Deduplicating status notifier.

    Usage:
        notifier = ChangeNotifier(source)
        notifier.activate(listener)              # emits the current status
        notifier.trigger(TriggerSource.EVENT)    # emits only if it changed
        notifier.deactivate()
    """

    def __init__(self, source: SignalSourceAdapter, queue_size: int = TRIGGER_QUEUE_SIZE):
        """
        Initialize change notifier.

        Args:
            source: Signal source to classify against
            queue_size: Max pending triggers per subscription
        """
        self.logger = logging.getLogger(__name__)
        self.source = source
        self.queue_size = queue_size

        self.state = NotifierState.IDLE
        self._subscription: Optional[Subscription] = None

        # Guards the compare-and-emit step and subscription swaps
        self._lock = threading.RLock()

        self.dropped_triggers = 0
        self.stale_reads = 0
        self._reads = itertools.count(1)

    @property
    def lock(self) -> threading.RLock:
        """Lock serializing compare-and-emit with subscription changes"""
        return self._lock

    @property
    def subscription(self) -> Optional[Subscription]:
        return self._subscription

    @property
    def last_status(self) -> Optional[Status]:
        subscription = self._subscription
        return subscription.last_status if subscription else None

    def is_active(self) -> bool:
        return self.state == NotifierState.ACTIVE

    # =========================================================================
    # CLASSIFICATION
    # =========================================================================

    def current_status(self) -> Status:
        """
        Classify the signal source right now.

        Source failures are absorbed and reported as UNREACHABLE.
        """
        try:
            snapshot = self.source.snapshot()
        except SourceError as e:
            self.logger.warning(f"Signal source read failed, reporting unreachable: {e}")
            return Status.UNREACHABLE

        return classify_snapshot(snapshot)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def activate(self, listener: StatusListener) -> Subscription:
        """
        Start a subscription and emit the current status.

        The first value is always emitted, whatever any previous
        subscription last saw. An existing subscription is replaced.

        Args:
            listener: Receives each emitted Status

        Returns:
            The new Subscription
        """
        self.deactivate()

        subscription = self.open(listener)
        self.start(subscription)
        return subscription

    def open(self, listener: StatusListener) -> Subscription:
        """
        Install a new live subscription without classifying yet.

        The caller replaces any previous subscription first (see
        deactivate) and then calls start().
        """
        subscription = Subscription(listener, self.queue_size)

        with self._lock:
            self._subscription = subscription
            self.state = NotifierState.ACTIVE

        self.logger.debug(f"Subscription #{subscription.id} opened")
        return subscription

    def start(self, subscription: Subscription) -> Optional[Status]:
        """
        Emit the first status of an opened subscription and start its worker.

        Must not be called with `lock` held, since the first
        classification may be slow.

        Returns:
            The first Status, or None if the subscription ended meanwhile
        """
        status = self._evaluate(subscription, TriggerSource.SUBSCRIBE)

        with self._lock:
            if self._is_live(subscription):
                self._start_worker(subscription)

        return status

    def deactivate(self, wait: bool = True) -> bool:
        """
        End the live subscription and discard its last status.

        Once this returns no further emission happens for that
        subscription, even for triggers already queued or in flight.

        Args:
            wait: Join the worker thread before returning. Callers holding
                  `lock` pass False and call join_worker() after releasing it.

        Returns:
            True if a subscription was ended, False if already idle
        """
        with self._lock:
            subscription = self._subscription
            if subscription is None:
                return False

            subscription.active = False
            self._subscription = None
            self.state = NotifierState.IDLE
            self._signal_worker_stop(subscription)

        if wait:
            self.join_worker(subscription)

        self.logger.info(
            f"Subscription #{subscription.id} ended "
            f"({subscription.emit_count} emissions)",
        )
        return True

    # =========================================================================
    # TRIGGERS
    # =========================================================================

    def trigger(self, source: TriggerSource) -> bool:
        """
        Request a re-classification.

        Safe to call from any thread. Does not classify - only enqueues.

        Returns:
            True if queued, False if idle or the queue was full
        """
        subscription = self._subscription
        if subscription is None or not subscription.active:
            self.logger.debug(f"Ignoring {source.value} trigger (no subscription)")
            return False

        try:
            subscription.triggers.put_nowait(source)
        except queue.Full:
            # A pending trigger will read the latest state anyway
            self.dropped_triggers += 1
            self.logger.debug(f"Trigger queue full, dropping {source.value} trigger")
            return False

        return True

    def on_source_change(self) -> None:
        """Event-path entry point handed to the signal source"""
        self.trigger(TriggerSource.EVENT)

    def on_poll_tick(self) -> None:
        """Poll-path entry point handed to the poll timer"""
        self.trigger(TriggerSource.POLL)

    def check_now(self, source: TriggerSource = TriggerSource.POLL) -> Optional[Status]:
        """
        Run the compare-and-emit step synchronously on the caller's thread.

        Returns:
            The emitted Status, or None if nothing was emitted
        """
        subscription = self._subscription
        if subscription is None:
            return None
        return self._evaluate(subscription, source)

    # =========================================================================
    # COMPARE AND EMIT
    # =========================================================================

    def _evaluate(self, subscription: Subscription, source: TriggerSource) -> Optional[Status]:
        """
        The single classify -> compare -> emit step.

        Every trigger source goes through here. The first evaluation of a
        subscription always emits since there is no last status yet.
        """
        if not self._is_live(subscription):
            self._log_dropped(subscription, source)
            return None

        read = next(self._reads)
        status = self.current_status()

        with self._lock:
            if not self._is_live(subscription):
                self._log_dropped(subscription, source)
                return None

            # A newer classification was already applied by another caller
            if read < subscription.applied_read:
                self.stale_reads += 1
                return None
            subscription.applied_read = read

            previous = subscription.last_status
            if status == previous:
                return None

            if previous is None:
                self.logger.info(
                    f"Subscription #{subscription.id} active "
                    f"(initial status: {to_wire(status)})",
                )
            else:
                self.logger.info(
                    f"Connectivity status changed from {source.value}: "
                    f"{to_wire(previous)} -> {to_wire(status)}",
                )
            subscription.last_status = status
            self._emit(subscription, status)
            return status

    def _is_live(self, subscription: Subscription) -> bool:
        return subscription is self._subscription and subscription.active

    def _log_dropped(self, subscription: Subscription, source: TriggerSource) -> None:
        self.logger.debug(
            f"Dropping {source.value} trigger for ended "
            f"subscription #{subscription.id}",
        )

    def _emit(self, subscription: Subscription, status: Status) -> None:
        """Deliver status to the listener (exceptions are logged)"""
        subscription.emit_count += 1
        try:
            subscription.listener(status)
        except Exception as e:
            self.logger.error(f"Error in status listener: {e}", exc_info=True)

    # =========================================================================
    # WORKER THREAD
    # =========================================================================

    def _start_worker(self, subscription: Subscription) -> None:
        subscription.worker = threading.Thread(
            target=self._notifier_worker,
            args=(subscription,),
            daemon=True,
            name=f"ChangeNotifier-{subscription.id}",
        )
        subscription.worker.start()
        self.logger.debug(f"Notifier worker started for subscription #{subscription.id}")

    def _signal_worker_stop(self, subscription: Subscription) -> None:
        subscription.stop_event.set()
        try:
            subscription.triggers.put_nowait(_STOP)
        except queue.Full:
            # Worker sees stop_event within WORKER_IDLE_TIMEOUT
            pass

    def join_worker(self, subscription: Optional[Subscription]) -> None:
        """
        Wait for an ended subscription's worker thread to exit.

        No-op when called from that worker (e.g. a listener unsubscribing).
        A worker still classifying is left to finish on its own; it cannot
        emit for an ended subscription.
        """
        if subscription is None:
            return

        worker = subscription.worker
        if worker and worker.is_alive() and worker is not threading.current_thread():
            worker.join(timeout=WORKER_JOIN_TIMEOUT)
            if worker.is_alive():
                self.logger.debug(
                    f"Notifier worker for subscription #{subscription.id} "
                    f"still finishing a read, not waiting",
                )

    def _notifier_worker(self, subscription: Subscription) -> None:
        """
        Single consumer of the trigger queue.

        Exits when the subscription ends.
        """
        while not subscription.stop_event.is_set():
            try:
                item = subscription.triggers.get(timeout=WORKER_IDLE_TIMEOUT)
            except queue.Empty:
                continue

            if item is _STOP:
                break

            try:
                self._evaluate(subscription, item)
            except Exception as e:
                self.logger.error(f"Error evaluating {item.value} trigger: {e}", exc_info=True)

        self.logger.debug(f"Notifier worker for subscription #{subscription.id} exiting")

    # =========================================================================
    # STATUS AND INFO
    # =========================================================================

    def get_status(self) -> Dict[str, Any]:
        """
        Get notifier diagnostics.

        Returns:
            Dictionary with state information
        """
        subscription = self._subscription
        return {
            "state": self.state.value,
            "subscription_id": subscription.id if subscription else None,
            "last_status": (
                to_wire(subscription.last_status)
                if subscription and subscription.last_status
                else None
            ),
            "emit_count": subscription.emit_count if subscription else 0,
            "pending_triggers": subscription.triggers.qsize() if subscription else 0,
            "dropped_triggers": self.dropped_triggers,
            "stale_reads": self.stale_reads,
        }
