#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 21:44:19 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/trigger.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.trigger

(c) 2026 Benjamin Walkenhorst

The ScanTrigger runs scan cycles in a worker thread, either periodically or
when the network connectivity changes.
"""

import logging
import traceback
from dataclasses import dataclass, field
from queue import Queue
from threading import Event, RLock, Thread
from typing import Callable, Final, Optional

from hostmonitor import common
from hostmonitor.config import MonitorSettings
from hostmonitor.control import Cmd, Message
from hostmonitor.model import ConnectionType, HostStatusEvent
from hostmonitor.transport import ConnectivitySignal, TransportTypeResolver

CycleFunc = Callable[[ConnectionType], Optional[list[HostStatusEvent]]]


@dataclass(kw_only=True, slots=True)
class ScanTrigger:
    """ScanTrigger decides when to run a scan cycle.

    At most one cycle is queued or running at any time. Requests that arrive
    while one is pending are dropped.
    """

    cycle: CycleFunc
    transport_source: Callable[[], ConnectionType]
    resolver: TransportTypeResolver = field(default_factory=TransportTypeResolver)
    log: logging.Logger = field(default_factory=lambda: common.get_logger("trigger"))
    lock: RLock = field(default_factory=RLock)
    cmdQ: Queue[Message] = field(init=False)
    _active: bool = False
    _listening: bool = False
    _pending: bool = False
    _interval: int = 0
    _worker: Optional[Thread] = None
    _timer: Optional[Thread] = None
    _timer_stop: Event = field(default_factory=Event)

    def __post_init__(self) -> None:
        self.cmdQ = Queue(2)

    @property
    def active(self) -> bool:
        """Return the ScanTrigger's active flag."""
        with self.lock:
            return self._active

    @property
    def listening(self) -> bool:
        """Return True if connectivity changes trigger a scan."""
        with self.lock:
            return self._listening

    @property
    def interval(self) -> int:
        """Return the interval of periodic checks in milliseconds, 0 if they are disabled."""
        with self.lock:
            return self._interval

    @property
    def pending(self) -> bool:
        """Return True if a scan cycle is queued or running."""
        with self.lock:
            return self._pending

    def start(self) -> None:
        """Start the worker thread."""
        with self.lock:
            if self._active:
                return
            self._active = True
            self._worker = Thread(target=self._scan_worker, name="scan_worker", daemon=True)
            self._worker.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Disarm and stop the worker thread.

        A cycle that is currently running is allowed to finish.
        """
        self.disarm()
        with self.lock:
            if not self._active:
                return
            self._active = False
            worker = self._worker
            self._worker = None

        self.cmdQ.put(Message(Tag=Cmd.Stop))
        if worker is not None:
            worker.join(timeout)

    def arm(self, settings: MonitorSettings) -> None:
        """Enable the connectivity listener, reschedule periodic checks, and request a check now."""
        with self.lock:
            self._listening = True
            self._stop_timer()
            self._interval = settings.check_interval_ms
            if self._interval > 0:
                self.log.debug("scheduling periodic checks every %d seconds",
                               self._interval // 1000)
                self._timer_stop = Event()
                self._timer = Thread(target=self._timer_worker,
                                     name="scan_timer",
                                     args=(self._timer_stop, self._interval / 1000),
                                     daemon=True)
                self._timer.start()

        self.log.debug("triggering reachability check")
        self.request(self.transport_source())

    def disarm(self) -> None:
        """Disable the connectivity listener and cancel periodic checks."""
        with self.lock:
            if self._listening:
                self.log.debug("disabling connectivity listener")
            self._listening = False
            self._stop_timer()
            self._interval = 0

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self.log.debug("cancelling scheduled checks")
            self._timer_stop.set()
            self._timer = None

    def request(self, transport: ConnectionType) -> bool:
        """Ask the worker to run a scan cycle.

        Return False if the request was dropped, either because the worker
        is not running or because a cycle is already pending.
        """
        with self.lock:
            if not self._active:
                self.log.debug("Scan worker is not running, ignoring request.")
                return False
            if self._pending:
                self.log.debug("A scan is already pending, dropping request for %s.",
                               transport.name)
                return False
            self._pending = True
            self.cmdQ.put(Message(Tag=Cmd.Check, Payload=transport))
            return True

    def connectivity_changed(self, sig: ConnectivitySignal) -> bool:
        """Handle a connectivity change reported by the platform."""
        return self.transport_changed(self.resolver.resolve(sig))

    def transport_changed(self, ctype: ConnectionType) -> bool:
        """Request a scan cycle for the new transport, if the listener is enabled."""
        self.log.debug("%s",
                       "connection unavailable" if ctype == ConnectionType.NONE
                       else f"connection available via {ctype.name}")
        if not self.listening:
            self.log.debug("Connectivity listener is disabled, ignoring change.")
            return False
        return self.request(ctype)

    def _scan_worker(self) -> None:
        self.log.info("scan_worker reporting for work.")
        try:
            while True:
                message: Message = self.cmdQ.get()
                match message.Tag:
                    case Cmd.Stop:
                        self.log.info("scan_worker will quit now.")
                        return
                    case Cmd.Check:
                        try:
                            self.cycle(message.Payload or ConnectionType.NONE)
                        except Exception as err:  # pylint: disable-msg=W0718
                            cname: Final[str] = err.__class__.__name__
                            self.log.error("%s during scan cycle: %s\n%s",
                                           cname,
                                           err,
                                           "\n".join(traceback.format_exception(err)))
                        finally:
                            with self.lock:
                                self._pending = False
        finally:
            self.log.info("scan_worker is finished. So long!")

    def _timer_worker(self, stop: Event, interval: float) -> None:
        self.log.debug("scan_timer coming right up.")
        while not stop.wait(interval):
            self._timer_fired(stop)
        self.log.debug("scan_timer is quitting now.")

    def _timer_fired(self, stop: Event) -> bool:
        transport: Final[ConnectionType] = self.transport_source()
        # disarm() sets stop while holding the lock
        with self.lock:
            if stop.is_set():
                self.log.debug("scan_timer was cancelled, dropping request.")
                return False
            return self.request(transport)


# Local Variables: #
# python-indent: 4 #
# End: #
