#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 22:16:40 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/service.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.service

(c) 2026 Benjamin Walkenhorst
"""

import logging
from dataclasses import dataclass, field
from threading import Lock, RLock
from typing import Callable, Final, Optional

from hostmonitor import common
from hostmonitor.common import MonitorError
from hostmonitor.config import MonitorConfig, MonitorSettings
from hostmonitor.model import ConnectionType, HostStatusEvent, Status
from hostmonitor.notify import ChangeNotifier, EventBus
from hostmonitor.probe import ReachabilityProbe
from hostmonitor.scan import ScanCycle
from hostmonitor.store import Store
from hostmonitor.transport import ConnectivitySignal
from hostmonitor.trigger import ScanTrigger


@dataclass(kw_only=True, slots=True)
class MonitorService:
    """MonitorService brings together all the moving parts, so to speak.

    Create one, add some hosts, start() it, and subscribe to the notifier
    to learn about changes. Call close() when you are done.
    """

    log: logging.Logger = field(default_factory=lambda: common.get_logger("service"))
    lock: RLock = field(default_factory=RLock)
    store: Optional[Store] = None
    notifier: ChangeNotifier = field(default_factory=EventBus)
    probe: ReachabilityProbe = field(default_factory=ReachabilityProbe)
    transport_source: Optional[Callable[[], ConnectionType]] = None
    transport: ConnectionType = ConnectionType.WIFI
    config: MonitorConfig = field(init=False)
    scanner: ScanCycle = field(init=False)
    trigger: ScanTrigger = field(init=False)
    cycle_lock: Lock = field(default_factory=Lock)
    _active: bool = False

    def __post_init__(self) -> None:
        if self.store is None:
            self.store = Store()
        self.config = MonitorConfig(self.store)
        self.scanner = ScanCycle(config=self.config,
                                 probe=self.probe,
                                 notifier=self.notifier)
        self.trigger = ScanTrigger(cycle=self.check,
                                   transport_source=self.current_transport)

    def __enter__(self) -> 'MonitorService':
        return self

    def __exit__(self, ex_type, ex_val, tb) -> None:
        self.close()

    @property
    def active(self) -> bool:
        """Return the MonitorService's active flag."""
        with self.lock:
            return self._active

    def is_running(self) -> bool:
        """Return True if the monitor has been started."""
        return self.active

    def current_transport(self) -> ConnectionType:
        """Return the network transport to use for periodic checks."""
        if self.transport_source is not None:
            return self.transport_source()
        with self.lock:
            return self.transport

    def start(self, settings: Optional[MonitorSettings] = None) -> None:
        """Start monitoring.

        If <settings> are given, they replace the persisted ones. Starting a
        monitor that is already running is an error.
        """
        with self.lock:
            if self._active:
                raise MonitorError("HostMonitor is already running")
            if settings is not None:
                self.config.apply(settings)
            self._active = True
            self.trigger.start()
            self.config.trigger = self.trigger

        try:
            self.log.info("Start monitoring %d host(s)",
                          len(self.config.hosts))
            self.config.save()
        except Exception as err:  # pylint: disable-msg=W0718
            cname: Final[str] = err.__class__.__name__
            self.log.error("%s while starting the monitor, backing out: %s",
                           cname,
                           err)
            self.stop()
            raise

    def stop(self) -> None:
        """Stop monitoring. A scan cycle that is in flight is allowed to finish."""
        with self.lock:
            if not self._active:
                return
            self._active = False
            self.config.trigger = None

        self.log.info("Stop monitoring")
        self.trigger.stop()

    def close(self) -> None:
        """Stop monitoring and release the Store."""
        self.stop()
        if self.store is not None:
            self.store.close()
            self.store = None

    def add_host(self, address: str, port: int) -> None:
        """Add a Host to monitor, and save the configuration."""
        self.config.add_host(address, port).save()

    def remove_host(self, address: str, port: int) -> None:
        """Stop monitoring a Host, and save the configuration."""
        self.config.remove_host(address, port).save()

    def remove_all_hosts(self) -> None:
        """Stop monitoring all Hosts."""
        self.config.remove_all_hosts().save()

    def reset(self) -> None:
        """Throw away all persisted state."""
        self.config.reset()

    def is_reachable(self, address: str, port: int) -> Optional[bool]:
        """Return the last known reachability of a Host, None if it is not monitored."""
        status: Final[Optional[Status]] = self.config.status(address, port)
        if status is None:
            return None
        return status.reachable

    def check(self, transport: Optional[ConnectionType] = None) -> Optional[list[HostStatusEvent]]:
        """Run a scan cycle right now, in the caller's thread.

        If a cycle is already in flight, nothing happens and None is returned.
        """
        if not self.cycle_lock.acquire(blocking=False):
            self.log.debug("A scan cycle is already running, dropping this one.")
            return None

        try:
            if transport is None:
                transport = self.current_transport()
            return self.scanner.execute(transport)
        finally:
            self.cycle_lock.release()

    def connectivity_changed(self, sig: ConnectivitySignal) -> bool:
        """Tell the monitor the network connectivity has changed.

        The new transport is remembered for subsequent periodic checks. Return
        True if a scan cycle was requested.
        """
        ctype: Final[ConnectionType] = self.trigger.resolver.resolve(sig)
        with self.lock:
            self.transport = ctype
        return self.trigger.transport_changed(ctype)


# Local Variables: #
# python-indent: 4 #
# End: #
