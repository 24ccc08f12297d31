#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 20:58:14 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/scan.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.scan

(c) 2026 Benjamin Walkenhorst
"""

import logging
from dataclasses import dataclass, field
from typing import Final, Optional

from hostmonitor import common
from hostmonitor.config import HostRegistry, MonitorConfig, MonitorSettings
from hostmonitor.model import ConnectionType, HostStatusEvent, Status
from hostmonitor.notify import ChangeNotifier
from hostmonitor.probe import ReachabilityProbe


@dataclass(kw_only=True, slots=True)
class ScanCycle:
    """ScanCycle checks all configured Hosts once and reports what has changed."""

    config: MonitorConfig
    probe: ReachabilityProbe = field(default_factory=ReachabilityProbe)
    notifier: Optional[ChangeNotifier] = None
    log: logging.Logger = field(default_factory=lambda: common.get_logger("scan"))

    def execute(self, current_transport: ConnectionType) -> list[HostStatusEvent]:
        """Run a cycle on a snapshot of the persisted registry."""
        registry: Final[HostRegistry] = self.config.snapshot()
        settings: Final[MonitorSettings] = self.config.settings()
        return self.run(registry, settings, current_transport)

    def run(self,
            registry: HostRegistry,
            settings: MonitorSettings,
            current_transport: ConnectionType) -> list[HostStatusEvent]:
        """Check the Hosts in <registry> and return the events for the ones that changed.

        <registry> is updated in place. The changed Statuses are persisted in
        one transaction before any event is published.
        """
        if not registry:
            self.log.debug("No hosts to check at this moment")
            return []

        events: list[HostStatusEvent] = []
        changes: HostRegistry = {}

        if current_transport == ConnectionType.NONE:
            self.log.debug("No active connection. All hosts are unreachable")
        else:
            self.log.debug("Starting reachability check via %s",
                           current_transport.name)

        for host, prev in registry.items():
            if current_transport == ConnectionType.NONE:
                reachable = False
            else:
                reachable = self.probe.probe(host,
                                             settings.socket_timeout_ms,
                                             settings.max_attempts)

            cur = Status(reachable=reachable, connection_type=current_transport)
            self.log.debug("Host %s is currently %s on port %d via %s",
                           host.address,
                           "reachable" if reachable else "unreachable",
                           host.port,
                           current_transport.name)

            if cur == prev:
                continue

            events.append(HostStatusEvent.transition(host, prev, cur))
            changes[host] = cur

        self.config.commit_statuses(changes)
        registry.update(changes)

        if self.notifier is not None:
            for ev in events:
                self.notifier.publish(settings.broadcast_channel, ev)

        self.log.debug("Reachability check finished, %d of %d host(s) changed",
                       len(events),
                       len(registry))
        return events


# Local Variables: #
# python-indent: 4 #
# End: #
