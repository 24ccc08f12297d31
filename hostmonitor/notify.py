#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 20:11:48 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/notify.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.notify

(c) 2026 Benjamin Walkenhorst

This file contains the interface for delivering HostStatusEvents and a simple
in-process publish/subscribe implementation of it.
"""

import logging
import traceback
from dataclasses import dataclass, field
from threading import RLock
from typing import Callable, Final, Protocol

from hostmonitor import common
from hostmonitor.model import HostStatusEvent

Subscriber = Callable[[HostStatusEvent], None]


class ChangeNotifier(Protocol):
    """ChangeNotifier delivers HostStatusEvents. Delivery is fire-and-forget."""

    def publish(self, channel: str, event: HostStatusEvent) -> None:
        """Deliver <event> to whoever listens on <channel>."""


@dataclass(kw_only=True, slots=True)
class EventBus:
    """EventBus passes events to the subscribers of a channel, in the caller's thread."""

    log: logging.Logger = field(default_factory=lambda: common.get_logger("notify"))
    lock: RLock = field(default_factory=RLock)
    subscribers: dict[str, list[Subscriber]] = field(default_factory=dict)

    def subscribe(self, channel: str, sub: Subscriber) -> None:
        """Register <sub> to receive the events published on <channel>."""
        with self.lock:
            self.subscribers.setdefault(channel, []).append(sub)

    def unsubscribe(self, channel: str, sub: Subscriber) -> None:
        """Remove <sub> from <channel>. Unknown subscribers are ignored."""
        with self.lock:
            subs = self.subscribers.get(channel, [])
            if sub in subs:
                subs.remove(sub)
            if not subs:
                self.subscribers.pop(channel, None)

    def publish(self, channel: str, event: HostStatusEvent) -> None:
        """Deliver <event> to all subscribers of <channel>.

        A subscriber that raises an exception is logged and skipped, the others
        still get the event.
        """
        with self.lock:
            subs: Final[list[Subscriber]] = list(self.subscribers.get(channel, []))

        self.log.debug("Publish %s on %s to %d subscriber(s)",
                       event.as_dict(),
                       channel,
                       len(subs))

        for sub in subs:
            try:
                sub(event)
            except Exception as err:  # pylint: disable-msg=W0718
                cname: Final[str] = err.__class__.__name__
                self.log.error("%s in subscriber of %s: %s\n%s",
                               cname,
                               channel,
                               err,
                               "\n".join(traceback.format_exception(err)))


class HostStatusListener:
    """Base class for receivers of host status changes.

    Override on_host_status_changed in a subclass and register() the listener
    with an EventBus.
    """

    __slots__ = ["channel", "bus"]

    channel: str
    bus: EventBus

    def __init__(self, bus: EventBus, channel: str) -> None:
        self.bus = bus
        self.channel = channel

    def register(self) -> None:
        """Start receiving events."""
        self.bus.subscribe(self.channel, self.on_host_status_changed)

    def unregister(self) -> None:
        """Stop receiving events."""
        self.bus.unsubscribe(self.channel, self.on_host_status_changed)

    def on_host_status_changed(self, event: HostStatusEvent) -> None:
        """Called whenever a Host's status changes. Does nothing by default."""


# Local Variables: #
# python-indent: 4 #
# End: #
