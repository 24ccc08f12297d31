#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 20:25:03 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/transport.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.transport

(c) 2026 Benjamin Walkenhorst
"""

import logging
from dataclasses import dataclass, field
from typing import Final

from hostmonitor import common
from hostmonitor.model import ConnectionType

transport_kinds: Final[dict[str, ConnectionType]] = {
    "wifi": ConnectionType.WIFI,
    "wlan": ConnectionType.WIFI,
    "mobile": ConnectionType.MOBILE,
    "cellular": ConnectionType.MOBILE,
    "wwan": ConnectionType.MOBILE,
}


@dataclass(kw_only=True, slots=True, frozen=True)
class ConnectivitySignal:
    """ConnectivitySignal is what the platform tells us about the network."""

    connected: bool
    kind: str = ""


@dataclass(kw_only=True, slots=True)
class TransportTypeResolver:
    """TransportTypeResolver maps ConnectivitySignals to ConnectionTypes."""

    log: logging.Logger = field(default_factory=lambda: common.get_logger("transport"))

    def resolve(self, sig: ConnectivitySignal) -> ConnectionType:
        """Return the ConnectionType matching <sig>."""
        if not sig.connected:
            return ConnectionType.NONE

        kind: Final[str] = sig.kind.strip().lower()
        ctype = transport_kinds.get(kind)
        if ctype is None:
            self.log.error("Unsupported connection type: %r. Returning NONE",
                           sig.kind)
            return ConnectionType.NONE
        return ctype


# Local Variables: #
# python-indent: 4 #
# End: #
