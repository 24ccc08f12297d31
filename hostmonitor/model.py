#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 18:20:37 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/model.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.model

(c) 2026 Benjamin Walkenhorst
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from hostmonitor.common import ConfigError


class ConnectionType(Enum):
    """ConnectionType is the network transport that was active at probe time."""

    NONE = auto()
    WIFI = auto()
    MOBILE = auto()


@dataclass(frozen=True, slots=True)
class Host:
    """Host is a TCP endpoint we want to keep an eye on."""

    address: str
    port: int

    def __post_init__(self) -> None:
        if not isinstance(self.address, str) or self.address == "":
            raise ConfigError("Host address must be a non-empty string")
        if isinstance(self.port, bool) or not isinstance(self.port, int) \
           or not 0 < self.port < 65536:
            raise ConfigError(f"Port must be a number between 1 and 65535, not {self.port!r}")

    @property
    def key(self) -> str:
        """Return the Host in its serialized form, i.e. host:port"""
        return f"{self.address}:{self.port}"

    @classmethod
    def from_key(cls, key: str) -> 'Host':
        """Parse a string of the form host:port into a Host.

        The port is whatever comes after the last colon, so unbracketed
        IPv6 literals work, too. [::1]:443 is accepted as well.
        """
        addr, sep, port = key.rpartition(":")
        if sep == "" or addr == "":
            raise ConfigError(f"Cannot parse {key!r} as host:port")
        if addr.startswith("[") and addr.endswith("]"):
            addr = addr[1:-1]
        try:
            pnum = int(port)
        except ValueError as verr:
            raise ConfigError(f"Invalid port in {key!r}: {verr}") from verr
        return cls(addr, pnum)

    def __str__(self) -> str:
        return self.key


@dataclass(slots=True)
class Status:
    """Status is the last known state of a Host.

    A freshly registered Host is assumed to be reachable.
    """

    reachable: bool = True
    connection_type: ConnectionType = ConnectionType.NONE

    def to_dict(self) -> dict[str, Any]:
        """Return the Status in the form we persist it in."""
        return {
            "reachable": self.reachable,
            "connectionType": self.connection_type.name,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> 'Status':
        """Re-create a Status from its persisted form."""
        reachable = d["reachable"]
        if not isinstance(reachable, bool):
            raise TypeError(f"reachable must be a bool, not {type(reachable).__name__}")
        return cls(reachable=reachable,
                   connection_type=ConnectionType[d["connectionType"]])

    def copy(self) -> 'Status':
        """Return an independent copy of the Status."""
        return Status(reachable=self.reachable, connection_type=self.connection_type)


@dataclass(frozen=True, slots=True, kw_only=True)
class HostStatusEvent:
    """HostStatusEvent describes a change in a Host's reachability or transport."""

    host: str
    port: int
    previous_reachable: bool
    reachable: bool
    previous_connection_type: ConnectionType
    connection_type: ConnectionType

    @classmethod
    def transition(cls, host: Host, prev: Status, cur: Status) -> 'HostStatusEvent':
        """Create an event for a Host going from <prev> to <cur>."""
        return cls(host=host.address,
                   port=host.port,
                   previous_reachable=prev.reachable,
                   reachable=cur.reachable,
                   previous_connection_type=prev.connection_type,
                   connection_type=cur.connection_type)

    @property
    def reachability_changed(self) -> bool:
        """Return True if the Host went from reachable to unreachable or vice versa."""
        return self.previous_reachable != self.reachable

    @property
    def connection_type_changed(self) -> bool:
        """Return True if the network transport changed."""
        return self.previous_connection_type != self.connection_type

    def as_dict(self) -> dict[str, Any]:
        """Return the event as a plain dict, e.g. for logging or JSON output."""
        return {
            "host": self.host,
            "port": self.port,
            "previousReachable": self.previous_reachable,
            "reachable": self.reachable,
            "previousConnectionType": self.previous_connection_type.name,
            "connectionType": self.connection_type.name,
            "reachabilityChanged": self.reachability_changed,
            "connectionTypeChanged": self.connection_type_changed,
        }


# Local Variables: #
# python-indent: 4 #
# End: #
