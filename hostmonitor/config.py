#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 19:47:20 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/config.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.config

(c) 2026 Benjamin Walkenhorst

MonitorConfig is the typed view of the persisted settings and host registry.
Changes are staged in memory until save() is called.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Final, Optional, Protocol

from hostmonitor import common
from hostmonitor.common import ConfigError
from hostmonitor.model import Host, Status
from hostmonitor.store import Store, Tx

KEY_HOSTS: Final[str] = "hosts"
KEY_BROADCAST_CHANNEL: Final[str] = "broadcastChannel"
KEY_SOCKET_TIMEOUT: Final[str] = "socketTimeoutMs"
KEY_CHECK_INTERVAL: Final[str] = "checkIntervalMs"
KEY_MAX_ATTEMPTS: Final[str] = "maxAttempts"

DEFAULT_BROADCAST_CHANNEL: Final[str] = "hostmonitor.status"
DEFAULT_SOCKET_TIMEOUT: Final[int] = 2000  # milliseconds
DEFAULT_CHECK_INTERVAL: Final[int] = 0  # milliseconds, 0 means no periodic checks
DEFAULT_MAX_ATTEMPTS: Final[int] = 3

HostRegistry = dict[Host, Status]


def _check_int(name: str, val: Any, minimum: int) -> int:
    if isinstance(val, bool) or not isinstance(val, int):
        raise ConfigError(f"{name} must be an integer, not {type(val).__name__}")
    if val < minimum:
        raise ConfigError(f"{name} must be at least {minimum}, not {val}")
    return val


def _check_channel(val: Any) -> str:
    if not isinstance(val, str) or val == "":
        raise ConfigError("Broadcast channel MUST not be None or empty!")
    return val


@dataclass(kw_only=True, slots=True, frozen=True)
class MonitorSettings:
    """MonitorSettings holds the tunables of a scan cycle."""

    broadcast_channel: str = DEFAULT_BROADCAST_CHANNEL
    socket_timeout_ms: int = DEFAULT_SOCKET_TIMEOUT
    check_interval_ms: int = DEFAULT_CHECK_INTERVAL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        _check_channel(self.broadcast_channel)
        _check_int("socket_timeout_ms", self.socket_timeout_ms, 1)
        _check_int("check_interval_ms", self.check_interval_ms, 0)
        _check_int("max_attempts", self.max_attempts, 1)


class Trigger(Protocol):
    """Trigger is whatever decides when to run a scan cycle."""

    def arm(self, settings: MonitorSettings) -> None:
        """Enable the trigger with the given settings."""

    def disarm(self) -> None:
        """Disable the trigger."""


def encode_registry(reg: HostRegistry) -> dict[str, dict[str, Any]]:
    """Convert the registry into its persisted form."""
    return {h.key: s.to_dict() for h, s in reg.items()}


def decode_registry(raw: Any) -> HostRegistry:
    """Convert the persisted form of the registry back into a HostRegistry."""
    if not isinstance(raw, dict):
        raise TypeError(f"Host registry must be a mapping, not {type(raw).__name__}")
    return {Host.from_key(k): Status.from_dict(v) for k, v in raw.items()}


class MonitorConfig:
    """MonitorConfig provides typed access to the persisted configuration."""

    __slots__ = [
        "log",
        "store",
        "trigger",
        "_hosts",
        "_channel",
        "_timeout",
        "_interval",
        "_attempts",
    ]

    log: logging.Logger
    store: Store
    trigger: Optional[Trigger]
    _hosts: Optional[HostRegistry]
    _channel: Optional[str]
    _timeout: Optional[int]
    _interval: Optional[int]
    _attempts: Optional[int]

    def __init__(self, store: Store, trigger: Optional[Trigger] = None) -> None:
        self.log = common.get_logger("config")
        self.store = store
        self.trigger = trigger
        self._hosts = None
        self._channel = None
        self._timeout = None
        self._interval = None
        self._attempts = None

    def _load_hosts(self, tx: Tx) -> HostRegistry:
        try:
            raw = tx[KEY_HOSTS]
            if raw is None:
                return {}
            return decode_registry(raw)
        except (ValueError, KeyError, TypeError, AttributeError, ConfigError) as err:
            self.log.error("%s while deserializing hosts map: %s. Ignoring values.",
                           err.__class__.__name__,
                           err)
            return {}

    def _load_setting(self, tx: Tx, key: str, default: Any, check: Callable[[Any], Any]) -> Any:
        try:
            val = tx[key]
            if val is None:
                return default
            return check(val)
        except (ValueError, ConfigError) as err:
            self.log.error("Invalid value for %s in Store: %s. Using default %r.",
                           key,
                           err,
                           default)
            return default

    # Host registry

    @property
    def hosts(self) -> HostRegistry:
        """Return the (staged) host registry, loading it from the Store if needed."""
        if self._hosts is None:
            with self.store.tx() as tx:
                self._hosts = self._load_hosts(tx)
        return self._hosts

    def add_host(self, address: str, port: int) -> 'MonitorConfig':
        """Add a Host to be monitored. Takes effect with the next scan after save()."""
        host: Final[Host] = Host(address, port)
        if host not in self.hosts:
            self.hosts[host] = Status()
        return self

    def remove_host(self, address: str, port: int) -> 'MonitorConfig':
        """Stop monitoring a Host. Takes effect with the next scan after save()."""
        self.hosts.pop(Host(address, port), None)
        return self

    def remove_all_hosts(self) -> 'MonitorConfig':
        """Stop monitoring all Hosts."""
        self.hosts.clear()
        return self

    def snapshot(self) -> HostRegistry:
        """Return a fresh copy of the registry as it is currently persisted."""
        with self.store.tx() as tx:
            return self._load_hosts(tx)

    def status(self, address: str, port: int) -> Optional[Status]:
        """Return the persisted Status of a Host, or None if we don't know it."""
        return self.snapshot().get(Host(address, port))

    def commit_statuses(self, changes: HostRegistry) -> None:
        """Merge the Status changes of a scan cycle into the Store.

        Hosts that have been removed in the meantime are not resurrected.
        """
        if not changes:
            return

        with self.store.tx(True) as tx:
            current: HostRegistry = self._load_hosts(tx)
            for host, status in changes.items():
                if host in current:
                    current[host] = status.copy()
                else:
                    self.log.debug("%s was removed during the scan, dropping its Status",
                                   host)
            tx[KEY_HOSTS] = encode_registry(current)

        if self._hosts is not None:
            for host, status in changes.items():
                if host in self._hosts:
                    self._hosts[host] = status.copy()

    # Settings

    @property
    def broadcast_channel(self) -> str:
        """Return the channel host status changes are published on."""
        if self._channel is None:
            with self.store.tx() as tx:
                self._channel = self._load_setting(tx,
                                                   KEY_BROADCAST_CHANNEL,
                                                   DEFAULT_BROADCAST_CHANNEL,
                                                   _check_channel)
        return self._channel

    @broadcast_channel.setter
    def broadcast_channel(self, channel: str) -> None:
        self._channel = _check_channel(channel)

    @property
    def socket_timeout_ms(self) -> int:
        """Return the socket connect timeout in milliseconds. Default is 2000."""
        if self._timeout is None:
            with self.store.tx() as tx:
                self._timeout = self._load_setting(tx,
                                                   KEY_SOCKET_TIMEOUT,
                                                   DEFAULT_SOCKET_TIMEOUT,
                                                   lambda v: _check_int(KEY_SOCKET_TIMEOUT, v, 1))
        return self._timeout

    @socket_timeout_ms.setter
    def socket_timeout_ms(self, millisecs: int) -> None:
        self._timeout = _check_int("socket_timeout_ms", millisecs, 1)

    def set_socket_timeout_seconds(self, seconds: int) -> 'MonitorConfig':
        """Set the socket connect timeout in seconds."""
        self.socket_timeout_ms = _check_int("socket timeout", seconds, 1) * 1000
        return self

    @property
    def check_interval_ms(self) -> int:
        """Return the periodic check interval in milliseconds.

        The default is zero, i.e. scans only happen when connectivity changes.
        """
        if self._interval is None:
            with self.store.tx() as tx:
                self._interval = self._load_setting(tx,
                                                    KEY_CHECK_INTERVAL,
                                                    DEFAULT_CHECK_INTERVAL,
                                                    lambda v: _check_int(KEY_CHECK_INTERVAL, v, 0))
        return self._interval

    @check_interval_ms.setter
    def check_interval_ms(self, millisecs: int) -> None:
        self._interval = _check_int("check_interval_ms", millisecs, 0)

    def set_check_interval_seconds(self, seconds: int) -> 'MonitorConfig':
        """Set the periodic check interval in seconds. 0 disables periodic checks."""
        self.check_interval_ms = _check_int("check interval", seconds, 0) * 1000
        return self

    def set_check_interval_minutes(self, minutes: int) -> 'MonitorConfig':
        """Set the periodic check interval in minutes. 0 disables periodic checks."""
        self.check_interval_ms = _check_int("check interval", minutes, 0) * 60 * 1000
        return self

    @property
    def max_attempts(self) -> int:
        """Return the number of connection attempts before a Host counts as unreachable."""
        if self._attempts is None:
            with self.store.tx() as tx:
                self._attempts = self._load_setting(tx,
                                                    KEY_MAX_ATTEMPTS,
                                                    DEFAULT_MAX_ATTEMPTS,
                                                    lambda v: _check_int(KEY_MAX_ATTEMPTS, v, 1))
        return self._attempts

    @max_attempts.setter
    def max_attempts(self, attempts: int) -> None:
        self._attempts = _check_int("max_attempts", attempts, 1)

    def settings(self) -> MonitorSettings:
        """Return the current settings."""
        return MonitorSettings(broadcast_channel=self.broadcast_channel,
                               socket_timeout_ms=self.socket_timeout_ms,
                               check_interval_ms=self.check_interval_ms,
                               max_attempts=self.max_attempts)

    def apply(self, settings: MonitorSettings) -> 'MonitorConfig':
        """Stage all values from <settings>."""
        self.broadcast_channel = settings.broadcast_channel
        self.socket_timeout_ms = settings.socket_timeout_ms
        self.check_interval_ms = settings.check_interval_ms
        self.max_attempts = settings.max_attempts
        return self

    # Committing

    def save(self) -> None:
        """Write the staged changes to the Store and (re-)arm or disarm the trigger.

        Hosts that are already persisted keep their persisted Status, since a
        scan cycle may have updated it after we loaded the registry.
        """
        self.log.debug("saving configuration")
        settings: Final[MonitorSettings] = self.settings()
        hosts: Final[HostRegistry] = self.hosts

        with self.store.tx(True) as tx:
            persisted: Final[HostRegistry] = self._load_hosts(tx)
            staged: HostRegistry = {}
            for host, status in hosts.items():
                staged[host] = persisted.get(host, status).copy()
            tx[KEY_HOSTS] = encode_registry(staged)
            tx[KEY_BROADCAST_CHANNEL] = settings.broadcast_channel
            tx[KEY_SOCKET_TIMEOUT] = settings.socket_timeout_ms
            tx[KEY_CHECK_INTERVAL] = settings.check_interval_ms
            tx[KEY_MAX_ATTEMPTS] = settings.max_attempts

        self._hosts = staged

        if self.trigger is None:
            return

        if staged:
            self.trigger.arm(settings)
        else:
            self.trigger.disarm()

    def reset(self) -> None:
        """Remove all persisted state and disarm the trigger."""
        self.log.debug("reset configuration")
        with self.store.tx(True) as tx:
            tx.clear()

        self._hosts = None
        self._channel = None
        self._timeout = None
        self._interval = None
        self._attempts = None

        if self.trigger is not None:
            self.trigger.disarm()


# Local Variables: #
# python-indent: 4 #
# End: #
