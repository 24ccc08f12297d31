#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 23:46:02 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/test_config.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.test_config

(c) 2026 Benjamin Walkenhorst
"""

import os
import shutil
import unittest
from datetime import datetime
from typing import Final, Optional

from hostmonitor import common
from hostmonitor.common import ConfigError
from hostmonitor.config import (DEFAULT_BROADCAST_CHANNEL,
                                DEFAULT_CHECK_INTERVAL, DEFAULT_MAX_ATTEMPTS,
                                DEFAULT_SOCKET_TIMEOUT, KEY_HOSTS,
                                KEY_MAX_ATTEMPTS, MonitorConfig,
                                MonitorSettings)
from hostmonitor.model import ConnectionType, Host, Status
from hostmonitor.store import Store

test_dir: Final[str] = os.path.join(
    "/tmp",
    datetime.now().strftime(f"{common.AppName.lower()}_test_config_%Y%m%d_%H%M%S"))


class FakeTrigger:
    """FakeTrigger records how it was armed and disarmed."""

    def __init__(self) -> None:
        self.armed: list[MonitorSettings] = []
        self.disarmed: int = 0

    def arm(self, settings: MonitorSettings) -> None:
        self.armed.append(settings)

    def disarm(self) -> None:
        self.disarmed += 1


class TestMonitorSettings(unittest.TestCase):
    """Test validation of MonitorSettings."""

    def test_01_defaults(self) -> None:
        """The defaults are sane."""
        s: Final[MonitorSettings] = MonitorSettings()
        self.assertEqual(s.broadcast_channel, DEFAULT_BROADCAST_CHANNEL)
        self.assertEqual(s.socket_timeout_ms, 2000)
        self.assertEqual(s.check_interval_ms, 0)
        self.assertEqual(s.max_attempts, 3)

    def test_02_invalid(self) -> None:
        """Invalid values are refused, not clamped."""
        test_cases: Final[list[dict]] = [
            {"broadcast_channel": ""},
            {"socket_timeout_ms": 0},
            {"socket_timeout_ms": -100},
            {"check_interval_ms": -1},
            {"max_attempts": 0},
            {"max_attempts": True},
        ]

        for c in test_cases:
            with self.assertRaises(ConfigError):
                MonitorSettings(**c)


class TestMonitorConfig(unittest.TestCase):
    """Test the MonitorConfig."""

    _store: Optional[Store] = None

    @classmethod
    def setUpClass(cls) -> None:
        """Prepare the testing environment."""
        common.set_basedir(test_dir)
        cls._store = Store(os.path.join(test_dir, "config_store"))

    @classmethod
    def tearDownClass(cls) -> None:
        """Clean up afterwards."""
        if cls._store is not None:
            cls._store.close()
        shutil.rmtree(test_dir, ignore_errors=True)

    @classmethod
    def store(cls) -> Store:
        """Return the Store."""
        if cls._store is not None:
            return cls._store

        raise ValueError("Store instance is None")

    def setUp(self) -> None:
        with self.store().tx(True) as tx:
            tx.clear()

    def test_01_defaults(self) -> None:
        """An empty Store yields the default settings and no hosts."""
        cfg: Final[MonitorConfig] = MonitorConfig(self.store())
        self.assertEqual(cfg.hosts, {})
        self.assertEqual(cfg.broadcast_channel, DEFAULT_BROADCAST_CHANNEL)
        self.assertEqual(cfg.socket_timeout_ms, DEFAULT_SOCKET_TIMEOUT)
        self.assertEqual(cfg.check_interval_ms, DEFAULT_CHECK_INTERVAL)
        self.assertEqual(cfg.max_attempts, DEFAULT_MAX_ATTEMPTS)

    def test_02_round_trip(self) -> None:
        """Saving and loading yields the same configuration."""
        cfg: MonitorConfig = MonitorConfig(self.store())
        cfg.add_host("svc.example.com", 443) \
           .add_host("10.0.0.1", 22) \
           .add_host("::1", 8080) \
           .set_socket_timeout_seconds(5) \
           .set_check_interval_minutes(2)
        cfg.max_attempts = 7
        cfg.broadcast_channel = "test.status"
        cfg.save()

        cfg.commit_statuses({Host("10.0.0.1", 22): Status(False, ConnectionType.MOBILE)})

        other: Final[MonitorConfig] = MonitorConfig(self.store())
        self.assertEqual(other.hosts, {
            Host("svc.example.com", 443): Status(),
            Host("10.0.0.1", 22): Status(False, ConnectionType.MOBILE),
            Host("::1", 8080): Status(),
        })
        self.assertEqual(other.hosts, cfg.hosts)
        self.assertEqual(other.socket_timeout_ms, 5000)
        self.assertEqual(other.check_interval_ms, 120000)
        self.assertEqual(other.max_attempts, 7)
        self.assertEqual(other.broadcast_channel, "test.status")

    def test_03_add_remove(self) -> None:
        """Adding and removing a Host before any scan leaves nothing behind."""
        cfg: Final[MonitorConfig] = MonitorConfig(self.store())
        cfg.add_host("svc.example.com", 443)
        cfg.remove_host("svc.example.com", 443)
        cfg.remove_host("not.monitored.example.com", 80)
        cfg.save()

        self.assertEqual(cfg.hosts, {})
        self.assertEqual(MonitorConfig(self.store()).hosts, {})
        self.assertIsNone(cfg.status("svc.example.com", 443))

    def test_04_add_existing(self) -> None:
        """Adding a Host twice keeps its Status."""
        cfg: Final[MonitorConfig] = MonitorConfig(self.store())
        cfg.add_host("svc.example.com", 443).save()
        cfg.commit_statuses({Host("svc.example.com", 443): Status(False, ConnectionType.WIFI)})
        cfg.add_host("svc.example.com", 443).save()

        self.assertEqual(cfg.status("svc.example.com", 443),
                         Status(False, ConnectionType.WIFI))

    def test_05_save_keeps_scan_results(self) -> None:
        """A stale config does not overwrite what a scan has persisted."""
        stale: Final[MonitorConfig] = MonitorConfig(self.store())
        stale.add_host("svc.example.com", 443).save()

        scanner: Final[MonitorConfig] = MonitorConfig(self.store())
        scanner.commit_statuses({Host("svc.example.com", 443): Status(False, ConnectionType.WIFI)})

        stale.add_host("www.example.com", 80).save()

        snap = stale.snapshot()
        self.assertEqual(snap[Host("svc.example.com", 443)], Status(False, ConnectionType.WIFI))
        self.assertEqual(snap[Host("www.example.com", 80)], Status())

    def test_06_commit_removed(self) -> None:
        """Statuses of Hosts removed during a scan are dropped."""
        cfg: Final[MonitorConfig] = MonitorConfig(self.store())
        cfg.add_host("svc.example.com", 443).save()
        cfg.remove_host("svc.example.com", 443).save()
        cfg.commit_statuses({Host("svc.example.com", 443): Status(False, ConnectionType.WIFI)})

        self.assertEqual(cfg.snapshot(), {})

    def test_07_invalid_values(self) -> None:
        """Invalid values are refused at configuration time."""
        cfg: Final[MonitorConfig] = MonitorConfig(self.store())

        with self.assertRaises(ConfigError):
            cfg.broadcast_channel = ""
        with self.assertRaises(ConfigError):
            cfg.socket_timeout_ms = 0
        with self.assertRaises(ConfigError):
            cfg.set_socket_timeout_seconds(0)
        with self.assertRaises(ConfigError):
            cfg.set_check_interval_seconds(-1)
        with self.assertRaises(ConfigError):
            cfg.max_attempts = 0
        with self.assertRaises(ConfigError):
            cfg.add_host("svc.example.com", 0)

        self.assertEqual(cfg.settings(), MonitorSettings())

    def test_08_corrupt(self) -> None:
        """Garbage in the Store is ignored."""
        with self.store().tx(True) as tx:
            tx[KEY_HOSTS] = {"svc.example.com:443": {"reachable": "maybe"}}
            tx[KEY_MAX_ATTEMPTS] = -5

        cfg: MonitorConfig = MonitorConfig(self.store())
        self.assertEqual(cfg.hosts, {})
        self.assertEqual(cfg.max_attempts, DEFAULT_MAX_ATTEMPTS)

        with self.store().tx(True) as tx:
            tx.tx.put(KEY_HOSTS.encode(), b"{this is not json")

        cfg = MonitorConfig(self.store())
        self.assertEqual(cfg.hosts, {})

        with self.store().tx(True) as tx:
            tx[KEY_HOSTS] = ["svc.example.com:443"]

        cfg = MonitorConfig(self.store())
        self.assertEqual(cfg.hosts, {})

    def test_09_trigger(self) -> None:
        """save() arms the trigger if there are hosts, disarms it otherwise."""
        trig: Final[FakeTrigger] = FakeTrigger()
        cfg: Final[MonitorConfig] = MonitorConfig(self.store(), trig)

        cfg.save()
        self.assertEqual(trig.armed, [])
        self.assertEqual(trig.disarmed, 1)

        cfg.add_host("svc.example.com", 443).set_check_interval_seconds(30).save()
        self.assertEqual(len(trig.armed), 1)
        self.assertEqual(trig.armed[0].check_interval_ms, 30000)

        cfg.remove_all_hosts().save()
        self.assertEqual(trig.disarmed, 2)

        cfg.add_host("svc.example.com", 443).save()
        cfg.reset()
        self.assertEqual(trig.disarmed, 3)
        self.assertEqual(cfg.hosts, {})
        self.assertEqual(cfg.check_interval_ms, DEFAULT_CHECK_INTERVAL)
        with self.store().tx() as tx:
            self.assertEqual(tx.keys(), [])


# Local Variables: #
# python-indent: 4 #
# End: #
