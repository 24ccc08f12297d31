#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 23:18:40 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/test_store.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.test_store

(c) 2026 Benjamin Walkenhorst
"""

import os
import shutil
import unittest
from datetime import datetime
from typing import Final, Optional

from hostmonitor import common
from hostmonitor.store import Store, TxError

test_dir: Final[str] = os.path.join(
    "/tmp",
    datetime.now().strftime(f"{common.AppName.lower()}_test_store_%Y%m%d_%H%M%S"))


class TestStore(unittest.TestCase):
    """Test the Store."""

    _store: Optional[Store] = None

    @classmethod
    def setUpClass(cls) -> None:
        """Prepare the testing environment."""
        common.set_basedir(test_dir)

    @classmethod
    def tearDownClass(cls) -> None:
        """Clean up afterwards."""
        if cls._store is not None:
            cls._store.close()
        shutil.rmtree(test_dir, ignore_errors=True)

    @classmethod
    def store(cls, s: Optional[Store] = None) -> Store:
        """Set or return the Store."""
        if s is not None:
            cls._store = s
        if cls._store is not None:
            return cls._store

        raise ValueError("Store instance is None")

    def test_01_open(self) -> None:
        """Attempt to open a fresh Store."""
        s: Store = Store()
        self.assertIsNotNone(s)
        self.assertIsInstance(s, Store)
        self.store(s)

    def test_02_put_get(self) -> None:
        """Store a few values and read them back."""
        s: Final[Store] = self.store()
        values: Final[dict[str, object]] = {
            "maxAttempts": 5,
            "broadcastChannel": "test.channel",
            "hosts": {"svc.example.com:443": {"reachable": True, "connectionType": "WIFI"}},
        }

        with s.tx(True) as tx:
            for k, v in values.items():
                tx[k] = v

        with s.tx() as tx:
            for k, v in values.items():
                self.assertIn(k, tx)
                self.assertEqual(tx[k], v)
            self.assertIsNone(tx["no such key"])
            self.assertNotIn("no such key", tx)
            self.assertEqual(sorted(tx.keys()), sorted(values.keys()))

    def test_03_readonly(self) -> None:
        """Changes in a readonly transaction are refused."""
        s: Final[Store] = self.store()

        with self.assertRaises(TxError):
            with s.tx() as tx:
                tx["maxAttempts"] = 1

        with s.tx() as tx:
            self.assertEqual(tx["maxAttempts"], 5)

    def test_04_abort(self) -> None:
        """A transaction that raises an exception leaves no trace."""
        s: Final[Store] = self.store()

        with self.assertRaises(RuntimeError):
            with s.tx(True) as tx:
                tx["maxAttempts"] = 23
                tx["socketTimeoutMs"] = 500
                raise RuntimeError("Never mind")

        with s.tx() as tx:
            self.assertEqual(tx["maxAttempts"], 5)
            self.assertIsNone(tx["socketTimeoutMs"])

    def test_05_clear(self) -> None:
        """Remove everything."""
        s: Final[Store] = self.store()

        with s.tx(True) as tx:
            del tx["broadcastChannel"]

        with s.tx() as tx:
            self.assertNotIn("broadcastChannel", tx)

        with s.tx(True) as tx:
            tx.clear()

        with s.tx() as tx:
            self.assertEqual(tx.keys(), [])


# Local Variables: #
# python-indent: 4 #
# End: #
