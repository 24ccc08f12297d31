#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 18:41:05 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/store.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.store

(c) 2026 Benjamin Walkenhorst

The Store keeps the monitor's configuration and host registry in an LMDB
environment. Values are JSON-encoded. All changes happen inside transactions,
so a commit of several keys either happens completely or not at all.
"""

import json
import logging
import pathlib
import traceback
from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Any, Final, Iterator, Optional, Union

import lmdb

from hostmonitor import common
from hostmonitor.common import MonitorError

map_size: Final[int] = 1 << 26
db_name: Final[bytes] = b"config"


class StoreError(MonitorError):
    """Exception class to indicate errors in the persistence layer"""


class TxError(StoreError):
    """TxError indicates an error related to transaction-handling."""


@dataclass(kw_only=True, slots=True)
class Tx:
    """Tx wraps a database transaction."""

    log: logging.Logger
    tx: lmdb.Transaction
    rw: bool

    def __getitem__(self, key: str) -> Optional[Any]:
        """Return the decoded value stored under <key>, or None.

        A value that cannot be decoded raises a ValueError, it is up to the
        caller to decide what to do about it.
        """
        val = self.tx.get(key.encode())
        if val is None:
            return None

        return json.loads(val.decode())

    def __setitem__(self, key: str, val: Any) -> None:
        if not self.rw:
            raise TxError("Cannot change the database in a readonly transaction!")

        raw: Final[bytes] = json.dumps(val).encode()
        self.tx.put(key.encode(), raw, overwrite=True)

    def __delitem__(self, key: str) -> None:
        if not self.rw:
            raise TxError("Cannot change the database in a readonly transaction!")

        self.tx.delete(key.encode())

    def __contains__(self, key: str) -> bool:
        return self.tx.get(key.encode()) is not None

    def keys(self) -> list[str]:
        """Return all keys currently in the database."""
        cur: lmdb.Cursor = self.tx.cursor()
        return [k.decode() for k in cur.iternext(keys=True, values=False)]

    def clear(self) -> None:
        """Remove ALL entries."""
        if not self.rw:
            raise TxError("Cannot change the database in a readonly transaction!")

        cur: lmdb.Cursor = self.tx.cursor()
        while cur.first():
            cur.delete()


class Store:
    """Store provides the LMDB environment and transactions on it."""

    __slots__ = [
        "log",
        "lock",
        "env",
        "db",
        "path",
    ]

    log: logging.Logger
    lock: RLock
    env: lmdb.Environment
    db: 'lmdb._Database'
    path: str

    def __init__(self, root: Union[str, pathlib.Path] = "") -> None:
        """Open (or create) the store environment in <root>."""
        self.log = common.get_logger("store")
        if root == "":
            root = common.path.store
        self.path = str(root)
        self.log.debug("Open Store environment in %s", self.path)
        self.lock = RLock()
        try:
            self.env = lmdb.Environment(self.path,
                                        subdir=True,
                                        map_size=map_size,
                                        metasync=True,
                                        create=True,
                                        max_dbs=2,
                                        )
            self.db = self.env.open_db(db_name)
        except lmdb.Error as err:
            msg = f"Cannot open Store in {self.path}: {err}"
            self.log.error(msg)
            raise StoreError(msg) from err

    @contextmanager
    def tx(self, rw: bool = False) -> Iterator[Tx]:
        """Perform a database transaction. Unless rw is True, no changes are permitted.

        If the body raises an exception, the transaction is aborted and the
        exception propagates to the caller.
        """
        with self.lock:
            tx: lmdb.Transaction = self.env.begin(write=rw, db=self.db)
            try:
                yield Tx(log=self.log, tx=tx, rw=rw)
            except Exception as err:
                cname: Final[str] = err.__class__.__name__
                self.log.error("Abort transaction due to %s: %s\n%s",
                               cname,
                               err,
                               "\n".join(traceback.format_exception(err)))
                tx.abort()
                raise
            else:
                tx.commit()

    def close(self) -> None:
        """Close the LMDB environment."""
        self.log.debug("Close Store in %s", self.path)
        self.env.close()


# Local Variables: #
# python-indent: 4 #
# End: #
