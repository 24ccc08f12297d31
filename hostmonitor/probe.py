#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 19:03:52 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/probe.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.probe

(c) 2026 Benjamin Walkenhorst
"""


import logging
import socket
import time
from concurrent import futures
from dataclasses import dataclass, field
from ipaddress import IPv4Address, IPv6Address, ip_address
from threading import RLock
from typing import Final, Optional, Union

from dns.exception import DNSException, Timeout
from dns.resolver import NXDOMAIN, NoAnswer, Resolver

from hostmonitor import common
from hostmonitor.model import Host

rr_types: Final[tuple[str, ...]] = ("A", "AAAA")

sysres_pool: Final[futures.ThreadPoolExecutor] = futures.ThreadPoolExecutor(
    max_workers=4,
    thread_name_prefix="sysres")


@dataclass(kw_only=True, slots=True)
class ReachabilityProbe:
    """ReachabilityProbe checks if a TCP port on a Host accepts connections."""

    log: logging.Logger = field(default_factory=lambda: common.get_logger("probe"))
    lock: RLock = field(default_factory=RLock)
    res: Optional[Resolver] = None
    attempts: int = 0

    def probe(self, host: Host, timeout_ms: int, max_attempts: int) -> bool:
        """Return True if <host> accepted a connection within <max_attempts> attempts.

        Attempts are made back to back, we return as soon as one of them
        succeeds. Network errors are never raised, they just count as a
        failed attempt.
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, not {max_attempts}")
        if timeout_ms < 1:
            raise ValueError(f"timeout_ms must be at least 1, not {timeout_ms}")

        with self.lock:
            self.attempts = 0
            while self.attempts < max_attempts:
                self.attempts += 1
                if self.connect(host, timeout_ms / 1000):
                    self.log.debug("%s is reachable (attempt %d/%d)",
                                   host,
                                   self.attempts,
                                   max_attempts)
                    return True

            self.log.debug("%s is unreachable after %d attempts",
                           host,
                           self.attempts)
            return False

    def connect(self, host: Host, timeout: float) -> bool:
        """Make one attempt to open a TCP connection to <host>.

        The attempt as a whole, name lookup included, gets <timeout> seconds.
        Each address only gets whatever time is left.
        """
        deadline: Final[float] = time.monotonic() + timeout
        for addr in self.resolve(host, timeout):
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self.log.debug("Out of time connecting to %s, %s:%d not tried",
                               host,
                               addr,
                               host.port)
                break
            try:
                with socket.create_connection((str(addr), host.port), timeout=remaining):
                    return True
            except OSError as err:
                cname: Final[str] = err.__class__.__name__
                self.log.debug("%s trying to connect to %s:%d - %s",
                               cname,
                               addr,
                               host.port,
                               err)
        return False

    def resolve(self, host: Host, timeout: float) -> list[Union[IPv4Address, IPv6Address]]:
        """Return the addresses to try for <host>.

        IP literals are returned as they are. Names are looked up within
        <timeout> seconds all told, so a stuck resolver does not blow the
        probe's deadline. Names DNS knows nothing about (localhost, entries
        in /etc/hosts) are handed to the system resolver.
        """
        try:
            return [ip_address(host.address)]
        except ValueError:
            pass

        deadline: Final[float] = time.monotonic() + timeout
        addrs: list[Union[IPv4Address, IPv6Address]] = []
        try:
            if self.res is None:
                self.res = Resolver()
            for rtype in rr_types:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return addrs
                try:
                    answer = self.res.resolve(host.address, rtype, lifetime=remaining)
                    addrs.extend(ip_address(rr.address) for rr in answer)
                except (NXDOMAIN, NoAnswer):
                    continue
                if addrs:
                    return addrs
        except Timeout as err:
            self.log.debug("Timeout resolving %s: %s",
                           host.address,
                           err)
            return addrs
        except DNSException as err:
            self.log.debug("Cannot resolve %s: %s",
                           host.address,
                           err)

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return addrs

        # getaddrinfo has no timeout of its own
        fut = sysres_pool.submit(socket.getaddrinfo,
                                 host.address,
                                 host.port,
                                 type=socket.SOCK_STREAM)
        try:
            for info in fut.result(timeout=remaining):
                addr = ip_address(info[4][0])
                if addr not in addrs:
                    addrs.append(addr)
        except futures.TimeoutError:
            self.log.debug("System resolver took too long to look up %s",
                           host.address)
        except OSError as err:
            self.log.debug("System resolver does not know %s, either: %s",
                           host.address,
                           err)

        return addrs


# Local Variables: #
# python-indent: 4 #
# End: #
