#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 22:49:57 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/main.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.main

(c) 2026 Benjamin Walkenhorst
"""


import argparse
import json
import pathlib
import sys
import time
from typing import Final, Optional

from hostmonitor import common
from hostmonitor.common import MonitorError
from hostmonitor.config import MonitorSettings
from hostmonitor.model import ConnectionType, Host, HostStatusEvent
from hostmonitor.notify import EventBus
from hostmonitor.service import MonitorService


def print_event(ev: HostStatusEvent) -> None:
    """Print a HostStatusEvent as one line of JSON."""
    print(json.dumps(ev.as_dict()), flush=True)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse the command line."""
    argp: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="hostmonitor",
        description="Keep an eye on the reachability of TCP services.")
    argp.add_argument("-b", "--basedir",
                      type=pathlib.Path,
                      default=common.path.base(),
                      help="Directory to store application data in")
    argp.add_argument("-a", "--add",
                      action="append",
                      default=[],
                      metavar="HOST:PORT",
                      help="Add a host to monitor (may be given multiple times)")
    argp.add_argument("-r", "--remove",
                      action="append",
                      default=[],
                      metavar="HOST:PORT",
                      help="Stop monitoring a host (may be given multiple times)")
    argp.add_argument("-t", "--timeout",
                      type=int,
                      help="Socket connect timeout in milliseconds")
    argp.add_argument("-n", "--attempts",
                      type=int,
                      help="Number of connection attempts before a host counts as unreachable")
    argp.add_argument("-i", "--interval",
                      type=int,
                      help="Seconds between periodic checks, 0 to disable them")
    argp.add_argument("-c", "--channel",
                      help="Channel to publish host status changes on")
    argp.add_argument("-T", "--transport",
                      choices=[x.name.lower() for x in ConnectionType],
                      default=ConnectionType.WIFI.name.lower(),
                      help="The network transport currently in use")
    argp.add_argument("-1", "--once",
                      action="store_true",
                      help="Run a single check, print the changes, and exit")
    argp.add_argument("-l", "--list",
                      action="store_true",
                      help="List the monitored hosts and their last known status")
    argp.add_argument("--reset",
                      action="store_true",
                      help="Forget all hosts and settings before doing anything else")

    return argp.parse_args(argv)


def configure(svc: MonitorService, args: argparse.Namespace) -> None:
    """Apply the changes requested on the command line to the configuration."""
    cfg = svc.config

    if args.reset:
        svc.reset()

    for hkey in args.add:
        h = Host.from_key(hkey)
        cfg.add_host(h.address, h.port)
    for hkey in args.remove:
        h = Host.from_key(hkey)
        cfg.remove_host(h.address, h.port)

    if args.timeout is not None:
        cfg.socket_timeout_ms = args.timeout
    if args.attempts is not None:
        cfg.max_attempts = args.attempts
    if args.interval is not None:
        cfg.set_check_interval_seconds(args.interval)
    if args.channel is not None:
        cfg.broadcast_channel = args.channel

    cfg.save()


def list_hosts(svc: MonitorService) -> None:
    """Print the monitored hosts and their status."""
    settings: Final[MonitorSettings] = svc.config.settings()
    print(f"Channel:  {settings.broadcast_channel}")
    print(f"Timeout:  {settings.socket_timeout_ms} ms")
    print(f"Attempts: {settings.max_attempts}")
    print(f"Interval: {settings.check_interval_ms // 1000} s")
    for host, status in sorted(svc.config.snapshot().items(), key=lambda x: x[0].key):
        print(f"{host.key:<40} {'up' if status.reachable else 'DOWN':<5} "
              f"{status.connection_type.name}")


def main(argv: Optional[list[str]] = None) -> int:
    """Run the monitor from the command line."""
    args = parse_args(argv)
    common.set_basedir(args.basedir)

    bus: Final[EventBus] = EventBus()
    transport: Final[ConnectionType] = ConnectionType[args.transport.upper()]

    with MonitorService(notifier=bus, transport=transport) as svc:
        try:
            configure(svc, args)
        except MonitorError as err:
            print(f"Invalid configuration: {err}", file=sys.stderr)
            return 1

        if args.list:
            list_hosts(svc)
            return 0

        bus.subscribe(svc.config.broadcast_channel, print_event)

        if args.once:
            svc.check(transport)
            return 0

        try:
            svc.start()
            while True:
                time.sleep(5)
        except KeyboardInterrupt:
            print("Telling the monitor to stop.")

    return 0


if __name__ == '__main__':
    sys.exit(main())

# Local Variables: #
# python-indent: 4 #
# End: #
