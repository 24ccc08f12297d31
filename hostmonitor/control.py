#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Time-stamp: <2026-10-18 21:07:30 krylon>
#
# /data/code/python/hostmonitor/hostmonitor/control.py
# created on 18. 10. 2026
# (c) 2026 Benjamin Walkenhorst
#
# This file is part of the HostMonitor reachability monitor. It is distributed
# under the terms of the GNU General Public License 3. See the file LICENSE for
# details or find a copy online at https://www.gnu.org/licenses/gpl-3.0

"""
hostmonitor.control

(c) 2026 Benjamin Walkenhorst

This file contains data types for controlling the scan worker thread.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from hostmonitor.model import ConnectionType


class Cmd(Enum):
    """Cmd represents a command to the scan worker."""

    Check = auto()
    Stop = auto()


@dataclass(kw_only=True, slots=True)
class Message:
    """Message is a message to be sent to the scan worker."""

    Tag: Cmd
    Payload: Optional[ConnectionType] = None


# Local Variables: #
# python-indent: 4 #
# End: #
