"""
NTR Protocol Layer
==================

Packet layout and payload formats for the NTR debugger protocol. Nothing
in this package touches a socket; the transport layer moves the bytes.

    commands.py   command codes, packet types, fixed constants
    packet.py     the 84 byte header codec
    process.py    process-list text parsing
"""

from . import commands
from . import packet
from . import process

from .packet import Packet


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
