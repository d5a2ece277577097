""" Python client for the NTR remote debugger. Connect to a console, look
    up a running process by title id, and read or write its memory:

        with ntr.connect('192.168.2.210') as connection:
            pid = connection.get_pid(0x0004000000187000)
            health = connection.read_u32(0x83343A4, pid)
"""

# Utility components.

from . import config
from . import poll

# Submodules used by multiple other components.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from .connection import Connection, connect
from .protocol.process import Process

from .transport.base import (
    TransportError,
    TransportConnectionError,
    TransportIOError,
    TransportDisconnected,
    ProtocolDesync,
    TransportTimeout,
)

__version__ = '0.1.0'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
