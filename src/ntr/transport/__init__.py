"""Transport layer: the socket halves of an NTR connection."""

from .base import (
    TransportError,
    TransportConnectionError,
    TransportIOError,
    TransportDisconnected,
    ProtocolDesync,
    TransportTimeout,
)

from . import sender
from . import receiver
