"""Transport exceptions.

These live outside :mod:`ntr.protocol` so the protocol remains free of
any socket handling.
"""


class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportConnectionError(TransportError):
    """The TCP connection to the server could not be established."""


class TransportIOError(TransportError):
    """A read or write failed on an established connection."""


class TransportDisconnected(TransportIOError):
    """The connection is gone; no further responses will arrive.

    Raised to every caller waiting on a response when the receiver stops,
    and to every caller that tries to wait afterwards.
    """


class ProtocolDesync(TransportDisconnected):
    """A packet header did not begin with the protocol magic.

    The stream is no longer aligned on packet boundaries and cannot be
    recovered, so this is fatal to the connection.
    """


class TransportTimeout(TransportError):
    """A request did not receive a timely response."""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
