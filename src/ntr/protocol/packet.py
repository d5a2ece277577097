""" Encoding and decoding of the fixed-size NTR packet header. Every packet
    on the wire is an 84 byte little-endian header, optionally followed by
    a trailing payload whose length is declared in the header:

        magic | sequence | type | command | args[16] | data_length | data...
"""

from __future__ import annotations

import struct
from typing import Optional, Sequence, Tuple

from .commands import ARG_COUNT, HEADER_SIZE, MAGIC, REQUEST, U32_MAX, names


_header = struct.Struct('<%dI' % (5 + ARG_COUNT))


def _pad(args: Optional[Sequence[int]]) -> Tuple[int, ...]:

    if args is None:
        return (0,) * ARG_COUNT

    args = tuple(args)
    if len(args) > ARG_COUNT:
        raise ValueError('at most %d arguments, got %d' % (ARG_COUNT, len(args)))

    return args + (0,) * (ARG_COUNT - len(args))


def _check(name: str, value: int) -> int:

    value = int(value)
    if value < 0 or value > U32_MAX:
        raise ValueError('%s is not an unsigned 32-bit value: %r' % (name, value))

    return value


def encode(sequence: int, packet_type: int, command: int,
           args: Optional[Sequence[int]] = None, data_length: int = 0,
           magic: int = MAGIC) -> bytes:
    """ Return the 84 byte header for a packet. The *args* are zero-padded
        to sixteen values.
    """

    values = [_check('magic', magic),
              _check('sequence', sequence),
              _check('packet_type', packet_type),
              _check('command', command)]

    for index, arg in enumerate(_pad(args)):
        values.append(_check('args[%d]' % (index), arg))

    values.append(_check('data_length', data_length))
    return _header.pack(*values)


def decode(header: bytes) -> Packet:
    """ Interpret an 84 byte *header*. The returned :class:`Packet` has no
        data attached; the caller is expected to read :attr:`data_length`
        more bytes from the stream.
    """

    if len(header) != HEADER_SIZE:
        raise ValueError('header must be %d bytes, got %d' % (HEADER_SIZE, len(header)))

    values = _header.unpack(header)
    magic, sequence, packet_type, command = values[:4]
    args = values[4:4 + ARG_COUNT]
    data_length = values[-1]

    packet = Packet(command, args, packet_type=packet_type, sequence=sequence)
    packet.magic = magic
    packet.data_length = data_length
    return packet


class Packet:
    """ One NTR packet: the header fields plus any trailing *data*. Outgoing
        packets are normally built without a sequence number; the sender
        assigns one at transmission time.

        :ivar data_length: Length of the trailing payload. For outgoing
            packets this tracks ``len(data)``; for decoded headers it is the
            length the peer declared.
    """

    def __init__(self, command, args=None, data=None, packet_type=REQUEST, sequence=None):

        self.magic = MAGIC
        self.sequence = sequence
        self.packet_type = packet_type
        self.command = command
        self.args = _pad(args)

        if data is None:
            self.data = b''
        else:
            self.data = bytes(data)

        self.data_length = len(self.data)


    def __repr__(self):

        name = names.get(self.command, str(self.command))
        args = list(self.args)
        while args and args[-1] == 0:
            args.pop()

        return 'Packet(%s, seq=%r, type=%d, args=%r, data_length=%d)' % (
            name, self.sequence, self.packet_type, args, self.data_length)


    def header(self):
        """ Return the encoded 84 byte header for this packet.
        """

        if self.sequence is None:
            raise RuntimeError('packets must have a sequence number to be put on the wire')

        return encode(self.sequence, self.packet_type, self.command,
                      self.args, self.data_length, self.magic)


    def to_bytes(self):
        """ Return the header followed by any trailing data.
        """

        return self.header() + self.data


# end of class Packet


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
