""" The inbound half of an NTR connection. A :class:`Receiver` reads every
    packet the server sends and hands the interesting payloads to the
    :class:`Mailbox` waiting for that kind of response.
"""

import logging
import queue
import threading

from ..protocol import commands
from ..protocol import packet as codec
from ..protocol import process
from .base import ProtocolDesync, TransportDisconnected, TransportTimeout

logger = logging.getLogger(__name__)


def reraise(error):
    """ Raise a fresh copy of *error*, chained to the original. The same
        stored error is reported to many threads, and raising one instance
        repeatedly would rewrite its traceback each time.
    """

    raise type(error)(*error.args) from error



class _Closed:
    """ Marker placed in a :class:`Mailbox` queue to wake blocked readers.
    """


class Mailbox:
    """ Single-reader handoff for one kind of response. The receiver thread
        calls :func:`put`; a caller blocks in :func:`get`. Once the mailbox
        is closed every blocked and future :func:`get` raises the error the
        mailbox was closed with.
    """

    def __init__(self, name):

        self.name = name
        self.error = None
        self._queue = queue.Queue()


    def put(self, item):
        self._queue.put(item)


    def get(self, timeout=None):
        """ Return the next item. Raises :class:`TransportTimeout` if nothing
            arrives within *timeout* seconds; a *timeout* of None blocks until
            an item arrives or the mailbox is closed.
        """

        if self.error is not None:
            reraise(self.error)

        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            raise TransportTimeout('no %s response in %.2f sec' % (self.name, timeout))

        if isinstance(item, _Closed):
            # Put the marker back for any other thread blocked here.
            self._queue.put(item)
            reraise(self.error)

        return item


    def drain(self):
        """ Discard any queued items, returning how many were dropped.
        """

        dropped = 0

        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                break

            if isinstance(item, _Closed):
                self._queue.put(item)
                break

            dropped += 1

        return dropped


    def close(self, error):

        if self.error is not None:
            return

        self.error = error
        self._queue.put(_Closed())


# end of class Mailbox



class Receiver:
    """ Read packets from *socket* on a background thread until the stream
        ends. Heartbeat replies re-arm the *sender*'s heartbeat; process-list
        dumps and memory-read payloads are routed to :attr:`processes` and
        :attr:`memory` respectively. Anything else is dropped.

        When the loop ends, for whatever reason, both mailboxes are closed
        with the terminating error so no caller blocks forever.

        :ivar error: The exception that ended the loop, or None while it
            is still running.
    """

    def __init__(self, socket, sender):

        self.socket = socket
        self.sender = sender
        self.error = None
        self.closing = False

        self.processes = Mailbox('process list')
        self.memory = Mailbox('memory read')

        self.thread = threading.Thread(target=self.run, name='ntr-receiver')
        self.thread.daemon = True


    def start(self):
        self.thread.start()


    @property
    def alive(self):
        return self.error is None and self.thread.is_alive()


    def _read_exactly(self, length):
        """ Return exactly *length* bytes from the socket. A short read means
            the peer closed the connection.
        """

        chunks = list()
        remaining = length

        while remaining > 0:
            try:
                chunk = self.socket.recv(remaining)
            except OSError as e:
                raise TransportDisconnected('receive failed: ' + str(e)) from e

            if chunk == b'':
                raise TransportDisconnected('connection closed by peer')

            chunks.append(chunk)
            remaining -= len(chunk)

        return b''.join(chunks)


    def receive(self):
        """ Read and return the next complete :class:`Packet`.
        """

        header = self._read_exactly(commands.HEADER_SIZE)
        packet = codec.decode(header)

        if packet.magic != commands.MAGIC:
            raise ProtocolDesync('bad magic 0x%08x in header (seq %d)' % (packet.magic, packet.sequence))

        if packet.data_length > 0:
            packet.data = self._read_exactly(packet.data_length)

        return packet


    def route(self, packet):
        """ Deliver the payload of *packet* to whoever is waiting for it.
        """

        command = packet.command

        if command == commands.HEARTBEAT:
            self.sender.acknowledge_heartbeat()

            if packet.data:
                text = packet.data.decode('utf-8', errors='replace')
                if process.complete(text):
                    self.processes.put(text)
                else:
                    # Whatever else the server prints arrives piggybacked
                    # on heartbeat replies.
                    logger.debug('server: %s', text.rstrip())

        elif command == commands.MEMORY_READ:
            self.memory.put(packet.data)

        else:
            logger.debug('dropped %r', packet)


    def run(self):

        try:
            while True:
                packet = self.receive()
                logger.debug('recv %r', packet)
                self.route(packet)

        except TransportDisconnected as e:
            error = e
        except Exception as e:
            logger.exception('receiver failed')
            error = TransportDisconnected('receiver failed: ' + str(e))
            error.__cause__ = e

        if self.closing:
            error = TransportDisconnected('connection closed')
            logger.debug('receiver stopped: connection closed locally')
        else:
            logger.warning('receiver stopped: %s', error)

        self.error = error
        self.processes.close(error)
        self.memory.close(error)


# end of class Receiver


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
