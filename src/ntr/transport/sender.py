""" The outbound half of an NTR connection. A :class:`Sender` owns the
    sequence counter and the heartbeat gating flag, and serializes every
    packet written to the socket.
"""

import logging
import threading
import time

from ..protocol import commands
from ..protocol.packet import Packet
from .base import TransportIOError

logger = logging.getLogger(__name__)


class Sender:
    """ Write packets to *socket*. A header and its trailing data go out as
        two separate writes; :attr:`lock` is held across both so another
        thread's packet cannot land between them. The lock is reentrant,
        allowing a caller to hold it while inspecting the heartbeat state
        and then sending.

        :ivar sequence: The sequence number the next packet will carry.
        :ivar heartbeat_sendable: False from the moment a heartbeat is sent
            until the receiver sees the server acknowledge it.
        :ivar last_heartbeat: :func:`time.monotonic` timestamp of the most
            recent heartbeat, or None if none has been sent.
    """

    def __init__(self, socket):

        self.socket = socket
        self.lock = threading.RLock()
        self._heartbeat_lock = threading.Lock()
        self.sequence = commands.SEQUENCE_START
        self.heartbeat_sendable = True
        self.last_heartbeat = None


    def _write(self, data):

        try:
            self.socket.sendall(data)
        except OSError as e:
            raise TransportIOError('send failed: ' + str(e)) from e

        return len(data)


    def send(self, packet):
        """ Assign the next sequence number to *packet* and transmit it.
            Returns the number of bytes written, header included.
        """

        with self.lock:
            packet.sequence = self.sequence
            header = packet.header()
            self.sequence = (self.sequence + commands.SEQUENCE_STRIDE) & commands.U32_MAX

            logger.debug('send %r', packet)

            written = self._write(header)
            if packet.data:
                written += self._write(packet.data)

        return written


    def send_heartbeat(self):

        with self.lock:
            # The reply can arrive before the write returns; clear the flag
            # first so the acknowledgement is not lost.

            with self._heartbeat_lock:
                self.heartbeat_sendable = False
                self.last_heartbeat = time.monotonic()

            return self.send(Packet(commands.HEARTBEAT))


    def send_list_process(self):
        return self.send(Packet(commands.LIST_PROCESS))


    def send_reload(self):
        return self.send(Packet(commands.RELOAD))


    def send_mem_read(self, address, size, pid):
        return self.send(Packet(commands.MEMORY_READ, (pid, address, size)))


    def send_mem_write(self, address, pid, data):

        data = bytes(data)
        packet = Packet(commands.MEMORY_WRITE, (pid, address, len(data)), data,
                        packet_type=commands.REQUEST_WITH_DATA)

        return self.send(packet)


    def acknowledge_heartbeat(self):
        """ The server answered a heartbeat; another one may be sent.
            Only the flag lock is taken, never the socket lock, so the
            receiver does not wait behind a blocked write.
        """

        with self._heartbeat_lock:
            self.heartbeat_sendable = True


    def heartbeat_due(self, interval):
        """ Return True if a heartbeat may be sent now: the previous one was
            acknowledged, and at least *interval* seconds have passed since
            it went out. Call with :attr:`lock` held to act on the answer.
        """

        with self._heartbeat_lock:
            if self.heartbeat_sendable == False:
                return False

            if self.last_heartbeat is None:
                return True

            return time.monotonic() - self.last_heartbeat >= interval


# end of class Sender


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
