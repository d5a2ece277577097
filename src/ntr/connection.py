""" The caller-facing side of an NTR connection. :func:`connect` opens the
    TCP connection and starts the background threads; the returned
    :class:`Connection` issues requests and blocks until the matching
    response arrives.

    The protocol does not echo anything in a response that identifies the
    request it answers. Responses are matched to requests purely by kind,
    which only works while at most one request of each kind is outstanding;
    the :class:`Connection` holds a per-kind lock for the duration of each
    request to guarantee that.
"""

import logging
import socket
import threading

from . import config
from . import heartbeat
from . import memory
from .protocol import process
from .transport.base import TransportConnectionError, TransportDisconnected
from .transport.receiver import Receiver, reraise
from .transport.sender import Sender

logger = logging.getLogger(__name__)


def connect(address, port=None, timeout=...):
    """ Connect to the NTR debugger at *address* and return a started
        :class:`Connection`. The *port* defaults to :data:`config.port`;
        *timeout* sets the connection's default response timeout.
    """

    connection = Connection(address, port, timeout)
    connection.start()
    return connection


class Connection(memory.TypedMemory):
    """ A single connection to an NTR debugger. Construction opens the TCP
        socket; :func:`start` launches the receiver and heartbeat threads.

        Every method that waits for a response accepts a *timeout* in
        seconds. The default, ``...``, uses the connection's own
        :attr:`timeout`; None waits indefinitely. If the connection drops
        while a caller is waiting, the caller receives
        :class:`TransportDisconnected` rather than blocking forever.

        :ivar address: Host name or IP address of the console.
        :ivar port: TCP port of the debugger.
        :ivar timeout: Default response timeout in seconds, or None.
    """

    def __init__(self, address, port=None, timeout=...):

        if port is None:
            port = config.port
        if timeout is ...:
            timeout = config.timeout

        self.address = address
        self.port = int(port)
        self.timeout = timeout

        try:
            self.socket = socket.create_connection((address, self.port), config.connect_timeout)
        except OSError as e:
            raise TransportConnectionError('cannot connect to %s:%d: %s' % (address, self.port, e)) from e

        # The connect timeout must not carry over to the receiver's reads.
        self.socket.settimeout(None)
        self.socket.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)

        self.sender = Sender(self.socket)
        self.receiver = Receiver(self.socket, self.sender)
        self.heartbeat = heartbeat.Heartbeat(self.sender)

        self._process_lock = threading.Lock()
        self._memory_lock = threading.Lock()
        self._closed = False

        logger.info('connected to %s:%d', address, self.port)


    def __enter__(self):
        return self


    def __exit__(self, *exc):
        self.close()


    def __repr__(self):
        if self.alive:
            state = 'connected'
        else:
            state = 'closed'

        return '<%s %s:%d %s>' % (self.__class__.__name__, self.address, self.port, state)


    def start(self):
        """ Start the receiver and heartbeat threads.
        """

        self.receiver.start()
        self.heartbeat.start()


    @property
    def alive(self):
        """ True while the receiver is still reading from the server.
        """

        return self._closed == False and self.receiver.alive


    def close(self):
        """ Stop the heartbeat and shut the socket down. Any caller still
            waiting for a response receives :class:`TransportDisconnected`.
            Calling this more than once is harmless.
        """

        if self._closed:
            return

        self._closed = True
        self.heartbeat.stop(wait=True)
        self.receiver.closing = True

        try:
            self.socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Already disconnected by the peer.
            pass

        if self.receiver.thread.is_alive() and threading.current_thread() is not self.receiver.thread:
            self.receiver.thread.join()

        self.socket.close()
        logger.info('disconnected from %s:%d', self.address, self.port)


    def _check(self):
        if self._closed:
            raise TransportDisconnected('connection closed')
        if self.receiver.error is not None:
            reraise(self.receiver.error)


    def _timeout(self, timeout):
        if timeout is ...:
            return self.timeout
        return timeout


    def _process_list(self, timeout):

        self._check()
        mailbox = self.receiver.processes

        with self._process_lock:
            dropped = mailbox.drain()
            if dropped:
                logger.debug('discarded %d stale process list(s)', dropped)

            self.sender.send_list_process()
            return mailbox.get(self._timeout(timeout))


    def list_processes(self, timeout=...):
        """ Return a list of :class:`ntr.protocol.process.Process` records,
            one for each process running on the console.
        """

        return process.parse(self._process_list(timeout))


    def get_pid(self, title_id, timeout=...):
        """ Return the pid of the running process with the given *title_id*
            (an integer or a hex string), or None if no such process is
            running.
        """

        text = self._process_list(timeout)
        return process.find_pid(text, title_id)


    def mem_read(self, address, size, pid, timeout=...):
        """ Return *size* bytes of memory starting at *address* in process
            *pid*. The bytes are exactly what the server sent back.
        """

        size = int(size)
        if size <= 0:
            raise ValueError("can't read <= 0 bytes from target")

        self._check()
        mailbox = self.receiver.memory

        with self._memory_lock:
            dropped = mailbox.drain()
            if dropped:
                logger.debug('discarded %d stale memory read(s)', dropped)

            self.sender.send_mem_read(address, size, pid)
            return mailbox.get(self._timeout(timeout))


    def mem_write(self, address, data, pid):
        """ Write *data* to memory starting at *address* in process *pid*.
            The server sends no reply; the number of bytes of *data* written
            to the connection is returned.
        """

        self._check()
        data = bytes(data)
        self.sender.send_mem_write(address, pid, data)
        return len(data)


    def reload(self):
        """ Ask the debugger to reload itself on the console.
        """

        self._check()
        self.sender.send_reload()


# end of class Connection


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
