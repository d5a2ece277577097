""" Keep-alive for an idle NTR connection. The server closes a connection
    that goes quiet, but it also should not be flooded with heartbeats it
    has not yet answered; a heartbeat therefore goes out only when the
    previous one was acknowledged and the minimum interval has passed.
"""

import logging

from . import config
from . import poll
from .transport.base import TransportIOError

logger = logging.getLogger(__name__)


class Heartbeat:
    """ Periodically check whether *sender* should emit a heartbeat. The
        check runs every *period* seconds; a heartbeat is sent at most once
        every *interval* seconds, and only after the receiver has seen the
        reply to the previous one.
    """

    def __init__(self, sender, period=None, interval=None):

        if period is None:
            period = config.heartbeat_period
        if interval is None:
            interval = config.heartbeat_interval

        self.sender = sender
        self.period = period
        self.interval = interval
        self.sent = 0


    def start(self):
        poll.start(self.tick, self.period)


    def stop(self, wait=False):
        poll.stop(self.tick, wait)


    @property
    def running(self):
        return poll.period(self.tick) is not None


    def tick(self):
        """ Send a heartbeat if one is due. A failed send means the socket
            is unusable; stop polling and leave it to the receiver to report
            the disconnect to any waiting callers.
        """

        with self.sender.lock:
            if self.sender.heartbeat_due(self.interval) == False:
                return

            try:
                self.sender.send_heartbeat()
            except TransportIOError as e:
                logger.warning('heartbeat failed, stopping: %s', e)
                self.stop()
                return

        self.sent += 1


# end of class Heartbeat


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
