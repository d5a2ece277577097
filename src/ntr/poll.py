""" Periodic background calls. The heartbeat uses this to wake up on a
    fixed cadence, independent of whatever the caller is doing.
"""

import logging
import threading
import time
import weakref

logger = logging.getLogger(__name__)

active = dict()
_active_lock = threading.Lock()


def _key(method):
    """ Bound methods are created anew on every attribute access, so their
        id() is not stable; identify them by instance and function instead.
    """

    try:
        return (id(method.__self__), method.__func__)
    except AttributeError:
        return id(method)


def _reference(method):
    """ Return a weak reference to *method*, whether it is a plain function
        or a bound method.
    """

    try:
        method.__func__
        method.__self__
    except AttributeError:
        return weakref.ref(method)
    else:
        return weakref.WeakMethod(method)


def period(method):
    """ Return the currently set polling period for the provided *method*.
        Returns None if no polling is presently active for that method.
    """

    try:
        poller = active[_key(method)]
    except KeyError:
        return None

    if poller.reference() != method:
        return None

    return poller.interval



def start(method, period):
    """ Call the provided *method* every *period* seconds on a dedicated
        background thread. Only a weak reference to *method* is retained;
        polling ends on its own once the method's owner is garbage collected.

        If a poller is already active for the method its period is updated
        instead; one method cannot have two independent polling cadences.
        A *period* of None or zero is the same as calling :func:`stop`.
    """

    if period is None or period == 0:
        stop(method)
        return

    key = _key(method)

    with _active_lock:
        poller = active.get(key)

        # A poller whose owner was collected may still be registered under
        # a key that a new object at the same address now reuses.

        if poller is not None and poller.reference() != method:
            poller.stop()
            poller = None

        if poller is None:
            poller = _Poller(method, key)
            active[key] = poller

    poller.period(period)



def stop(method, wait=False):
    """ Discontinue calling the provided *method*. If *wait* is True, block
        until the background thread has exited, unless called from that
        thread.
    """

    with _active_lock:
        try:
            poller = active.pop(_key(method))
        except KeyError:
            return

    poller.stop()

    if wait and threading.current_thread() is not poller.thread:
        poller.thread.join()



class _Poller:
    """ Background thread to invoke any polling requests.
    """

    def __init__(self, method, key):

        self.key = key
        self.interval = None
        self.reference = _reference(method)
        self.shutdown = False

        self.alarm = threading.Event()
        self.thread = threading.Thread(target=self.run, name='ntr-poll')
        self.thread.daemon = True
        self.thread.start()


    def period(self, period):
        """ Update the polling interval to *period* seconds.
        """

        period = float(period)
        self.interval = period
        self.wake()


    def run(self):

        interval = None
        next = time.monotonic()

        # Initial wait for someone to call self.period().

        while self.interval is None and self.shutdown == False:
            self.alarm.wait(1)

        while True:
            begin = time.monotonic()

            if self.shutdown == True:
                break

            if self.alarm.is_set() == True:
                self.alarm.clear()

                # The interval only changes when the alarm is set, including
                # upon startup; begin an entirely new cadence from here.

                interval = self.interval
                next = begin + interval

            else:
                # Keep a constant cadence regardless of how long the call
                # took: the next wakeup is based on the previous target.

                next += interval

            method = self.reference()

            if method is None:
                # The owning object is gone. No further calls are possible.
                break

            try:
                method()
            except Exception:
                logger.exception('polled call %r failed', method)

            del method

            delay = next - time.monotonic()
            if delay > 0:
                self.alarm.wait(delay)


        # Infinite loop exited.
        with _active_lock:
            if active.get(self.key) is self:
                del active[self.key]


    def stop(self):
        self.shutdown = True
        self.wake()


    def wake(self):
        self.alarm.set()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
