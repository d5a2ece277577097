""" Default settings for NTR connections. Each value can be overridden in
    the environment; the environment is consulted once, at import time.
    Arguments passed to :func:`ntr.connect` take precedence over both.

    ======================== ======= =========================================
    Variable                 Default Meaning
    ======================== ======= =========================================
    NTR_PORT                 8000    TCP port the debugger listens on
    NTR_TIMEOUT              60      seconds to wait for a response; 'none'
                                     waits indefinitely
    NTR_CONNECT_TIMEOUT      10      seconds to wait for the TCP connection
    NTR_HEARTBEAT_PERIOD     0.5     seconds between heartbeat checks
    NTR_HEARTBEAT_INTERVAL   1.0     minimum seconds between heartbeats
    ======================== ======= =========================================
"""

import os


def _number(name, default, convert=float, optional=False):

    try:
        value = os.environ[name]
    except KeyError:
        return default

    value = value.strip()

    if optional and (value == '' or value.lower() == 'none'):
        return None

    try:
        value = convert(value)
    except ValueError:
        raise ValueError('invalid value for %s: %r' % (name, value))

    if value < 0:
        raise ValueError('%s must not be negative: %r' % (name, value))

    return value


port = _number('NTR_PORT', 8000, int)
timeout = _number('NTR_TIMEOUT', 60.0, optional=True)
connect_timeout = _number('NTR_CONNECT_TIMEOUT', 10.0, optional=True)
heartbeat_period = _number('NTR_HEARTBEAT_PERIOD', 0.5)
heartbeat_interval = _number('NTR_HEARTBEAT_INTERVAL', 1.0)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
