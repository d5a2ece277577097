import socket
import pytest

import ntr
import fakeserver


@pytest.fixture
def server():

    server = fakeserver.Server()

    yield server

    server.stop()


@pytest.fixture
def connection(server):

    connection = ntr.connect('127.0.0.1', server.port, timeout=5)
    server.connected.wait(5)

    yield connection

    connection.close()


@pytest.fixture
def fast_heartbeat(monkeypatch):
    """ Shrink the heartbeat cadence so timing tests finish quickly. Only
        connections created after this fixture runs are affected.
    """

    monkeypatch.setattr(ntr.config, 'heartbeat_period', 0.02)
    monkeypatch.setattr(ntr.config, 'heartbeat_interval', 0.2)


@pytest.fixture
def socket_pair():
    """ A connected pair of sockets: the first for the code under test,
        the second standing in for the server.
    """

    ours, theirs = socket.socketpair()

    yield ours, theirs

    ours.close()
    theirs.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
