import socket
import threading
import pytest

import ntr
from ntr.protocol import commands
from ntr.protocol import packet as codec
from ntr.transport.sender import Sender

from fakeserver import read_exactly


def read_packet(sock):
    header = read_exactly(sock, commands.HEADER_SIZE)
    packet = codec.decode(header)
    if packet.data_length > 0:
        packet.data = read_exactly(sock, packet.data_length)
    return packet


def test_sequence(socket_pair):

    ours, theirs = socket_pair
    sender = Sender(ours)

    sender.send_heartbeat()
    sender.send_list_process()
    sender.send_mem_read(0x1000, 4, 7)
    sender.send_reload()
    sender.send_mem_write(0x2000, 7, b'\x01\x02')

    sequences = [read_packet(theirs).sequence for count in range(5)]
    assert sequences == [1000, 2000, 3000, 4000, 5000]
    assert sender.sequence == 6000


def test_commands(socket_pair):

    ours, theirs = socket_pair
    sender = Sender(ours)

    assert sender.send_heartbeat() == commands.HEADER_SIZE
    sender.send_list_process()
    sender.send_reload()

    heartbeat = read_packet(theirs)
    assert heartbeat.command == commands.HEARTBEAT
    assert heartbeat.args == (0,) * 16
    assert heartbeat.data_length == 0

    hello = read_packet(theirs)
    assert hello.command == commands.HELLO
    assert hello.packet_type == commands.REQUEST

    reload = read_packet(theirs)
    assert reload.command == commands.RELOAD


def test_mem_read(socket_pair):

    ours, theirs = socket_pair
    sender = Sender(ours)

    sender.send_mem_read(0x1000, 4, 7)
    packet = read_packet(theirs)

    assert packet.command == commands.MEMORY_READ
    assert packet.packet_type == commands.REQUEST
    assert packet.args == (7, 0x1000, 4) + (0,) * 13
    assert packet.data_length == 0


def test_mem_write(socket_pair):

    ours, theirs = socket_pair
    sender = Sender(ours)

    written = sender.send_mem_write(0x2000, 7, bytes((0xDE, 0xAD, 0xBE, 0xEF)))
    assert written == commands.HEADER_SIZE + 4

    raw = read_exactly(theirs, commands.HEADER_SIZE + 4)
    packet = codec.decode(raw[:commands.HEADER_SIZE])

    assert packet.command == commands.MEMORY_WRITE
    assert packet.packet_type == commands.REQUEST_WITH_DATA
    assert packet.args[:4] == (7, 0x2000, 4, 0)
    assert packet.data_length == 4
    assert raw[commands.HEADER_SIZE:] == b'\xde\xad\xbe\xef'


def test_heartbeat_flag(socket_pair):

    ours, theirs = socket_pair
    sender = Sender(ours)

    assert sender.heartbeat_sendable == True
    assert sender.last_heartbeat is None
    assert sender.heartbeat_due(1.0) == True

    sender.send_heartbeat()
    assert sender.heartbeat_sendable == False
    assert sender.last_heartbeat is not None
    assert sender.heartbeat_due(0) == False

    sender.acknowledge_heartbeat()
    assert sender.heartbeat_sendable == True
    assert sender.heartbeat_due(0) == True
    assert sender.heartbeat_due(60) == False


def test_acknowledge_while_sending(socket_pair):
    """ The receiver acknowledges a heartbeat without waiting for the socket
        lock, which a blocked write may be holding.
    """

    ours, theirs = socket_pair
    sender = Sender(ours)
    sender.send_heartbeat()

    acknowledged = threading.Event()

    def acknowledge():
        sender.acknowledge_heartbeat()
        acknowledged.set()

    with sender.lock:
        thread = threading.Thread(target=acknowledge)
        thread.start()
        assert acknowledged.wait(1) == True

    thread.join(1)
    assert sender.heartbeat_sendable == True


def test_send_failure(socket_pair):

    ours, theirs = socket_pair
    sender = Sender(ours)
    ours.close()

    with pytest.raises(ntr.TransportIOError):
        sender.send_heartbeat()

    with pytest.raises(ntr.TransportIOError):
        sender.send_mem_write(0x2000, 7, b'\x00')


def test_threaded_sequence(socket_pair):
    """ Packets sent from many threads at once must arrive whole, with
        sequence numbers strictly increasing by the stride in the order the
        packets appear on the wire.
    """

    ours, theirs = socket_pair
    sender = Sender(ours)

    threads = 4
    per_thread = 50
    total = threads * per_thread
    received = list()

    def reader():
        for count in range(total):
            received.append(read_packet(theirs))

    def writer(index):
        for count in range(per_thread):
            if count % 2:
                sender.send_mem_write(0x1000 * index, index, b'x' * 32)
            else:
                sender.send_mem_read(0x1000 * index, 4, index)

    reading = threading.Thread(target=reader)
    reading.start()

    writing = [threading.Thread(target=writer, args=(index,)) for index in range(threads)]
    for thread in writing:
        thread.start()
    for thread in writing:
        thread.join()

    reading.join(10)
    assert len(received) == total

    previous = None
    for packet in received:
        if previous is not None:
            assert packet.sequence == previous + commands.SEQUENCE_STRIDE
        previous = packet.sequence

        if packet.command == commands.MEMORY_WRITE:
            assert packet.data == b'x' * 32


def test_sequence_wraps(socket_pair):

    ours, theirs = socket_pair
    sender = Sender(ours)
    sender.sequence = 0xFFFFFFFF - 500

    sender.send_heartbeat()
    assert sender.sequence == (0xFFFFFFFF - 500 + 1000) & 0xFFFFFFFF
    assert read_packet(theirs).sequence == 0xFFFFFFFF - 500


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
