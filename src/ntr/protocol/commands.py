"""Protocol constants.

Keep these in one place to avoid bare numbers in packet handling.
"""

# Every header starts with this value; anything else means the stream
# is no longer aligned on a packet boundary.
MAGIC = 0x12345678

HEADER_SIZE = 84
ARG_COUNT = 16

# Packet types
REQUEST = 0
REQUEST_WITH_DATA = 1

# Command codes used by this client. The server replies to HEARTBEAT with
# its pending debug output, which is also how the process list is returned.
HEARTBEAT = 0
HELLO = 3
RELOAD = 4
MEMORY_READ = 9
MEMORY_WRITE = 10

LIST_PROCESS = HELLO

names = {
    HEARTBEAT: 'HEARTBEAT',
    HELLO: 'HELLO',
    RELOAD: 'RELOAD',
    MEMORY_READ: 'MEMORY_READ',
    MEMORY_WRITE: 'MEMORY_WRITE',
}

# The last line of a process-list dump.
END_OF_PROCESS_LIST = 'end of process list.'

# Sequence numbers start here and advance by the same amount per packet.
SEQUENCE_START = 1000
SEQUENCE_STRIDE = 1000

U32_MAX = 0xFFFFFFFF


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
