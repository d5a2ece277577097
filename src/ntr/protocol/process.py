""" Parsing for the text dump the server returns for a process-list
    request. Each running process is reported on its own line::

        pid: 0x00000029, pname:     menu, tid: 0004003000008f02, kpobj: fff7f1c0

    and the dump ends with a line containing :data:`END_OF_PROCESS_LIST`.
"""

import collections
import re

from .commands import END_OF_PROCESS_LIST


Process = collections.namedtuple('Process', ('pid', 'name', 'tid', 'kpobj'))

_record = re.compile(r'pid: 0x(?P<pid>[0-9a-fA-F]{8}),'
                     r'\s*pname:\s*(?P<name>[^,]*?)\s*,'
                     r'\s*tid: (?P<tid>[0-9a-fA-F]{16})\b'
                     r'(?:,\s*kpobj: (?P<kpobj>[0-9a-fA-F]{8}))?')


def format_title_id(title_id):
    """ Return *title_id* as the sixteen lowercase hex digits used in the
        process list. Integers and hex strings, with or without a leading
        '0x', are both accepted.
    """

    if isinstance(title_id, str):
        text = title_id.strip().lower()
        if text.startswith('0x'):
            text = text[2:]
        title_id = int(text, 16)

    title_id = int(title_id)
    if title_id < 0 or title_id > 0xFFFFFFFFFFFFFFFF:
        raise ValueError('title id is not a 64-bit value: %r' % (title_id))

    return '%016x' % (title_id)


def complete(text):
    """ Return True if *text* contains the end-of-list marker.
    """

    return END_OF_PROCESS_LIST in text


def parse(text):
    """ Return a list of :class:`Process` records, one for each matching
        line in *text*. Lines that do not describe a process are ignored.
    """

    processes = list()

    for line in text.splitlines():
        match = _record.search(line)
        if match is None:
            continue

        kpobj = match.group('kpobj')
        if kpobj is not None:
            kpobj = int(kpobj, 16)

        process = Process(int(match.group('pid'), 16),
                          match.group('name'),
                          match.group('tid').lower(),
                          kpobj)
        processes.append(process)

    return processes


def find_pid(text, title_id):
    """ Return the pid of the first process in *text* whose title id matches
        *title_id*, or None if there is no such process.
    """

    wanted = format_title_id(title_id)

    for process in parse(text):
        if process.tid == wanted:
            return process.pid

    return None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
