""" Interface with Monster Hunter Generations (USA): set the first large
    monster's health to a fixed value, then report its health once per
    second until it reaches zero.

    Title ids can be found at http://3dsdb.com/; the pointer and offset
    below are specific to this game (credit: ymyn).
"""

import argparse
import logging
import time

import ntr


MH_TID = 0x0004000000187000

MONSTER_1_PTR = 0x83343A4
HEALTH_OFFSET = 0x1318


def parse_arguments():

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('address', help='IP address of the console')
    parser.add_argument('--port', type=int, default=None,
                        help='debugger port (default: %d)' % (ntr.config.port))
    parser.add_argument('--health', type=int, default=1000,
                        help='health to set the monster to')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='log protocol traffic')

    return parser.parse_args()


def main():

    arguments = parse_arguments()

    if arguments.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(level=level, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    with ntr.connect(arguments.address, arguments.port) as connection:

        pid = connection.get_pid(MH_TID)
        if pid is None:
            raise SystemExit('title %016x is not running' % (MH_TID))

        # Follow the pointer to the monster structure.
        health_address = connection.read_u32(MONSTER_1_PTR, pid) + HEALTH_OFFSET
        initial = connection.read_u32(health_address, pid)
        print('Health address: %x' % (health_address))
        print('Initial health: %d' % (initial))

        connection.write_u32(health_address, arguments.health, pid)

        while True:
            health = connection.read_u32(health_address, pid)
            if health > 0:
                print("First monster's health: %d" % (health))
                time.sleep(1)
            else:
                print('First monster is slain!')
                break


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
