"""Sample /proc/net contents and helpers shared by the tests."""

import threading


SOCKSTAT = """sockets: used 128
TCP: inuse 10 orphan 2 tw 1 alloc 15 mem 100
UDP: inuse 5 mem 3
UDPLITE: inuse 0
RAW: inuse 1
FRAG: inuse 0 memory 0
"""

SOCKSTAT6 = """TCP6: inuse 4
UDP6: inuse 2
UDPLITE6: inuse 0
RAW6: inuse 0
FRAG6: inuse 0 memory 0
UNIX: inuse 42 dynamic 7 inode 40
"""

NETLINK = """sk               Eth Pid        Groups   Rmem     Wmem     Dump  Locks    Drops    Inode
0000000000000000 0   1          00000551 0        0        0     2        0        16543
0000000000000000 0   812        00000000 0        0        0     2        0        20125
0000000000000000 4   0          00000000 0        0        0     2        0        10
"""

PACKET = """sk               RefCnt Type Proto  Iface R Rmem   User   Inode
0000000000000000 3      3    0003   2     1 0      0      31337
"""

SNMP = """Ip: Forwarding DefaultTTL InReceives
Ip: 1 64 1000
Icmp: InMsgs InErrors InCsumErrors
Icmp: 45 0 0
IcmpMsg: InType3 OutType3
IcmpMsg: 40 40
Icmp6: InMsgs OutMsgs
Icmp6: 12 9
Tcp: RtoAlgorithm RtoMin
Tcp: 1 200
"""

NETSTAT = """TcpExt: SyncookiesSent SyncookiesRecv TW
TcpExt: 0 3 77
IpExt: InNoRoutes InTruncatedPkts
IpExt: 0 0
"""


class TripAfter(threading.Event):
    """Cancel event that reports set after a number of is_set() checks."""

    def __init__(self, checks: int):
        super().__init__()
        self.checks = checks

    def is_set(self) -> bool:
        self.checks -= 1
        return self.checks < 0
