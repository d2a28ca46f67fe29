"""Dynamixel protocol 1.0 packets exchanged with the CM-730 sub-controller.

A packet on the wire is ``FF FF id length instruction params... checksum``,
where ``length`` counts the instruction (or error) byte, the parameters and
the checksum. Status packets carry an error byte where requests carry an
instruction.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import MutableMapping, Optional, Protocol

log = logging.getLogger(__name__)

ID = 2
LENGTH = 3
INSTRUCTION = 4
ERRBIT = 4
PARAMETER = 5

ID_BROADCAST = 254
MAX_TX_PARAMS = 256
TABLE_SIZE = 256


class Instruction(enum.IntEnum):
    """Instruction codes of the protocol."""

    PING = 1
    READ = 2
    WRITE = 3
    REG_WRITE = 4
    ACTION = 5
    RESET = 6
    SYNC_WRITE = 131
    BULK_READ = 146


class CommResult(enum.IntEnum):
    """Outcome of one packet exchange."""

    SUCCESS = 0
    TX_CORRUPT = 1
    TX_FAIL = 2
    RX_FAIL = 3
    RX_TIMEOUT = 4
    RX_CORRUPT = 5


class CommError(Exception):
    """Raised when a packet exchange does not succeed."""

    def __init__(self, result: CommResult, message: Optional[str] = None) -> None:
        self.result = CommResult(result)
        super().__init__(message or f"communication failed: {self.result.name}")


@dataclass(frozen=True)
class ServoSpec:
    """Resolution constants of an MX-28 servo."""

    center_value: int
    max_value: int
    min_angle: float
    max_angle: float
    ratio_value2angle: float
    ratio_angle2value: float
    param_bytes: int
    min_value: int = 0


MX28_1024 = ServoSpec(
    center_value=512,
    max_value=1023,
    min_angle=-150.0,
    max_angle=150.0,
    ratio_value2angle=0.293,
    ratio_angle2value=3.413,
    param_bytes=5,
)

MX28_4096 = ServoSpec(
    center_value=2048,
    max_value=4095,
    min_angle=-180.0,
    max_angle=180.0,
    ratio_value2angle=0.088,
    ratio_angle2value=11.378,
    param_bytes=7,
)


class Platform(Protocol):
    """The serial link and locking a controller board talks through."""

    def open_port(self) -> bool: ...

    def set_baud(self, baud: int) -> bool: ...

    def close_port(self) -> None: ...

    def clear_port(self) -> None: ...

    def write_port(self, data: bytes) -> int: ...

    def read_port(self, count: int) -> bytes: ...

    def low_priority_wait(self) -> None: ...

    def mid_priority_wait(self) -> None: ...

    def high_priority_wait(self) -> None: ...

    def low_priority_release(self) -> None: ...

    def mid_priority_release(self) -> None: ...

    def high_priority_release(self) -> None: ...

    def set_packet_timeout(self, length: int) -> None: ...

    def is_packet_timeout(self) -> bool: ...

    def packet_time(self) -> float: ...

    def sleep(self, msec: float) -> None: ...


@dataclass
class BulkReadData:
    """The control table of one device as filled in by a bulk read."""

    start_address: int = 0
    length: int = 0
    error: int = -1
    table: bytearray = field(default_factory=lambda: bytearray(TABLE_SIZE))

    def _in_range(self, address: int) -> bool:
        return self.start_address <= address < self.start_address + self.length

    def read_byte(self, address: int) -> int:
        """The byte at an address, or 0 when the address was not read."""
        if self._in_range(address) and 0 <= address < len(self.table):
            return self.table[address]
        return 0

    def read_word(self, address: int) -> int:
        """The little-endian word at an address, or 0 when it was not read."""
        if not (self._in_range(address) and 0 <= address < len(self.table)):
            return 0
        high = self.table[address + 1] if address + 1 < len(self.table) else 0
        return make_word(self.table[address], high)


def calculate_checksum(packet) -> int:
    """The checksum of a packet: the inverted low byte of the sum from id on."""
    if len(packet) <= LENGTH:
        raise ValueError("packet has no length field")
    end = packet[LENGTH] + 3
    if len(packet) < end:
        raise ValueError("packet is shorter than its length field")
    return ~sum(packet[ID:end]) & 0xFF


def make_word(low: int, high: int) -> int:
    """Combine two bytes into an unsigned 16-bit word."""
    return ((high << 8) + low) & 0xFFFF


def low_byte(word: int) -> int:
    return word & 0xFF


def high_byte(word: int) -> int:
    return (word & 0xFF00) >> 8


def make_color(red: int, green: int, blue: int) -> int:
    """Pack 8-bit colour channels into the 15-bit LED colour format."""
    r = red & 0xFF
    g = green & 0xFF
    b = blue & 0xFF
    return ((b >> 3) << 10) | ((g >> 3) << 5) | (r >> 3)


def _instruction_name(code: int) -> str:
    try:
        return Instruction(code).name
    except ValueError:
        return "UNKNOWN"


def _find_header(rx: bytearray) -> int:
    """Position of the first packet header, or how many bytes to drop."""
    n = len(rx)
    for i in range(n - 1):
        if rx[i] == 0xFF and rx[i + 1] == 0xFF:
            return i
        if i == n - 2 and rx[n - 1] == 0xFF:
            return i
    return max(n - 1, 0)


def _receive_status(platform: Platform, packet: bytearray) -> bytes:
    if packet[INSTRUCTION] == Instruction.READ:
        to_length = packet[PARAMETER + 1] + 6
    else:
        to_length = 6
    platform.set_packet_timeout(len(packet))

    rx = bytearray()
    while True:
        rx += platform.read_port(to_length - len(rx))
        if len(rx) == to_length:
            start = _find_header(rx)
            if start == 0:
                if len(rx) >= rx[LENGTH] + 3 and rx[-1] == calculate_checksum(rx):
                    log.debug("RX: %s", rx.hex(" ").upper())
                    return bytes(rx)
                raise CommError(CommResult.RX_CORRUPT)
            del rx[:start]
        elif platform.is_packet_timeout():
            raise CommError(CommResult.RX_CORRUPT if rx else CommResult.RX_TIMEOUT)


def _checksum_at_length_matches(rx: bytearray) -> bool:
    if len(rx) <= LENGTH:
        return False
    position = LENGTH + rx[LENGTH]
    if len(rx) <= position:
        return False
    return rx[position] == calculate_checksum(rx)


def _receive_bulk(
    platform: Platform, packet: bytearray, bulk_data: MutableMapping[int, BulkReadData]
) -> None:
    count = (packet[LENGTH] - 3) // 3
    entries = [
        (packet[PARAMETER + 3 * x + 2], packet[PARAMETER + 3 * x + 1], packet[PARAMETER + 3 * x + 3])
        for x in range(count)
    ]
    to_length = 0
    for device_id, length, address in entries:
        to_length += length + 6
        data = bulk_data.setdefault(device_id, BulkReadData())
        data.length = length
        data.start_address = address

    platform.set_packet_timeout(int(to_length * 1.5))

    result = CommResult.SUCCESS
    rx = bytearray()
    while True:
        rx += platform.read_port(to_length - len(rx))
        if len(rx) == to_length:
            break
        if platform.is_packet_timeout():
            result = CommResult.RX_CORRUPT if rx else CommResult.RX_TIMEOUT
            break
    log.debug("RX: %s", rx.hex(" ").upper())

    for device_id, _, _ in entries:
        bulk_data[device_id].error = -1

    remaining = count
    while True:
        start = _find_header(rx)
        if start != 0:
            del rx[:start]
            continue
        if _checksum_at_length_matches(rx):
            data = bulk_data.setdefault(rx[ID], BulkReadData())
            payload = rx[PARAMETER:PARAMETER + max(rx[LENGTH] - 2, 0)]
            begin = data.start_address
            end = min(begin + len(payload), len(data.table))
            if end > begin:
                data.table[begin:end] = payload[:end - begin]
            data.error = rx[ERRBIT]
            del rx[:LENGTH + 1 + rx[LENGTH]]
            remaining -= 1
        else:
            result = CommResult.RX_CORRUPT
            del rx[:2]
        if remaining == 0:
            break
        if len(rx) <= 6:
            result = CommResult.RX_CORRUPT
            break

    if result != CommResult.SUCCESS:
        raise CommError(result)


def _exchange(
    platform: Platform, txpacket, bulk_data: Optional[MutableMapping[int, BulkReadData]]
) -> bytes:
    tx = bytes(txpacket)
    if len(tx) <= LENGTH:
        raise ValueError("packet has no length field")
    length = tx[LENGTH] + 4
    packet = bytearray(length)
    body = tx[ID:length - 1]
    packet[ID:ID + len(body)] = body
    packet[0] = packet[1] = 0xFF
    packet[-1] = calculate_checksum(packet)
    log.debug("TX: %s INST: %s", packet.hex(" ").upper(), _instruction_name(packet[INSTRUCTION]))

    if length >= MAX_TX_PARAMS + 6:
        raise CommError(CommResult.TX_CORRUPT)

    platform.clear_port()
    if platform.write_port(bytes(packet)) != length:
        raise CommError(CommResult.TX_FAIL)

    if packet[ID] != ID_BROADCAST:
        return _receive_status(platform, packet)
    if packet[INSTRUCTION] == Instruction.BULK_READ:
        _receive_bulk(platform, packet, {} if bulk_data is None else bulk_data)
    return b""


def tx_rx_packet(
    platform: Platform,
    txpacket,
    bulk_data: Optional[MutableMapping[int, BulkReadData]] = None,
    priority: int = 0,
) -> bytes:
    """Send a request and collect its answer.

    The header and checksum of ``txpacket`` are filled in before sending.
    Returns the status packet of a device, or ``b""`` for broadcasts. A
    bulk read stores what each device reports in ``bulk_data``, keyed by
    device id. Raises CommError when the exchange fails.
    """
    if priority > 1:
        platform.low_priority_wait()
    if priority > 0:
        platform.mid_priority_wait()
    platform.high_priority_wait()
    try:
        return _exchange(platform, txpacket, bulk_data)
    finally:
        platform.high_priority_release()
        if priority > 0:
            platform.mid_priority_release()
        if priority > 1:
            platform.low_priority_release()