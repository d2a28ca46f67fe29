"""The CM-730 sub-controller that relays commands to the servos."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

from humanoid_op2.packet import (
    ERRBIT,
    ID_BROADCAST,
    PARAMETER,
    BulkReadData,
    CommError,
    CommResult,
    Instruction,
    Platform,
    high_byte,
    low_byte,
    make_color,
    make_word,
    tx_rx_packet,
)

log = logging.getLogger(__name__)

# Foot pressure sensors that take part in a bulk read when they answer.
ID_R_FSR = 111
ID_L_FSR = 112
P_FSR1_L = 26

# Written to the board on disconnection: turn the head LED green.
_DISCONNECT_PACKET = bytes([0xFF, 0xFF, 0xC8, 0x05, 0x03, 0x1A, 0xE0, 0x03, 0x32])


def _packet(device_id: int, instruction: int, params: Sequence[int] = ()) -> bytes:
    """A request with room for the header and checksum, which are filled in on sending."""
    body = [value & 0xFF for value in params]
    return bytes([0xFF, 0xFF, device_id & 0xFF, len(body) + 2, instruction, *body, 0])


class CM730:
    """Talks to the CM-730 board and the devices on its bus through a platform."""

    ID_CM = 200
    P_DXL_POWER = 24
    P_LED_HEAD_L = 26

    def __init__(self, platform: Platform) -> None:
        self.platform = platform
        self.bulk_read_data: Dict[int, BulkReadData] = {
            device_id: BulkReadData() for device_id in range(ID_BROADCAST)
        }
        self._bulk_request: Optional[bytes] = None

    def __enter__(self) -> CM730:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    def _request(
        self, device_id: int, instruction: int, params: Sequence[int], priority: int
    ) -> bytes:
        return tx_rx_packet(self.platform, _packet(device_id, instruction, params), None, priority)

    @staticmethod
    def _error_byte(status: bytes) -> int:
        return status[ERRBIT] if status else 0

    def ping(self, id: int) -> int:
        """Ping a device; returns the error byte of its answer (0 for a broadcast)."""
        return self._error_byte(self._request(id, Instruction.PING, (), 2))

    def read_byte(self, id: int, address: int) -> int:
        """The byte at an address in a device's control table."""
        status = self._request(id, Instruction.READ, (address, 1), 2)
        return status[PARAMETER]

    def read_word(self, id: int, address: int) -> int:
        """The little-endian word at an address in a device's control table."""
        status = self._request(id, Instruction.READ, (address, 2), 2)
        return make_word(status[PARAMETER], status[PARAMETER + 1])

    def read_table(self, id: int, start_address: int, end_address: int) -> bytes:
        """The bytes from start_address to end_address, both included."""
        length = end_address - start_address + 1
        if length <= 0:
            raise ValueError("end address lies before start address")
        status = self._request(id, Instruction.READ, (start_address, length), 1)
        return bytes(status[PARAMETER:PARAMETER + length])

    def write_byte(self, id: int, address: int, value: int) -> int:
        """Write one byte; returns the error byte of the answer (0 for a broadcast)."""
        return self._error_byte(self._request(id, Instruction.WRITE, (address, value), 2))

    def write_word(self, id: int, address: int, value: int) -> int:
        """Write a little-endian word; returns the error byte of the answer."""
        params = (address, low_byte(value), high_byte(value))
        return self._error_byte(self._request(id, Instruction.WRITE, params, 2))

    def write_table(
        self, id: int, start_address: int, end_address: int, table: Sequence[int]
    ) -> int:
        """Write table[start_address..end_address] to the same addresses of a device.

        The table is indexed by control-table address. Returns the error byte
        of the answer.
        """
        length = end_address - start_address + 1
        if length <= 0:
            raise ValueError("end address lies before start address")
        chunk = list(table[start_address:end_address + 1])
        if len(chunk) != length:
            raise ValueError("table does not cover the requested addresses")
        return self._error_byte(
            self._request(id, Instruction.WRITE, (start_address, *chunk), 2)
        )

    def sync_write(
        self, start_address: int, each_length: int, number: int, params: Sequence[int]
    ) -> None:
        """Write each_length bytes per device for number devices in one broadcast.

        Each device's block in params starts with its id.
        """
        count = number * each_length
        if len(params) < count:
            raise ValueError(f"sync write needs {count} parameters, got {len(params)}")
        self._request(
            ID_BROADCAST,
            Instruction.SYNC_WRITE,
            (start_address, each_length - 1, *params[:count]),
            0,
        )

    def _make_bulk_read_packet(self) -> None:
        entries = []
        for length, device_id, address in (
            (30, self.ID_CM, self.P_DXL_POWER),
            (10, ID_L_FSR, P_FSR1_L),
            (10, ID_R_FSR, P_FSR1_L),
        ):
            try:
                self.ping(device_id)
            except CommError:
                continue
            entries += (length, device_id, address)
        self._bulk_request = _packet(ID_BROADCAST, Instruction.BULK_READ, (0, *entries))

    def bulk_read(self) -> None:
        """Read the board and the foot sensors at once into bulk_read_data.

        The first call only probes the devices and prepares the request; it
        raises CommError with TX_FAIL, and later calls do the reading.
        """
        if self._bulk_request is None:
            self._make_bulk_read_packet()
            raise CommError(CommResult.TX_FAIL, "bulk read request prepared; nothing sent yet")
        tx_rx_packet(self.platform, self._bulk_request, self.bulk_read_data, 0)

    def connect(self) -> bool:
        """Open the port and power the servos; True on success."""
        if not self.platform.open_port():
            log.error(
                "Fail to open port: CM-730 is used by another program "
                "or do not have root privileges."
            )
            return False
        return self.dxl_power_on()

    def change_baud(self, baud: int) -> bool:
        """Change the line speed and power the servos again; True on success."""
        if not self.platform.set_baud(baud):
            log.error("Fail to change baudrate")
            return False
        return self.dxl_power_on()

    def dxl_power_on(self) -> bool:
        """Switch on servo power and light the head LED; True on success."""
        try:
            self.write_byte(self.ID_CM, self.P_DXL_POWER, 1)
        except CommError:
            log.debug("Fail to change Dynamixel power!")
            return False
        log.debug("Succeed to change Dynamixel power!")
        try:
            self.write_word(self.ID_CM, self.P_LED_HEAD_L, make_color(255, 128, 0))
        except CommError:
            log.debug("Fail to set the head LED colour")
        self.platform.sleep(300)
        return True

    def disconnect(self) -> None:
        """Turn the head LED green and close the port."""
        self.platform.write_port(_DISCONNECT_PACKET)
        self.platform.close_port()