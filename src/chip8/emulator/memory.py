"""
Memory Subsystem for the CHIP-8 Interpreter
===========================================

A flat, fixed-size 4 KB byte array. Unlike banked systems there is no
address decoding: every address in 0x000-0xFFF maps directly to one byte.

Memory Map:
    $000-$04F  Unused
    $050-$09F  Font glyphs
    $0A0-$1FF  Unused
    $200-$FFF  Program space

All accesses are bounds-checked. Out-of-range reads and writes raise
OutOfBoundsError instead of wrapping, since a wrapped access almost
always means the running program has gone off the rails.
"""

from typing import Iterator

from ..errors import OutOfBoundsError
from .constants import MEMORY_SIZE


class Memory:
    """
    Fixed-size byte-addressable memory.

    Supports indexing and slicing like a bytearray so tests and tools can
    poke bytes directly. Slice writes are range-checked like load() and
    never change the memory size:

        >>> mem = Memory()
        >>> mem[0x200] = 0x60
        >>> mem[0x200:0x202]
        b'`\\x00'

    Attributes:
        size: Number of addressable bytes (fixed for the lifetime of the object)
    """

    def __init__(self, size: int = MEMORY_SIZE):
        """
        Initialize zeroed memory.

        Args:
            size: Memory size in bytes (default 4096)
        """
        self._data = bytearray(size)

    @property
    def size(self) -> int:
        """Memory size in bytes."""
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[int]:
        return iter(self._data)

    def __getitem__(self, key):
        if isinstance(key, slice):
            return bytes(self._data[key])
        self._check_range(key, 1)
        return self._data[key]

    def __setitem__(self, key, value) -> None:
        if isinstance(key, slice):
            start = 0 if key.start is None else key.start
            if key.step not in (None, 1):
                raise ValueError("memory slice assignment must be contiguous")
            if key.stop is not None and key.stop - start != len(value):
                raise ValueError("memory slice assignment cannot change memory size")
            self.load(start, bytes(value))
            return
        self.write(key, value)

    def _check_range(self, address: int, length: int) -> None:
        """Raise OutOfBoundsError unless [address, address+length) is addressable."""
        if address < 0 or address + length > len(self._data):
            raise OutOfBoundsError(
                f"access of {length} byte(s) at ${address:04X} is outside "
                f"memory ($0000-${len(self._data) - 1:04X})",
                address=address,
                length=length,
            )

    def read(self, address: int) -> int:
        """
        Read byte from memory.

        Args:
            address: Address in 0x000-0xFFF

        Returns:
            Byte value at address

        Raises:
            OutOfBoundsError: If address is outside memory
        """
        self._check_range(address, 1)
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """
        Write byte to memory.

        Args:
            address: Address in 0x000-0xFFF
            value: Byte value (masked to 8 bits)

        Raises:
            OutOfBoundsError: If address is outside memory
        """
        self._check_range(address, 1)
        self._data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read 16-bit word (big-endian)."""
        self._check_range(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def read_block(self, address: int, count: int) -> bytes:
        """Read count bytes starting at address."""
        self._check_range(address, count)
        return bytes(self._data[address:address + count])

    def load(self, address: int, data: bytes) -> None:
        """
        Copy a block of bytes into memory.

        The whole block is range-checked before anything is written, so a
        failed load never leaves a partial copy behind.

        Args:
            address: Destination address
            data: Bytes to copy

        Raises:
            OutOfBoundsError: If the block does not fit
        """
        self._check_range(address, len(data))
        self._data[address:address + len(data)] = data

    def clear(self) -> None:
        """Zero all of memory."""
        self._data[:] = bytes(len(self._data))

    def dump(self, row_size: int = 32) -> list[str]:
        """
        Format memory as hex rows.

        Each row starts with its offset in decimal and hex, followed by
        row_size bytes in hex.

        Returns:
            List of formatted lines
        """
        lines = []
        for start in range(0, len(self._data), row_size):
            row = " ".join(f"{b:02X}" for b in self._data[start:start + row_size])
            lines.append(f"{start:04d} {start:03X}: {row}")
        return lines

    def get_snapshot_data(self) -> list[int]:
        """Get memory contents for snapshot."""
        return list(self._data)

    def apply_snapshot_data(self, data: list[int], offset: int = 0) -> int:
        """
        Restore memory contents from snapshot.

        Returns:
            Number of bytes consumed from data
        """
        size = len(self._data)
        block = bytes(data[offset:offset + size])
        if len(block) != size:
            raise ValueError("Snapshot truncated in memory block")
        self._data[:] = block
        return size
