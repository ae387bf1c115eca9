"""A simulated disk kept in a host file.

The disk has one surface of tracks, each split into sectors of the same
size.  Requests complete asynchronously: the data is transferred at once,
and an interrupt announces completion after the simulated latency (seek,
rotation and transfer).  A track buffer lets reads from the current track
finish sooner.
"""

import struct
import sys
from typing import BinaryIO, Callable, Optional, TextIO

from nachosim.debug import Debug, debug as _global_debug
from nachosim.interrupt import Interrupt, IntType
from nachosim.statistics import ROTATION_TIME, SEEK_TIME

SECTOR_SIZE = 128
"""Bytes per disk sector."""
SECTORS_PER_TRACK = 32
"""Sectors on each track."""
NUM_TRACKS = 32
"""Tracks on the disk."""
NUM_SECTORS = SECTORS_PER_TRACK * NUM_TRACKS
"""Total sectors on the disk."""

MAGIC_NUMBER = 0x456789AB
"""Stored at the start of the host file to mark it as disk storage."""
MAGIC_SIZE = 4
DISK_SIZE = MAGIC_SIZE + NUM_SECTORS * SECTOR_SIZE

_MAGIC = struct.Struct("<I")
_SECTOR_WORDS = struct.Struct(f"<{SECTOR_SIZE // 4}I")
_UINT_MASK = 0xFFFFFFFF


class DiskError(Exception):
    """Raised for a busy disk or a host file that is not a disk."""


class Disk:
    """A physical disk accepting one sector request at a time.

    `call_when_done` is invoked each time a request completes; completion
    is delivered through `interrupt`.  With `track_buffer` off, every
    request pays the full rotational latency.
    """

    def __init__(
        self,
        path: str,
        call_when_done: Callable[[], None],
        interrupt: Interrupt,
        *,
        track_buffer: bool = True,
        debug: Optional[Debug] = None,
        output: Optional[TextIO] = None,
    ) -> None:
        if not callable(call_when_done):
            raise TypeError("call_when_done must be callable")
        self.debug = _global_debug if debug is None else debug
        self.interrupt = interrupt
        self.output = output
        self.track_buffer = track_buffer
        self._handler = call_when_done
        self.last_sector = 0
        self._buffer_init = 0
        self.active = False

        self.debug.print("d", "Initializing the disk %s\n", path)
        self._file: BinaryIO = self._open(path)

    @staticmethod
    def _open(path: str) -> BinaryIO:
        try:
            file = open(path, "r+b")
        except FileNotFoundError:
            file = open(path, "w+b")
            file.write(_MAGIC.pack(MAGIC_NUMBER))
            file.seek(DISK_SIZE - 4)
            file.write(bytes(4))
            file.flush()
            return file
        raw = file.read(MAGIC_SIZE)
        if len(raw) != MAGIC_SIZE or _MAGIC.unpack(raw)[0] != MAGIC_NUMBER:
            file.close()
            raise DiskError(f"{path} is not a disk image")
        return file

    @property
    def _stats(self):
        return self.interrupt.stats

    def close(self) -> None:
        """Close the host file behind the disk."""
        self._file.close()

    @property
    def closed(self) -> bool:
        return self._file.closed

    def __enter__(self) -> "Disk":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _check_request(self, sector: int) -> None:
        if self.active:
            raise DiskError("only one disk request at a time")
        if not 0 <= sector < NUM_SECTORS:
            raise ValueError(f"sector {sector} outside disk of {NUM_SECTORS}")

    def _print_sector(self, writing: bool, sector: int, data: bytes) -> None:
        out = sys.stdout if self.output is None else self.output
        verb = "Writing" if writing else "Reading"
        out.write(f"{verb} sector: {sector}\n")
        out.write("".join(f"{word:X} " for word in _SECTOR_WORDS.unpack(data)))
        out.write("\n")

    def _start(self, sector: int, ticks: int) -> None:
        self.active = True
        self._update_last(sector)
        self.interrupt.schedule(self.handle_interrupt, ticks, IntType.DISK_INT)

    def read_request(self, sector: int) -> bytes:
        """Read one sector; completion is signalled later by an interrupt."""
        self._check_request(sector)
        ticks = self.compute_latency(sector, False)
        self.debug.print("d", "Reading from sector %u\n", sector)
        self._file.seek(SECTOR_SIZE * sector + MAGIC_SIZE)
        data = self._file.read(SECTOR_SIZE)
        if len(data) != SECTOR_SIZE:
            raise DiskError(f"short read from sector {sector}")
        if self.debug.is_enabled("d"):
            self._print_sector(False, sector, data)
        self._stats.num_disk_reads += 1
        self._start(sector, ticks)
        return data

    def write_request(self, sector: int, data: bytes) -> None:
        """Write one whole sector; completion is signalled by an interrupt."""
        data = bytes(data)
        if len(data) != SECTOR_SIZE:
            raise ValueError(
                f"a sector holds {SECTOR_SIZE} bytes, got {len(data)}"
            )
        self._check_request(sector)
        ticks = self.compute_latency(sector, True)
        self.debug.print("d", "Writing to sector %u\n", sector)
        self._file.seek(SECTOR_SIZE * sector + MAGIC_SIZE)
        self._file.write(data)
        self._file.flush()
        if self.debug.is_enabled("d"):
            self._print_sector(True, sector, data)
        self._stats.num_disk_writes += 1
        self._start(sector, ticks)

    def handle_interrupt(self) -> None:
        """Finish the current request and notify the owner."""
        self.active = False
        self._handler()

    def _time_to_seek(self, sector: int) -> tuple[int, int]:
        new_track = sector // SECTORS_PER_TRACK
        old_track = self.last_sector // SECTORS_PER_TRACK
        seek = abs(new_track - old_track) * SEEK_TIME
        over = (self._stats.total_ticks + seek) % ROTATION_TIME
        rotation = ROTATION_TIME - over if over > 0 else 0
        return seek, rotation

    @staticmethod
    def _modulo_diff(to: int, start: int) -> int:
        return (to % SECTORS_PER_TRACK - start % SECTORS_PER_TRACK) % SECTORS_PER_TRACK

    def compute_latency(self, sector: int, writing: bool) -> int:
        """Ticks a request for `sector` would take: seek, rotation, transfer."""
        seek, rotation = self._time_to_seek(sector)
        time_after = self._stats.total_ticks + seek + rotation

        if (
            self.track_buffer
            and not writing
            and seek == 0
            and ((time_after - self._buffer_init) & _UINT_MASK) // ROTATION_TIME
            > self._modulo_diff(sector, self._buffer_init // ROTATION_TIME)
        ):
            self.debug.print("d", "Request latency = %u\n", ROTATION_TIME)
            return ROTATION_TIME

        rotation += self._modulo_diff(sector, time_after // ROTATION_TIME) * ROTATION_TIME
        latency = seek + rotation + ROTATION_TIME
        self.debug.print("d", "Request latency = %u\n", latency)
        return latency

    def _update_last(self, sector: int) -> None:
        seek, rotation = self._time_to_seek(sector)
        if seek != 0:
            self._buffer_init = self._stats.total_ticks + seek + rotation
        self.last_sector = sector
        self.debug.print(
            "d", "Updating last sector = %u, %u\n", self.last_sector, self._buffer_init
        )