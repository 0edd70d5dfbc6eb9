# Copyright 2024 The smmpy authors
#
# This file is part of smmpy.
#
# smmpy is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# smmpy is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with smmpy.  If not, see <https://www.gnu.org/licenses/>.
"""
CRC32 checksums, as embedded in course files and thumbnails.
"""

import struct
import zlib
from typing import Optional

from . import StructuralError


def crc32(data: bytes) -> int:
    """
    Standard (zlib) CRC32 of some data, as an unsigned 32-bit value
    """
    return zlib.crc32(data) & 0xFFFFFFFF


class ChecksumFraming:
    """
    Describes where a file format stores a big-endian CRC32, and which
    range of the file it covers.
    The storage location must not overlap the covered range.
    """
    storage_offset: int
    start: int
    end: Optional[int]

    def __init__(self, storage_offset: int, start: int, end: int = None):
        self.storage_offset = storage_offset
        self.start = start
        self.end = end

    def __repr__(self) -> str:
        return f'{type(self).__name__}(storage_offset={self.storage_offset:#x}, start={self.start:#x}, end={self.end!r})'

    def _check_size(self, data: bytes) -> None:
        if len(data) < max(self.storage_offset + 4, self.start):
            raise StructuralError(f'Data is too short to hold a checksum ({len(data):#x} bytes)')

    def calculate(self, data: bytes) -> int:
        """
        Compute the checksum over the covered range of data
        """
        self._check_size(data)
        return crc32(data[self.start : self.end])

    def read(self, data: bytes) -> int:
        """
        Return the checksum currently stored in data
        """
        self._check_size(data)
        return struct.unpack_from('>I', data, self.storage_offset)[0]

    def write(self, data: bytearray) -> int:
        """
        Compute the checksum and store it into data.
        This has to be the very last step of saving, since it depends on
        everything else in the covered range.
        Returns the checksum.
        """
        checksum = self.calculate(data)
        struct.pack_into('>I', data, self.storage_offset, checksum)
        return checksum

    def verify(self, data: bytes) -> bool:
        """
        Check if the stored checksum matches the data
        """
        return self.read(data) == self.calculate(data)


# Course data: CRC32 of everything from 0x10 onward, stored at 0x08
LEVEL = ChecksumFraming(0x08, 0x10)

# Thumbnails: CRC32 of everything after the checksum itself
THUMBNAIL = ChecksumFraming(0x00, 0x04)
