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
Support for thumbnail files (thumbnail0.tnl, thumbnail1.tnl).

A thumbnail file is a CRC32 (of everything after it), followed by the
length of a JPEG image, the image itself, and zero padding up to a fixed
total size.
"""

import dataclasses
import logging
import struct

from . import SizeLimitError, StructuralError
from . import checksum
from . import _common


logger = logging.getLogger(__name__)


THUMBNAIL_SIZE = 0xC800
THUMBNAIL_HEADER_SIZE = 8
THUMBNAIL_MAX_JPEG_SIZE = THUMBNAIL_SIZE - THUMBNAIL_HEADER_SIZE


@dataclasses.dataclass
class Thumbnail:
    """
    A thumbnail image. The JPEG data is treated as opaque bytes.
    """
    jpeg_data: bytes = b''

    def __repr__(self) -> str:
        return f'{type(self).__name__}({_common.short_bytes_repr(self.jpeg_data)})'

    @classmethod
    def load(cls, data: bytes, *, verify_checksum=False) -> 'Thumbnail':
        """
        Load a thumbnail from thumbnail file data.
        If verify_checksum is True, a warning is logged if the stored
        checksum doesn't match the data. The thumbnail is loaded either
        way.
        """
        if len(data) < THUMBNAIL_HEADER_SIZE:
            raise StructuralError(f'Thumbnail data is too short ({len(data)} bytes)')

        if verify_checksum and not checksum.THUMBNAIL.verify(data):
            logger.warning('Thumbnail checksum mismatch (stored %08X, calculated %08X)',
                checksum.THUMBNAIL.read(data), checksum.THUMBNAIL.calculate(data))

        jpeg_length, = struct.unpack_from('>I', data, 4)
        jpeg_end = THUMBNAIL_HEADER_SIZE + jpeg_length
        if jpeg_end > len(data):
            raise StructuralError(
                f'Thumbnail JPEG length ({jpeg_length:#x}) extends past the end of the data ({len(data):#x})')

        logger.debug('Loaded thumbnail (%d bytes of JPEG data)', jpeg_length)
        return cls(bytes(data[THUMBNAIL_HEADER_SIZE : jpeg_end]))

    def save(self) -> bytes:
        """
        Save the thumbnail to thumbnail file data
        """
        if len(self.jpeg_data) > THUMBNAIL_MAX_JPEG_SIZE:
            raise SizeLimitError(
                f'Thumbnail JPEG data is too large ({len(self.jpeg_data):#x} bytes; the limit is {THUMBNAIL_MAX_JPEG_SIZE:#x})')

        data = bytearray(THUMBNAIL_SIZE)
        struct.pack_into('>I', data, 4, len(self.jpeg_data))
        data[THUMBNAIL_HEADER_SIZE : THUMBNAIL_HEADER_SIZE + len(self.jpeg_data)] = self.jpeg_data

        # Must come last
        checksum.THUMBNAIL.write(data)

        logger.debug('Saved thumbnail (%d bytes of JPEG data)', len(self.jpeg_data))
        return bytes(data)
