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

from . import StructuralError


def short_bytes_repr(data: bytes, max_len=None) -> str:
    """
    Like bytes.__repr__(), but will truncate large amounts of data.
    Mii data and JPEG payloads are far too long to be useful in a repr.
    """
    if max_len is None:
        max_len = 50

    OPENING_QUOTE = "b'"
    CLOSING_QUOTE = "'"
    ELLIPSIS = '...'

    string_pieces = [OPENING_QUOTE]
    length = len(OPENING_QUOTE)

    for i, b in enumerate(data):
        this_byte_as_a_string = repr(bytes([b]))[2:-1]

        # Always leave enough room for the closing quote, plus the
        # ellipsis if this isn't the final byte
        reserved = len(CLOSING_QUOTE)
        if i != len(data) - 1:
            reserved += len(ELLIPSIS)

        if length + len(this_byte_as_a_string) + reserved > max_len:
            return ''.join(string_pieces) + CLOSING_QUOTE + ELLIPSIS

        string_pieces.append(this_byte_as_a_string)
        length += len(this_byte_as_a_string)

    string_pieces.append(CLOSING_QUOTE)
    return ''.join(string_pieces)


def check_length(data: bytes, expected: int, what: str) -> None:
    """
    Raise a StructuralError if data isn't exactly the expected length
    """
    if len(data) != expected:
        raise StructuralError(
            f'{what} must be exactly {expected:#x} bytes long (got {len(data):#x})')
