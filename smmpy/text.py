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
Support for the fixed-length UCS-2 strings used in course files.

UCS-2 is like UTF-16, except that it has no surrogate pairs: every
character is exactly one 16-bit code unit, so only the Basic
Multilingual Plane can be represented.
"""

import struct

from . import EncodingError, StructuralError


SURROGATES = range(0xD800, 0xE000)


def encode_ucs2(text: str, num_units: int) -> bytes:
    """
    Encode text as big-endian UCS-2, null-terminated and zero-padded to
    exactly num_units code units (num_units * 2 bytes).
    At most num_units - 1 characters fit, because of the terminator.
    """
    if len(text) > num_units - 1:
        raise EncodingError(
            f'{text!r} is too long ({len(text)} characters; the limit is {num_units - 1})')

    units = []
    for char in text:
        code = ord(char)
        if code == 0:
            raise EncodingError(f'{text!r} contains a null character')
        elif code > 0xFFFF or code in SURROGATES:
            raise EncodingError(f'{char!r} (U+{code:04X}) in {text!r} can\'t be represented in UCS-2')
        units.append(code)

    # Terminator and padding
    units.extend([0] * (num_units - len(units)))

    return struct.pack(f'>{num_units}H', *units)


def decode_ucs2(data: bytes) -> str:
    """
    Decode big-endian UCS-2 text, stopping at the first null code unit
    (or at the end of the data, if there isn't one)
    """
    if len(data) % 2:
        raise StructuralError(f'UCS-2 data has an odd length ({len(data)})')

    chars = []
    for code, in struct.iter_unpack('>H', data):
        if code == 0:
            break
        elif code in SURROGATES:
            raise StructuralError(f'Invalid UCS-2 code unit: {code:#06x}')
        chars.append(chr(code))

    return ''.join(chars)
