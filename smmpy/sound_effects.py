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
Support for sound effects ("effect_t") attached to a level.
"""

import dataclasses

from .base_struct import BE_U32, StructLayout, BaseRecord


SOUND_EFFECT_SIZE = 0x8


# The first four bytes are probably type, variation, x and y (one byte
# each), but nothing's been confirmed yet. The meaning of the last four
# is unknown too, so both halves are kept as raw words.
SOUND_EFFECT_LAYOUT = StructLayout(SOUND_EFFECT_SIZE, {
    'unknown':   BE_U32(0x00),
    'unknown_2': BE_U32(0x04),
})


@dataclasses.dataclass
class SoundEffect(BaseRecord):
    """
    A sound effect slot
    """
    layout = SOUND_EFFECT_LAYOUT

    unknown: int = 0
    unknown_2: int = 0
