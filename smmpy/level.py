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
Support for course data files (course_data.cdt, course_data_sub.cdt).

Layout of the file (all values big-endian):

    00      u64             Version (always 0xB so far)
    08      u32             CRC32 of everything from 0x10 onward
    0C      (4 bytes)
    10      u16 u8 u8 u8 u8 Creation year, month, day, hour, minute
    16      (0x12 bytes)
    28      u16[0x21]       Course name (UCS-2, null-terminated)
    6A      char[2]         Game mode
    6C      (1 byte)
    6D      u8              Course theme
    6E      (2 bytes)
    70      u16             Time limit
    72      u8              Autoscroll
    73      u8              Flags
    74      u32             Width
    78      u8[0x60]        Mii data
    D8      (0x14 bytes)
    EC      u32             Object count
    F0      obj_t[2600]     Objects
    145F0   effect_t[300]   Sound effects
    14F50   (0xB0 bytes)

Parenthesized ranges are unknown or unused, and are saved as zeroes.
"""

import dataclasses
import datetime
import enum
import logging
from typing import List

from . import SizeLimitError, StructuralError
from . import base_struct
from .base_struct import BE_U16, BE_U32, BE_U64, U8, BytestringField, DateTimeField, StructLayout
from . import checksum
from . import _common
from .objects import Object, OBJECT_SIZE
from .sound_effects import SoundEffect, SOUND_EFFECT_SIZE


logger = logging.getLogger(__name__)


LEVEL_SIZE = 0x15000
LEVEL_VERSION = 0xB

COURSE_NAME_MAX_LENGTH = 0x20
MII_DATA_SIZE = 0x60

OBJECTS_OFFSET = 0xF0
OBJECT_CAPACITY = 2600
SOUND_EFFECTS_OFFSET = 0x145F0
SOUND_EFFECT_COUNT = 300

MAX_BLOCK_WIDTH = 240
BLOCK_HEIGHT = 27


class GameMode(enum.Enum):
    """
    The game style a level is built in, identified by a two-character
    tag in the file
    """
    SUPER_MARIO_BROS = b'M1'
    SUPER_MARIO_BROS_3 = b'M3'
    SUPER_MARIO_WORLD = b'MW'
    NEW_SUPER_MARIO_BROS_U = b'WU'

    def __str__(self):
        return {
            GameMode.SUPER_MARIO_BROS: 'Super Mario Bros.',
            GameMode.SUPER_MARIO_BROS_3: 'Super Mario Bros. 3',
            GameMode.SUPER_MARIO_WORLD: 'Super Mario World',
            GameMode.NEW_SUPER_MARIO_BROS_U: 'New Super Mario Bros. U',
        }[self]


class CourseTheme(enum.IntEnum):
    OVERWORLD = 0
    UNDERGROUND = 1
    CASTLE = 2
    AIRSHIP = 3
    WATER = 4
    GHOST_HOUSE = 5


class AutoScroll(enum.IntEnum):
    NONE = 0
    SLOW = 1
    MEDIUM = 2
    FAST = 3


LEVEL_LAYOUT = StructLayout(LEVEL_SIZE, {
    'version':       BE_U64(0x00),
    # (checksum at 0x08 is handled by checksum.LEVEL)
    'creation_time': DateTimeField(0x10),
    'level_name':    BytestringField(0x28, (COURSE_NAME_MAX_LENGTH + 1) * 2).ucs2(),
    'game_mode':     BytestringField(0x6A, 2).enum(GameMode),
    'course_theme':  U8(0x6D).enum(CourseTheme),
    'time_limit':    BE_U16(0x70),
    'auto_scroll':   U8(0x72).enum(AutoScroll),
    'flags':         U8(0x73),
    'width':         BE_U32(0x74),
    'mii_data':      BytestringField(0x78, MII_DATA_SIZE),
    'object_count':  BE_U32(0xEC),
    'objects':       BytestringField(OBJECTS_OFFSET, OBJECT_CAPACITY * OBJECT_SIZE),
    'sound_effects': BytestringField(SOUND_EFFECTS_OFFSET, SOUND_EFFECT_COUNT * SOUND_EFFECT_SIZE),
})


def _blank_sound_effects() -> List[SoundEffect]:
    return [SoundEffect() for _ in range(SOUND_EFFECT_COUNT)]


@dataclasses.dataclass
class Level:
    """
    One playable area of a course: either the main level or the
    sub-level.
    """
    version: int = LEVEL_VERSION
    creation_time: datetime.datetime = datetime.datetime(2015, 9, 10)
    level_name: str = ''
    game_mode: GameMode = GameMode.SUPER_MARIO_BROS
    course_theme: CourseTheme = CourseTheme.OVERWORLD
    time_limit: int = 300
    auto_scroll: AutoScroll = AutoScroll.NONE
    flags: int = 0
    width: int = 0
    mii_data: bytes = bytes(MII_DATA_SIZE)
    objects: List[Object] = dataclasses.field(default_factory=list)
    sound_effects: List[SoundEffect] = dataclasses.field(default_factory=_blank_sound_effects)

    def __repr__(self) -> str:
        return (f'{type(self).__name__}(level_name={self.level_name!r}, game_mode={self.game_mode}, '
            f'course_theme={self.course_theme!r}, creation_time={self.creation_time!r}, '
            f'mii_data={_common.short_bytes_repr(self.mii_data)}, '
            f'{len(self.objects)} objects)')

    @property
    def block_width(self) -> int:
        """
        Width of the level in blocks
        """
        return max(0, min(self.width // 16, MAX_BLOCK_WIDTH))

    @property
    def block_height(self) -> int:
        """
        Height of the level in blocks (fixed)
        """
        return BLOCK_HEIGHT

    @classmethod
    def load(cls, data: bytes, *, verify_checksum=False) -> 'Level':
        """
        Load a level from course data.
        If verify_checksum is True, a warning is logged if the stored
        checksum doesn't match the data. The level is loaded either way.
        """
        values = LEVEL_LAYOUT.unpack(data, 'Course data')

        if verify_checksum and not checksum.LEVEL.verify(data):
            logger.warning('Course data checksum mismatch (stored %08X, calculated %08X)',
                checksum.LEVEL.read(data), checksum.LEVEL.calculate(data))

        object_count = values.pop('object_count')
        if object_count > OBJECT_CAPACITY:
            raise StructuralError(
                f'Course data claims to have {object_count} objects (the limit is {OBJECT_CAPACITY})')

        values['objects'] = base_struct.load_struct_array(
            values['objects'], 0, Object, object_count)
        values['sound_effects'] = base_struct.load_struct_array(
            values['sound_effects'], 0, SoundEffect, SOUND_EFFECT_COUNT)

        self = cls(**values)
        logger.debug('Loaded level %r with %d objects', self.level_name, object_count)
        return self

    def save(self) -> bytes:
        """
        Save the level to course data
        """
        if len(self.objects) > OBJECT_CAPACITY:
            raise SizeLimitError(
                f'Too many objects to save ({len(self.objects)}; the limit is {OBJECT_CAPACITY})')
        if len(self.sound_effects) != SOUND_EFFECT_COUNT:
            raise StructuralError(
                f'A level must have exactly {SOUND_EFFECT_COUNT} sound effects (found {len(self.sound_effects)})')

        objects_data = bytearray(OBJECT_CAPACITY * OBJECT_SIZE)
        base_struct.save_struct_array(objects_data, 0, self.objects)
        sound_effects_data = bytearray(SOUND_EFFECT_COUNT * SOUND_EFFECT_SIZE)
        base_struct.save_struct_array(sound_effects_data, 0, self.sound_effects)

        data = LEVEL_LAYOUT.pack({
            'version': self.version,
            'creation_time': self.creation_time,
            'level_name': self.level_name,
            'game_mode': self.game_mode,
            'course_theme': self.course_theme,
            'time_limit': self.time_limit,
            'auto_scroll': self.auto_scroll,
            'flags': self.flags,
            'width': self.width,
            'mii_data': self.mii_data,
            'object_count': len(self.objects),
            'objects': objects_data,
            'sound_effects': sound_effects_data,
        })

        # Must come last
        checksum.LEVEL.write(data)

        logger.debug('Saved level %r with %d objects', self.level_name, len(self.objects))
        return bytes(data)
