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
Support for objects (the things placed in a level).
"""

import dataclasses
from typing import Tuple

from .base_struct import BE_U32, BE_S16, S8, StructLayout, BaseRecord


OBJECT_SIZE = 0x20

# Value of link_id / effect_index meaning "none"
LINK_ID_NONE = -1
EFFECT_INDEX_NONE = -1

# Positions are stored multiplied by this
POSITION_SCALE = 10


OBJECT_LAYOUT = StructLayout(OBJECT_SIZE, {
    'x_position':                     BE_U32(0x00),
    'z_position':                     BE_U32(0x04),
    'y_position':                     BE_S16(0x08),
    'width':                          S8(0x0A),
    'height':                         S8(0x0B),
    'object_flags':                   BE_U32(0x0C),
    'child_object_flags':             BE_U32(0x10),
    'extended_object_data':           BE_U32(0x14),  # firebar length, etc.
    'object_type':                    S8(0x18),
    'child_object_type':              S8(0x19),
    'link_id':                        BE_S16(0x1A),  # pipes and rails
    'effect_index':                   BE_S16(0x1C),
    'transformation_id':              S8(0x1E),      # always -1 in retail courses?
    'child_object_transformation_id': S8(0x1F),
})


class PositionMixin:
    """
    Mixin that adds position properties to a class with x_position,
    y_position and z_position attributes
    """
    @property
    def position(self) -> Tuple[int, int, int]:
        return (self.x_position, self.y_position, self.z_position)
    @position.setter
    def position(self, value: Tuple[int, int, int]) -> None:
        (self.x_position, self.y_position, self.z_position) = value

    @property
    def block_position(self) -> Tuple[float, float, float]:
        """
        The position measured in blocks rather than tenths of blocks
        """
        return tuple(v / POSITION_SCALE for v in self.position)


class SizeMixin:
    """
    Mixin that adds a size property to a class with width and height attributes
    """
    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)
    @size.setter
    def size(self, value: Tuple[int, int]) -> None:
        (self.width, self.height) = value


@dataclasses.dataclass
class Object(BaseRecord, PositionMixin, SizeMixin):
    """
    An object placed in a level: a block, enemy, pipe, etc.
    Positions are in tenths of blocks; sizes are in blocks.
    """
    layout = OBJECT_LAYOUT

    x_position: int = 0
    z_position: int = 0
    y_position: int = 0
    width: int = 1
    height: int = 1
    object_flags: int = 0
    child_object_flags: int = 0
    extended_object_data: int = 0
    object_type: int = 0
    child_object_type: int = -1
    link_id: int = LINK_ID_NONE
    effect_index: int = EFFECT_INDEX_NONE
    transformation_id: int = -1
    child_object_transformation_id: int = -1

    @property
    def is_linked(self) -> bool:
        return self.link_id != LINK_ID_NONE

    @property
    def has_effect(self) -> bool:
        return self.effect_index != EFFECT_INDEX_NONE
