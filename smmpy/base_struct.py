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
This file implements a generic table-driven struct system.

A StructLayout is a fixed data size plus a table of named fields, each
of which knows its own offset and width. Layouts turn raw data into a
dict of field values and back; everything not covered by a field is
reserved, and is always saved as zeroes.
"""

import datetime
import struct
from typing import Any, Dict, Generic, List, Literal, Tuple, TypeVar

from . import StructuralError
from . import text
from . import _common


FT = TypeVar('FT')  # "field type"
class StructField(Generic[FT]):
    """
    Base class for a struct field
    """
    offset: int
    length: int

    def get(self, data: bytes) -> FT:
        raise NotImplementedError

    def set(self, data: bytearray, value: FT) -> None:
        raise NotImplementedError

    @property
    def span(self) -> Tuple[int, int]:
        """
        (start, end) offsets of the bytes this field occupies
        """
        return (self.offset, self.offset + self.length)


class BytestringField(StructField[bytes]):
    """
    Simple StructField subclass that just returns raw bytestrings
    """
    def __init__(self, offset, length):
        super().__init__()
        self.offset = offset
        self.length = length

    def get(self, data: bytes) -> bytes:
        return bytes(data[self.offset : self.offset + self.length])

    def set(self, data: bytearray, value: bytes) -> None:
        if len(value) != self.length:
            raise StructuralError(
                f'Value {_common.short_bytes_repr(value)} is {len(value)} bytes long, but the field needs exactly {self.length}')
        data[self.offset : self.offset + self.length] = value

    def ucs2(self) -> 'UCS2StringField':
        """
        Decode to a string (UCS-2) when loading the field.
        This is a fluent interface.
        """
        return UCS2StringField(self)

    def enum(self, enum_type: type) -> 'BytestringFieldEnum':
        """
        Convert to a member of an enum whose values are bytestrings
        when loading the field.
        This is a fluent interface.
        """
        return BytestringFieldEnum(self, enum_type)


class UCS2StringField(StructField[str]):
    """
    Wrapper field type for casting a (null-terminated, zero-padded,
    fixed-length) BytestringField to a str
    """
    parent: BytestringField

    def __init__(self, parent):
        if parent.length % 2:
            raise ValueError(f'UCS-2 string fields must have an even length (not {parent.length})')
        self.parent = parent
        self.offset = parent.offset
        self.length = parent.length

    @property
    def num_units(self) -> int:
        return self.length // 2

    def get(self, data: bytes) -> str:
        return text.decode_ucs2(self.parent.get(data))

    def set(self, data: bytearray, value: str) -> None:
        self.parent.set(data, text.encode_ucs2(value, self.num_units))


ET = TypeVar('ET')  # "enum type"
class BytestringFieldEnum(StructField[ET]):
    """
    Wrapper field type for casting a BytestringField to a member of an
    Enum with bytestring values (i.e. a fixed-length tag).
    Unknown tags are an error.
    """
    parent: BytestringField
    enum_type: type

    def __init__(self, parent, enum_type):
        self.parent = parent
        self.enum_type = enum_type
        self.offset = parent.offset
        self.length = parent.length

    def get(self, data: bytes) -> ET:
        value = self.parent.get(data)
        try:
            return self.enum_type(value)
        except ValueError:
            raise StructuralError(f'Unknown {self.enum_type.__name__} tag: {value!r}') from None

    def set(self, data: bytearray, value: ET) -> None:
        try:
            value = self.enum_type(value)
        except ValueError:
            raise StructuralError(f'Unknown {self.enum_type.__name__} tag: {value!r}') from None
        self.parent.set(data, value.value)


class NumericField(StructField[int]):
    """
    StructField subclass that deals with integer types loaded by
    struct.unpack().
    Values are truncated to the field's width when saving, so any bit
    pattern (signed or unsigned) can be stored.
    """
    # Must be defined in subclasses
    endianness: Literal['<', '>']
    format_char: str

    def __init__(self, offset):
        self.offset = offset
        self.length = struct.calcsize(self.format_string())

    def __init_subclass__(cls, *, endianness, format_char, **kwargs):
        """
        Get the endianness and struct-format-string-character arguments
        from the class definition, and apply them.
        """
        super().__init_subclass__(**kwargs)
        cls.endianness = endianness
        cls.format_char = format_char

    def format_string(self) -> str:
        """
        Get the format string representing this field
        """
        return self.endianness + self.format_char

    @property
    def signed(self) -> bool:
        return self.format_char.islower()

    def truncate(self, value: int) -> int:
        """
        Wrap a value to the range of this field (two's complement)
        """
        num_bits = self.length * 8
        value &= (1 << num_bits) - 1
        if self.signed and value >> (num_bits - 1):
            value -= 1 << num_bits
        return value

    def get(self, data: bytes) -> int:
        """
        Retrieve the field's value
        """
        return struct.unpack_from(self.format_string(), data, self.offset)[0]

    def set(self, data: bytearray, value: int) -> None:
        """
        Given a bytearray and a new value, insert it into the bytearray
        """
        struct.pack_into(self.format_string(), data, self.offset, self.truncate(int(value)))

    def enum(self, enum_type: type) -> 'NumericFieldEnum':
        """
        Apply a transformation to enum when loading the field.
        This is a fluent interface.
        """
        return NumericFieldEnum(self, enum_type)


# Create subclasses of NumericField implementing all of the
# format-string characters that course files use. Everything is
# big-endian.
class BE_U8(NumericField, endianness='>', format_char='B'): pass
class BE_S8(NumericField, endianness='>', format_char='b'): pass
class BE_U16(NumericField, endianness='>', format_char='H'): pass
class BE_S16(NumericField, endianness='>', format_char='h'): pass
class BE_U32(NumericField, endianness='>', format_char='I'): pass
class BE_U64(NumericField, endianness='>', format_char='Q'): pass
U8 = BE_U8
S8 = BE_S8


class NumericFieldEnum(StructField[ET]):
    """
    Wrapper field type for casting a NumericField to an IntEnum
    subclass.
    Unlike a plain NumericField, values that aren't members of the enum
    are an error, both when loading and when saving.
    """
    parent: NumericField
    enum_type: type

    def __init__(self, parent, enum_type):
        self.parent = parent
        self.enum_type = enum_type
        self.offset = parent.offset
        self.length = parent.length

    def get(self, data: bytes) -> ET:
        value = self.parent.get(data)
        try:
            return self.enum_type(value)
        except ValueError:
            raise StructuralError(f'Unknown {self.enum_type.__name__} value: {value}') from None

    def set(self, data: bytearray, value: ET) -> None:
        try:
            value = self.enum_type(value)
        except ValueError:
            raise StructuralError(f'Unknown {self.enum_type.__name__} value: {value}') from None
        self.parent.set(data, value.value)


class DateTimeField(StructField[datetime.datetime]):
    """
    A timestamp stored as year (u16), month, day, hour, minute (u8).
    There are no seconds and no time zone; those are dropped when
    saving.
    """
    def __init__(self, offset):
        self.offset = offset
        self.length = 6
        self.year = BE_U16(offset)
        self.month = U8(offset + 2)
        self.day = U8(offset + 3)
        self.hour = U8(offset + 4)
        self.minute = U8(offset + 5)

    def get(self, data: bytes) -> datetime.datetime:
        parts = (self.year.get(data), self.month.get(data), self.day.get(data),
            self.hour.get(data), self.minute.get(data))
        try:
            return datetime.datetime(*parts)
        except ValueError as e:
            raise StructuralError(f'Invalid timestamp {parts}: {e}') from None

    def set(self, data: bytearray, value: datetime.datetime) -> None:
        self.year.set(data, value.year)
        self.month.set(data, value.month)
        self.day.set(data, value.day)
        self.hour.set(data, value.hour)
        self.minute.set(data, value.minute)


class StructLayout:
    """
    A fixed data size, and a table of the fields within it.
    Fields may not overlap. Any bytes not covered by a field are
    reserved: they're ignored when loading and zeroed when saving.
    """
    size: int
    fields: Dict[str, StructField]

    def __init__(self, size: int, fields: Dict[str, StructField]):
        self.size = size
        self.fields = fields

        # Sanity-check the table itself
        end_of_previous = 0
        for name, field in sorted(fields.items(), key=lambda item: item[1].offset):
            start, end = field.span
            if start < end_of_previous:
                raise ValueError(f'Field "{name}" overlaps the previous field')
            if end > size:
                raise ValueError(f'Field "{name}" extends past the end of the struct')
            end_of_previous = end

    def reserved_ranges(self) -> List[Tuple[int, int]]:
        """
        Return (start, end) pairs for every range of bytes that isn't
        covered by any field
        """
        ranges = []
        pos = 0
        for start, end in sorted(f.span for f in self.fields.values()):
            if start > pos:
                ranges.append((pos, start))
            pos = end
        if pos < self.size:
            ranges.append((pos, self.size))
        return ranges

    def unpack(self, data: bytes, what: str = 'Struct') -> Dict[str, Any]:
        """
        Read every field from data, which must be exactly self.size
        bytes long
        """
        _common.check_length(data, self.size, what)
        return {name: field.get(data) for name, field in self.fields.items()}

    def pack(self, values: Dict[str, Any]) -> bytearray:
        """
        Create zero-initialized data of length self.size, and write
        every field into it
        """
        data = bytearray(self.size)
        for name, field in self.fields.items():
            field.set(data, values[name])
        return data


class BaseRecord:
    """
    Mixin for dataclasses that are saved using a StructLayout whose
    field names match the dataclass attribute names.
    """
    # Must be statically defined in subclasses
    layout: StructLayout

    @classmethod
    def load(cls, data: bytes) -> 'BaseRecord':
        """
        Load a record from exactly layout.size bytes of data
        """
        return cls(**cls.layout.unpack(data, cls.__name__))

    def save(self) -> bytes:
        """
        Save the record to exactly layout.size bytes of data
        """
        return bytes(self.layout.pack({name: getattr(self, name) for name in self.layout.fields}))


def load_struct_array(data: bytes, offset: int, struct_type: type, count: int) -> List[BaseRecord]:
    """
    Helper function to load count consecutive records starting at offset
    """
    size = struct_type.layout.size
    end = offset + count * size
    if end > len(data):
        raise StructuralError(
            f'{count} {struct_type.__name__} records at {offset:#x} would extend past the end of the data')

    return [struct_type.load(data[item_offset : item_offset + size])
        for item_offset in range(offset, end, size)]


def save_struct_array(data: bytearray, offset: int, elements: List[BaseRecord]) -> None:
    """
    Helper function to write consecutive records into data, starting at
    offset
    """
    for element in elements:
        element_data = element.save()
        data[offset : offset + len(element_data)] = element_data
        offset += len(element_data)
