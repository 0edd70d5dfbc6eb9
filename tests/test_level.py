import datetime
import logging
import struct
import zlib

import pytest

from smmpy import EncodingError, SizeLimitError, StructuralError
from smmpy.level import (LEVEL_LAYOUT, LEVEL_SIZE, OBJECT_CAPACITY, AutoScroll,
    CourseTheme, GameMode, Level)
from smmpy.objects import Object
from smmpy.sound_effects import SoundEffect


def minimal_level_data():
    """
    Hand-built course data with only the fields that can't be zero
    """
    data = bytearray(LEVEL_SIZE)
    struct.pack_into('>HBBBB', data, 0x10, 2016, 1, 2, 3, 4)
    data[0x6A:0x6C] = b'M1'
    return data


def test_round_trip(sample_level):
    data = sample_level.save()
    assert len(data) == LEVEL_SIZE == 86016
    assert Level.load(data) == sample_level


def test_round_trip_default_level():
    level = Level()
    reloaded = Level.load(level.save())
    assert reloaded == level
    assert reloaded.objects == []
    assert len(reloaded.sound_effects) == 300


def test_load_minimal_data():
    level = Level.load(minimal_level_data())
    assert level.version == 0
    assert level.creation_time == datetime.datetime(2016, 1, 2, 3, 4)
    assert level.level_name == ''
    assert level.game_mode is GameMode.SUPER_MARIO_BROS
    assert level.course_theme is CourseTheme.OVERWORLD
    assert level.auto_scroll is AutoScroll.NONE
    assert level.mii_data == bytes(0x60)
    assert level.objects == []
    assert level.sound_effects == [SoundEffect()] * 300


def test_sound_effect_bytes_survive_round_trip():
    data = minimal_level_data()
    data[0x145F0:0x145F8] = b'\x01\x02\x03\x04\x05\x06\x07\x08'
    data[0x14F48:0x14F50] = b'\0\0\0\0\xDE\xAD\xBE\xEF'

    level = Level.load(data)
    assert level.sound_effects[0] == SoundEffect(0x01020304, 0x05060708)
    assert level.sound_effects[299] == SoundEffect(0, 0xDEADBEEF)

    saved = level.save()
    assert saved[0x145F0:0x145F8] == b'\x01\x02\x03\x04\x05\x06\x07\x08'
    assert saved[0x14F48:0x14F50] == b'\0\0\0\0\xDE\xAD\xBE\xEF'


def test_field_offsets(sample_level):
    data = sample_level.save()

    assert data[0x00:0x08] == b'\0\0\0\0\0\0\0\x0B'
    assert data[0x10:0x16] == bytes([0x07, 0xE0, 3, 14, 15, 9])
    assert data[0x28:0x2C] == 'スー'.encode('utf-16-be')
    assert data[0x6A:0x6C] == b'MW'
    assert data[0x6D] == 5
    assert data[0x70:0x72] == b'\x01\xF4'
    assert data[0x72] == 2
    assert data[0x73] == 0xA5
    assert data[0x74:0x78] == b'\0\0\x0F\0'
    assert data[0x78:0xD8] == bytes(range(0x60))
    assert data[0xEC:0xF0] == b'\0\0\0\x04'
    assert data[0xF0:0x110] == sample_level.objects[0].save()
    assert data[0x145F0:0x145F8] == b'\x01\x02\x03\x04\0\0\0\0'
    assert data[0x14F48:0x14F50] == b'\xFF\xFF\xFF\xFF\0\0\0\0'


def test_reserved_ranges():
    assert LEVEL_LAYOUT.reserved_ranges() == [
        (0x08, 0x10),
        (0x16, 0x28),
        (0x6C, 0x6D),
        (0x6E, 0x70),
        (0xD8, 0xEC),
        (0x14F50, 0x15000),
    ]


def test_reserved_ranges_are_zero(sample_level):
    data = sample_level.save()
    for start, end in LEVEL_LAYOUT.reserved_ranges():
        if start == 0x08:
            # Checksum lives here
            start = 0x0C
        assert data[start:end] == bytes(end - start)


def test_unused_object_slots_are_zero(sample_level):
    data = sample_level.save()
    end_of_objects = 0xF0 + len(sample_level.objects) * 0x20
    assert data[end_of_objects:0x145F0] == bytes(0x145F0 - end_of_objects)


def test_reserved_bytes_are_ignored_when_loading(sample_level):
    data = bytearray(sample_level.save())
    for offset in [0x0C, 0x16, 0x6C, 0x6E, 0xD8, 0x14FFF]:
        data[offset] = 0xAA
    assert Level.load(data) == sample_level


def test_checksum(sample_level):
    data = sample_level.save()
    assert data[0x08:0x0C] == (zlib.crc32(data[0x10:]) & 0xFFFFFFFF).to_bytes(4, 'big')


def test_save_is_deterministic(sample_level):
    assert sample_level.save() == sample_level.save()


@pytest.mark.parametrize('length', [LEVEL_SIZE - 1, LEVEL_SIZE + 1, 0])
def test_wrong_length(length):
    with pytest.raises(StructuralError):
        Level.load(bytes(length))


@pytest.mark.parametrize('tag, game_mode', [
    (b'M1', GameMode.SUPER_MARIO_BROS),
    (b'M3', GameMode.SUPER_MARIO_BROS_3),
    (b'MW', GameMode.SUPER_MARIO_WORLD),
    (b'WU', GameMode.NEW_SUPER_MARIO_BROS_U),
])
def test_game_mode_tags(tag, game_mode):
    data = minimal_level_data()
    data[0x6A:0x6C] = tag
    level = Level.load(data)
    assert level.game_mode is game_mode
    assert level.save()[0x6A:0x6C] == tag


@pytest.mark.parametrize('tag', [b'\0\0', b'm1', b'1M', b'M2', b'WW'])
def test_unknown_game_mode_tag(tag):
    data = minimal_level_data()
    data[0x6A:0x6C] = tag
    with pytest.raises(StructuralError):
        Level.load(data)


def test_unknown_course_theme():
    data = minimal_level_data()
    data[0x6D] = 6
    with pytest.raises(StructuralError):
        Level.load(data)


def test_unknown_auto_scroll():
    data = minimal_level_data()
    data[0x72] = 4
    with pytest.raises(StructuralError):
        Level.load(data)


def test_invalid_creation_time():
    data = minimal_level_data()
    data[0x12] = 13
    with pytest.raises(StructuralError):
        Level.load(data)


def test_object_count_above_capacity():
    data = minimal_level_data()
    struct.pack_into('>I', data, 0xEC, OBJECT_CAPACITY + 1)
    with pytest.raises(StructuralError):
        Level.load(data)


def test_object_count_limits_table():
    data = minimal_level_data()
    data[0xF0:0x110] = Object(object_type=1).save()
    data[0x110:0x130] = Object(object_type=2).save()
    struct.pack_into('>I', data, 0xEC, 1)

    level = Level.load(data)
    assert level.objects == [Object(object_type=1)]


def test_full_object_table():
    level = Level(objects=[Object(x_position=i) for i in range(OBJECT_CAPACITY)])
    data = level.save()
    assert data[0x145D0:0x145D4] == (OBJECT_CAPACITY - 1).to_bytes(4, 'big')
    assert Level.load(data) == level


def test_too_many_objects():
    level = Level(objects=[Object()] * (OBJECT_CAPACITY + 1))
    with pytest.raises(SizeLimitError):
        level.save()


@pytest.mark.parametrize('count', [0, 299, 301])
def test_wrong_sound_effect_count(count):
    level = Level(sound_effects=[SoundEffect()] * count)
    with pytest.raises(StructuralError):
        level.save()


def test_name_too_long():
    with pytest.raises(EncodingError):
        Level(level_name='x' * 33).save()


def test_name_full_length():
    level = Level(level_name='y' * 32)
    data = level.save()
    assert data[0x68:0x6A] == b'\0\0'
    assert Level.load(data).level_name == 'y' * 32


def test_mii_data_wrong_length():
    with pytest.raises(StructuralError):
        Level(mii_data=b'\0' * 0x5F).save()


def test_creation_time_seconds_are_dropped():
    level = Level(creation_time=datetime.datetime(2015, 9, 10, 12, 34, 56, 789))
    assert Level.load(level.save()).creation_time == datetime.datetime(2015, 9, 10, 12, 34)


def test_verify_checksum(sample_level, caplog):
    data = bytearray(sample_level.save())
    data[0x20] = 0xFF  # reserved, but still covered by the checksum

    with caplog.at_level(logging.WARNING, logger='smmpy.level'):
        assert Level.load(data) == sample_level
    assert not caplog.records

    with caplog.at_level(logging.WARNING, logger='smmpy.level'):
        assert Level.load(data, verify_checksum=True) == sample_level
    assert 'checksum mismatch' in caplog.text


def test_verify_checksum_ok(sample_level, caplog):
    with caplog.at_level(logging.WARNING, logger='smmpy.level'):
        Level.load(sample_level.save(), verify_checksum=True)
    assert not caplog.records


@pytest.mark.parametrize('width, block_width', [
    (0, 0),
    (0x0F, 0),
    (0x10, 1),
    (0x0F00, 240),
    (0xFFFFFFFF, 240),
])
def test_block_width(width, block_width):
    assert Level(width=width).block_width == block_width


def test_block_height():
    assert Level().block_height == 27
