import datetime

import pytest

from smmpy.level import AutoScroll, CourseTheme, GameMode, Level
from smmpy.objects import Object
from smmpy.sound_effects import SoundEffect
from smmpy.thumbnail import Thumbnail


@pytest.fixture()
def sample_objects():
    return [
        Object(x_position=125, z_position=0, y_position=35, object_type=4),
        Object(x_position=480, y_position=-5, width=2, height=2, object_type=9, link_id=3),
        Object(x_position=960, y_position=105, object_type=9, link_id=3, effect_index=0,
            object_flags=0x06000040, child_object_type=20, child_object_flags=0x06000040),
        Object(x_position=0xFFFFFFFF, z_position=0x12345678, y_position=-32768, width=-128, height=127,
            extended_object_data=0xDEADBEEF, object_type=-1, transformation_id=5,
            child_object_transformation_id=-7),
    ]


@pytest.fixture()
def sample_level(sample_objects):
    sound_effects = [SoundEffect() for _ in range(300)]
    sound_effects[0] = SoundEffect(0x01020304)
    sound_effects[299] = SoundEffect(0xFFFFFFFF)

    return Level(
        version=0xB,
        creation_time=datetime.datetime(2016, 3, 14, 15, 9),
        level_name='スーパーマリオ Test',
        game_mode=GameMode.SUPER_MARIO_WORLD,
        course_theme=CourseTheme.GHOST_HOUSE,
        time_limit=500,
        auto_scroll=AutoScroll.MEDIUM,
        flags=0xA5,
        width=0x0F00,
        mii_data=bytes(range(0x60)),
        objects=sample_objects,
        sound_effects=sound_effects,
    )


@pytest.fixture()
def sample_sub_level():
    return Level(
        level_name='Sub area',
        game_mode=GameMode.SUPER_MARIO_WORLD,
        course_theme=CourseTheme.UNDERGROUND,
        width=0x0400,
    )


@pytest.fixture()
def sample_thumbnail():
    return Thumbnail(b'\xFF\xD8\xFF\xE0' + bytes(range(256)) * 4 + b'\xFF\xD9')
