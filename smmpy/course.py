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
Support for full courses: a main level, a sub-level, and two
thumbnails.
"""

import dataclasses
import enum
import logging
import posixpath
from typing import Dict, Mapping

from . import CourseFileError, InvalidMemberError, MissingMemberError
from . import archive
from .level import Level
from .thumbnail import Thumbnail


logger = logging.getLogger(__name__)


class CourseMember(enum.Enum):
    """
    The files that make up a course, by filename
    """
    LEVEL = 'course_data.cdt'
    SUB_LEVEL = 'course_data_sub.cdt'
    PREVIEW = 'thumbnail0.tnl'
    THUMBNAIL = 'thumbnail1.tnl'


def _load_member(member: CourseMember, loader, data: bytes, **kwargs):
    """
    Run loader(data, **kwargs), blaming any error on the specified member
    """
    try:
        return loader(data, **kwargs)
    except CourseFileError as e:
        raise InvalidMemberError(member, e) from e


@dataclasses.dataclass(frozen=True)
class Course:
    """
    A complete course
    """
    level: Level
    sub_level: Level
    level_preview: Thumbnail
    level_thumbnail: Thumbnail

    @classmethod
    def load(cls, level: bytes, sub_level: bytes, level_preview: bytes, level_thumbnail: bytes,
            *, verify_checksum=False) -> 'Course':
        """
        Load a course from the data of its four files.
        verify_checksum is passed on to Level.load() and
        Thumbnail.load().
        """
        return cls(
            _load_member(CourseMember.LEVEL, Level.load, level, verify_checksum=verify_checksum),
            _load_member(CourseMember.SUB_LEVEL, Level.load, sub_level, verify_checksum=verify_checksum),
            _load_member(CourseMember.PREVIEW, Thumbnail.load, level_preview, verify_checksum=verify_checksum),
            _load_member(CourseMember.THUMBNAIL, Thumbnail.load, level_thumbnail, verify_checksum=verify_checksum),
        )

    @classmethod
    def load_members(cls, members: Mapping[str, bytes], *, verify_checksum=False) -> 'Course':
        """
        Load a course from a dict mapping filenames to data, such as
        the contents of an archive.
        Names are matched by their final path component, so the course
        files may be inside a folder. Other files are ignored.
        """
        known_filenames = {member.value for member in CourseMember}

        by_filename = {}
        for name, data in members.items():
            filename = posixpath.basename(name)
            if filename in known_filenames:
                by_filename[filename] = data
            else:
                logger.debug('Ignoring unrelated file "%s"', name)

        datas = []
        for member in CourseMember:
            if member.value not in by_filename:
                raise MissingMemberError(member)
            datas.append(by_filename[member.value])

        return cls.load(*datas, verify_checksum=verify_checksum)

    @classmethod
    def load_tar(cls, data: bytes, *, verify_checksum=False) -> 'Course':
        """
        Load a course from a tar archive containing its four files
        """
        return cls.load_members(archive.load(data), verify_checksum=verify_checksum)

    def save_members(self) -> Dict[str, bytes]:
        """
        Save the course to a dict mapping filenames to data
        """
        return {
            CourseMember.LEVEL.value: self.level.save(),
            CourseMember.SUB_LEVEL.value: self.sub_level.save(),
            CourseMember.PREVIEW.value: self.level_preview.save(),
            CourseMember.THUMBNAIL.value: self.level_thumbnail.save(),
        }

    def save_tar(self) -> bytes:
        """
        Save the course to a tar archive containing its four files
        """
        return archive.save(self.save_members())
