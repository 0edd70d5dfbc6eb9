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
Functions and classes that don't need their own modules.

Every error raised by smmpy for bad input data derives from
CourseFileError, which in turn is a ValueError.
"""


class CourseFileError(ValueError):
    """
    Base class for all errors about malformed course data
    """


class StructuralError(CourseFileError):
    """
    The data doesn't have the shape the file format requires (wrong
    size, truncated record, unrecognized enum value, invalid date...)
    """


class SizeLimitError(CourseFileError):
    """
    A value is too large to fit into the space the file format reserves
    for it
    """


class EncodingError(CourseFileError):
    """
    A string can't be represented in the file format's text encoding
    """


class MissingMemberError(CourseFileError):
    """
    One of the files that make up a course is absent
    """
    def __init__(self, member):
        super().__init__(f'Course is missing "{member.value}"')
        self.member = member


class InvalidMemberError(CourseFileError):
    """
    One of the files that make up a course couldn't be loaded
    """
    def __init__(self, member, cause):
        super().__init__(f'Course file "{member.value}" is invalid: {cause}')
        self.member = member
        self.cause = cause
