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
Support for tar bundles of course files, as distributed by course
sharing sites.
Contents are represented as a flat dict mapping member paths to data.
"""

import io
import logging
import os
import tarfile
import zlib
from typing import Dict, Mapping, Union

from . import StructuralError


logger = logging.getLogger(__name__)


ArchiveContents = Dict[str, bytes]
PathLike = Union[str, os.PathLike]


def load(data: bytes) -> ArchiveContents:
    """
    Read a tar archive (optionally gzip/bz2/xz-compressed) and return
    the contents of all regular files in it, keyed by path.
    """
    contents = {}
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode='r:*') as tar:
            for member in tar:
                if not member.isfile():
                    continue
                contents[member.name] = tar.extractfile(member).read()
    except (tarfile.TarError, EOFError, OSError, zlib.error) as e:
        # The compression layers raise their own errors for truncated or
        # corrupt streams
        raise StructuralError(f'Invalid tar archive: {e}') from e

    logger.debug('Loaded tar archive with %d files', len(contents))
    return contents


def load_from_file(path: PathLike) -> ArchiveContents:
    """
    Load a tar archive file from a path on the filesystem
    """
    with open(path, 'rb') as f:
        return load(f.read())


def save(contents: Mapping[str, bytes]) -> bytes:
    """
    Save an uncompressed tar archive, given its contents as a dict.
    Members are sorted by name and have fixed metadata, so the same
    contents always produce the same archive.
    """
    bio = io.BytesIO()
    with tarfile.open(fileobj=bio, mode='w', format=tarfile.USTAR_FORMAT) as tar:
        for name in sorted(contents):
            file_data = contents[name]
            info = tarfile.TarInfo(name)
            info.size = len(file_data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(file_data))

    logger.debug('Saved tar archive with %d files', len(contents))
    return bio.getvalue()


def save_to_file(contents: Mapping[str, bytes], path: PathLike) -> None:
    """
    Save a tar archive file to a path on the filesystem
    """
    data = save(contents)
    with open(path, 'wb') as f:
        f.write(data)
