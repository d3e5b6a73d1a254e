#############################################################################
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#
#############################################################################
#
#  Project Name        :    ISO BMFF box header index
#
#  Author              :    Alex Ashley
#
#############################################################################

from collections.abc import Iterable
from dataclasses import dataclass, field
import logging

DEFAULT_MAX_DEPTH: int = 64

DEFAULT_CONTAINER_TAGS: frozenset[bytes] = frozenset({
    b'moov',
    b'trak',
    b'mdia',
    b'minf',
    b'stbl',
    b'edts',
    b'dinf',
    b'udta',
    b'meta',
    b'ilst',
    b'moof',
    b'traf',
    b'mfra',
})


def to_fourcc(tag: str | bytes) -> bytes:
    if isinstance(tag, str):
        tag = tag.encode('latin-1')
    else:
        tag = bytes(tag)
    if len(tag) != 4:
        raise ValueError(f'Box tag must be exactly 4 bytes: {tag!r}')
    return tag


@dataclass(frozen=True, slots=True, kw_only=True)
class ParseOptions:
    """
    Options that control how the box headers of a file are parsed.
    The container_tags can be provided as any iterable of str or bytes
    and are stored as a frozenset of 4 byte fourcc values.
    """
    max_depth: int = DEFAULT_MAX_DEPTH
    strict: bool = False
    container_tags: Iterable[str | bytes] = DEFAULT_CONTAINER_TAGS
    log: logging.Logger = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.container_tags is None:
            raise ValueError('container_tags must not be None')
        if self.max_depth < 0:
            raise ValueError(f'Invalid max_depth {self.max_depth}')
        tags = frozenset(to_fourcc(t) for t in self.container_tags)
        # frozen dataclass, so fields can only be set via object
        object.__setattr__(self, 'container_tags', tags)
        object.__setattr__(self, 'log', logging.getLogger('mp4'))

    def is_container(self, fourcc: bytes) -> bool:
        return fourcc in self.container_tags
