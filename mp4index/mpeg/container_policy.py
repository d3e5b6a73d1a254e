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

from .box_header import BoxHeader
from .errors import MalformedMetaBox
from .header_codec import HEADER_SIZE
from .options import ParseOptions

MEDIA_DATA_TAG: bytes = b'mdat'
META_TAG: bytes = b'meta'

# version (1 byte) + flags (3 bytes)
FULL_BOX_PREFIX: int = 4

def should_descend(fourcc: bytes, payload_size: int, level: int,
                   options: ParseOptions) -> bool:
    if payload_size < HEADER_SIZE:
        return False
    if level >= options.max_depth:
        return False
    # mdat can be huge and never contains boxes
    if fourcc == MEDIA_DATA_TAG:
        return False
    return options.is_container(fourcc)


def child_bounds(box: BoxHeader) -> tuple[int, int]:
    """
    Returns the (start, end) byte range that holds the children of the
    given box.
    """
    if box.fourcc != META_TAG:
        return (box.payload_offset, box.end)
    if box.payload_size < FULL_BOX_PREFIX:
        raise MalformedMetaBox(box.offset, box.payload_size)
    return (box.payload_offset + FULL_BOX_PREFIX, box.end)
