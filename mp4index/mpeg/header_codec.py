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

from dataclasses import dataclass, replace
import struct

from .errors import TruncatedHeader

HEADER_SIZE: int = 8
LARGE_SIZE_FIELD: int = 8
LARGE_HEADER_SIZE: int = HEADER_SIZE + LARGE_SIZE_FIELD

# values of the 32 bit size field with a special meaning
SIZE_TO_END: int = 0
SIZE_IS_LARGE: int = 1

@dataclass(frozen=True, slots=True)
class RawHeader:
    fourcc: bytes
    offset: int
    size: int
    header_size: int
    extended: bool = False


def decode_header(data: bytes, offset: int, container_end: int) -> RawHeader:
    """
    Decodes the 8 byte header found at "offset".
    If the size field indicates the large size form, the returned header
    has extended=True and its size must be filled in using
    decode_large_size()
    """
    size, fourcc = struct.unpack('>I4s', data)
    if size == SIZE_TO_END:
        return RawHeader(fourcc, offset, container_end - offset, HEADER_SIZE)
    if size == SIZE_IS_LARGE:
        return RawHeader(fourcc, offset, 0, LARGE_HEADER_SIZE, extended=True)
    return RawHeader(fourcc, offset, size, HEADER_SIZE)


def decode_large_size(raw: RawHeader, data: bytes) -> RawHeader:
    if len(data) < LARGE_SIZE_FIELD:
        raise TruncatedHeader(raw.fourcc, raw.offset, len(data))
    size = struct.unpack('>Q', data[:LARGE_SIZE_FIELD])[0]
    return replace(raw, size=size)


def large_size_available(raw: RawHeader, container_end: int) -> int:
    """
    Number of bytes of the large size field that are inside the container
    """
    available = container_end - raw.offset - HEADER_SIZE
    return max(0, min(LARGE_SIZE_FIELD, available))
