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

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .box_header import BoxHeader

def fourcc_name(fourcc: bytes) -> str:
    return str(fourcc, 'latin-1')


class ParseError(ValueError):
    """
    Base class for all defects found in the box structure of a file.
    The headers that were decoded before the defect was found are
    available as the "headers" attribute.
    """

    fourcc: bytes
    offset: int
    headers: list["BoxHeader"]

    def __init__(self, msg: str, fourcc: bytes, offset: int) -> None:
        super().__init__(msg)
        self.fourcc = fourcc
        self.offset = offset
        self.headers = []

    @property
    def tag(self) -> str:
        return fourcc_name(self.fourcc)


class TruncatedHeader(ParseError):
    def __init__(self, fourcc: bytes, offset: int, available: int) -> None:
        super().__init__(
            f"Truncated large size for box '{fourcc_name(fourcc)}' at offset "
            f"{offset}. Needed 8 bytes, only {available} available.",
            fourcc, offset)
        self.available = available


class UndersizedBox(ParseError):
    def __init__(self, fourcc: bytes, offset: int, size: int, header_size: int) -> None:
        super().__init__(
            f"Invalid box size {size} for '{fourcc_name(fourcc)}' at offset "
            f"{offset}. Size is smaller than its {header_size} byte header.",
            fourcc, offset)
        self.size = size
        self.header_size = header_size


class UnrepresentableSize(ParseError):
    def __init__(self, fourcc: bytes, offset: int, size: int) -> None:
        super().__init__(
            f"Box '{fourcc_name(fourcc)}' at offset {offset} is too large "
            f"for this parser. size={size}",
            fourcc, offset)
        self.size = size


class ContainerOverrun(ParseError):
    def __init__(self, fourcc: bytes, offset: int, size: int, container_end: int) -> None:
        super().__init__(
            f"Box '{fourcc_name(fourcc)}' at offset {offset} overflows its "
            f"container. size={size}, container_end={container_end}",
            fourcc, offset)
        self.size = size
        self.container_end = container_end


class MalformedMetaBox(ParseError):
    def __init__(self, offset: int, payload_size: int) -> None:
        super().__init__(
            f"Box 'meta' at offset {offset} is too small for its full box "
            f"header. payload_size={payload_size}",
            b'meta', offset)
        self.payload_size = payload_size


class ParseCancelled(Exception):
    """
    Raised by parse_async() when its cancel event is set
    """

    def __init__(self, offset: int) -> None:
        super().__init__(f'Parsing cancelled at offset {offset}')
        self.offset = offset


class ErrorPolicy:
    """
    Decides what happens to a defect. In strict mode the defect is
    raised, otherwise it is logged and the caller stops scanning the
    container that holds the defective box.
    """
    __slots__ = ['strict', 'log']

    def __init__(self, strict: bool, log: logging.Logger) -> None:
        self.strict = strict
        self.log = log

    def report(self, defect: ParseError) -> None:
        self.log.warning('%s', defect)
        if self.strict:
            raise defect
