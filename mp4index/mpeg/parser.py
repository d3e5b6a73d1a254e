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

import asyncio
from collections.abc import Generator
from dataclasses import dataclass
from typing import Any

from mp4index.utils.byte_source import (
    ByteSource, SourceType, open_byte_source, open_byte_source_async
)

from .bounds import check_bounds
from .box_header import BoxHeader
from .container_policy import META_TAG, child_bounds, should_descend
from .errors import ErrorPolicy, MalformedMetaBox, ParseCancelled, ParseError, TruncatedHeader
from .header_codec import (
    HEADER_SIZE, decode_header, decode_large_size, large_size_available
)
from .options import ParseOptions

@dataclass(frozen=True, slots=True)
class ReadRequest:
    offset: int
    size: int
    # True for the first read of each box
    boundary: bool = False


@dataclass(slots=True)
class ScanFrame:
    """
    Progress through one container's byte range
    """
    offset: int
    end: int
    level: int


ScanGenerator = Generator[ReadRequest, bytes, None]

class BoxScanner:
    """
    Walks the boxes of a byte range, descending into container boxes.

    The scan is a generator that yields a ReadRequest each time it needs
    bytes from the source and expects those bytes to be sent back. This
    allows the same traversal to be driven synchronously or from a
    coroutine. Nested containers are tracked using a stack of ScanFrame
    objects, so the nesting depth is not limited by the Python stack.
    """

    options: ParseOptions
    policy: ErrorPolicy
    headers: list[BoxHeader]

    def __init__(self, options: ParseOptions) -> None:
        self.options = options
        self.policy = ErrorPolicy(options.strict, options.log)
        self.headers = []

    def scan(self, start: int, end: int, level: int) -> ScanGenerator:
        log = self.options.log
        log.debug('Scan level=%d start=%d end=%d (%d)', level, start, end, end - start)
        stack: list[ScanFrame] = [ScanFrame(start, end, level)]
        while stack:
            frame = stack[-1]
            offset = frame.offset
            if offset + HEADER_SIZE > frame.end:
                stack.pop()
                continue
            data = yield ReadRequest(offset, HEADER_SIZE, boundary=True)
            if len(data) < HEADER_SIZE:
                log.debug('Failed to read box header. pos=%d', offset)
                stack.pop()
                continue
            raw = decode_header(data, offset, frame.end)
            if raw.extended:
                data = yield ReadRequest(
                    offset + HEADER_SIZE, large_size_available(raw, frame.end))
                try:
                    raw = decode_large_size(raw, data)
                except TruncatedHeader as err:
                    self.policy.report(err)
                    stack.pop()
                    continue
            defect = check_bounds(raw.fourcc, raw.header_size, raw.size, offset, frame.end)
            if defect is not None:
                self.policy.report(defect)
                stack.pop()
                continue
            box = BoxHeader(fourcc=raw.fourcc, size=raw.size, offset=offset,
                            level=frame.level, header_size=raw.header_size)
            log.debug('found box "%s" level=%d pos=%d size=%d',
                      box.tag, frame.level, offset, box.size)
            self.headers.append(box)
            child_start, child_end = box.payload_offset, box.end
            if box.fourcc == META_TAG:
                try:
                    child_start, child_end = child_bounds(box)
                except MalformedMetaBox as err:
                    self.policy.report(err)
                    stack.pop()
                    continue
            # next sibling, once the children of this box have been scanned
            frame.offset = box.end
            if should_descend(box.fourcc, box.payload_size, frame.level, self.options):
                log.debug('Scan level=%d start=%d end=%d (%d)', frame.level + 1,
                          child_start, child_end, child_end - child_start)
                stack.append(ScanFrame(child_start, child_end, frame.level + 1))

    def run(self, src: ByteSource) -> list[BoxHeader]:
        gen = self.scan(0, src.size, 0)
        try:
            request = next(gen)
            while True:
                request = gen.send(src.read_at(request.offset, request.size))
        except StopIteration:
            pass
        except ParseError as err:
            err.headers = list(self.headers)
            raise
        return self.headers

    async def run_async(self, src: ByteSource,
                        cancel: asyncio.Event | None = None) -> list[BoxHeader]:
        gen = self.scan(0, src.size, 0)
        try:
            request = next(gen)
            while True:
                if request.boundary and cancel is not None and cancel.is_set():
                    gen.close()
                    raise ParseCancelled(request.offset)
                data = await src.read_at_async(request.offset, request.size)
                request = gen.send(data)
        except StopIteration:
            pass
        except ParseError as err:
            err.headers = list(self.headers)
            raise
        return self.headers


def parse(source: SourceType, options: ParseOptions | None = None) -> list[BoxHeader]:
    """
    Parses an MP4 / ISO BMFF file and returns its box headers in
    depth-first order.
    :source: a filename, a buffer, a file object or a ByteSource
    :options: the ParseOptions to use, or None for the defaults
    """
    if options is None:
        options = ParseOptions()
    src = open_byte_source(source)
    try:
        return BoxScanner(options).run(src)
    finally:
        if src is not source:
            src.close()


async def parse_async(source: Any, options: ParseOptions | None = None,
                      cancel: asyncio.Event | None = None) -> list[BoxHeader]:
    """
    Coroutine version of parse(). If "cancel" is set while parsing,
    ParseCancelled is raised at the start of the next box.
    """
    if options is None:
        options = ParseOptions()
    src = await open_byte_source_async(source)
    try:
        return await BoxScanner(options).run_async(src, cancel)
    finally:
        if src is not source:
            src.close()
