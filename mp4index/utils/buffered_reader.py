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

import io
import itertools
from typing import BinaryIO

class Buffer:
    __slots__ = ['pos', 'data', 'size', 'last_used']
    pos: int
    size: int
    data: memoryview
    last_used: int

    def __init__(self, pos: int, data: bytes, last_used: int) -> None:
        self.pos = pos
        self.data = memoryview(data)
        self.size = len(data)
        self.last_used = last_used

    @property
    def end(self) -> int:
        return self.pos + self.size


class BufferedReader:
    """
    Random access reader that keeps a small number of fixed size blocks
    of a seekable file in memory. Box headers are small and clustered,
    so most header reads are satisfied from an already loaded block.
    """
    __slots__ = ['reader', 'buffers', 'buffersize', 'size', 'max_buffers',
                 '_clock']
    buffersize: int
    max_buffers: int
    reader: BinaryIO
    size: int

    def __init__(self, reader: BinaryIO, buffersize: int = 16384,
                 max_buffers: int = 30) -> None:
        self.reader = reader
        self.buffers: dict[int, Buffer] = {}
        self.buffersize = buffersize
        self.max_buffers = max_buffers
        self._clock = itertools.count()
        reader.seek(0, io.SEEK_END)
        self.size = reader.tell()

    def read_at(self, offset: int, size: int) -> bytes:
        if offset < 0 or size <= 0:
            return b''
        size = min(size, self.size - offset)
        if size <= 0:
            return b''
        bucket: int = (offset // self.buffersize) * self.buffersize
        start: int = offset - bucket
        rv = io.BytesIO()
        todo: int = size
        while todo > 0:
            buf = self.cache(bucket)
            chunk = buf.data[start:start + todo]
            if not chunk:
                # file was truncated since its size was read
                break
            rv.write(chunk)
            todo -= len(chunk)
            bucket += self.buffersize
            start = 0
        return rv.getvalue()

    def cache(self, bucket: int) -> Buffer:
        try:
            buf = self.buffers[bucket]
            buf.last_used = next(self._clock)
            return buf
        except KeyError:
            pass
        if len(self.buffers) >= self.max_buffers:
            oldest = min(self.buffers.values(), key=lambda b: b.last_used)
            del self.buffers[oldest.pos]
        self.reader.seek(bucket, io.SEEK_SET)
        buf = Buffer(bucket, self.read_block(), next(self._clock))
        self.buffers[bucket] = buf
        return buf

    def read_block(self) -> bytes:
        """
        Reads one block from the current position. A raw stream may return
        fewer bytes than requested, so keep reading until the block is full
        or the end of the file is reached.
        """
        block = bytearray()
        while len(block) < self.buffersize:
            data = self.reader.read(self.buffersize - len(block))
            if not data:
                break
            block += data
        return bytes(block)

    def clear(self) -> None:
        self.buffers.clear()
