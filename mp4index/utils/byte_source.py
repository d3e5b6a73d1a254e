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

from abc import ABC, abstractmethod
import asyncio
import inspect
import logging
import os
from typing import Any, BinaryIO, TypeAlias

from .buffered_reader import BufferedReader

class ByteSource(ABC):
    """
    A randomly addressable range of bytes, starting at offset zero
    """

    size: int

    @abstractmethod
    def read_at(self, offset: int, size: int) -> bytes:
        """
        Reads up to "size" bytes starting at "offset". Returns fewer bytes
        if the end of the source is reached.
        """

    async def read_at_async(self, offset: int, size: int) -> bytes:
        # give other tasks a chance to run before every read
        await asyncio.sleep(0)
        return self.read_at(offset, size)

    def close(self) -> None:
        pass

    def __enter__(self) -> "ByteSource":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class MemoryByteSource(ByteSource):
    __slots__ = ['data', 'size']

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self.data = memoryview(data).cast('B')
        self.size = len(self.data)

    def read_at(self, offset: int, size: int) -> bytes:
        if offset < 0 or size <= 0:
            return b''
        return self.data[offset:offset + size].tobytes()

    def __repr__(self) -> str:
        return f'MemoryByteSource(size={self.size})'


class FileByteSource(ByteSource):
    """
    ByteSource that reads from a seekable file. The file is only closed
    by close() if close_file is True.
    """
    __slots__ = ['src', 'reader', 'size', 'close_file', 'name']

    def __init__(self, src: BinaryIO, close_file: bool = False,
                 buffersize: int = 16384) -> None:
        self.src = src
        self.close_file = close_file
        self.reader = BufferedReader(src, buffersize=buffersize)
        self.size = self.reader.size
        self.name = getattr(src, 'name', None)

    def read_at(self, offset: int, size: int) -> bytes:
        return self.reader.read_at(offset, size)

    async def read_at_async(self, offset: int, size: int) -> bytes:
        return await asyncio.to_thread(self.reader.read_at, offset, size)

    def close(self) -> None:
        self.reader.clear()
        if self.close_file:
            self.src.close()

    def __repr__(self) -> str:
        return f'FileByteSource(name={self.name!r}, size={self.size})'


SourceType: TypeAlias = ByteSource | str | os.PathLike | bytes | bytearray | memoryview | BinaryIO

def is_seekable(src: Any) -> bool:
    try:
        return bool(src.seekable())
    except (AttributeError, OSError, ValueError):
        return False


def open_byte_source(src: SourceType) -> ByteSource:
    """
    Creates a ByteSource for the given path, buffer or file object.
    Non-seekable file objects are read into memory.
    """
    log = logging.getLogger('mp4index.source')
    if src is None:
        raise ValueError('A source of bytes is required')
    if isinstance(src, ByteSource):
        return src
    if isinstance(src, (bytes, bytearray, memoryview)):
        return MemoryByteSource(src)
    if isinstance(src, (str, os.PathLike)):
        log.debug('Open %s', src)
        return FileByteSource(open(src, mode='rb'), close_file=True)
    if is_seekable(src):
        return FileByteSource(src)
    log.debug('Reading non-seekable source %s into memory', src)
    return MemoryByteSource(src.read())


async def open_byte_source_async(src: Any) -> ByteSource:
    """
    As open_byte_source(), but also accepts readers with an async read()
    method, such as asyncio.StreamReader. Opening files, probing their
    size and reading non-seekable sources into memory are done in a
    worker thread, so that the event loop is not blocked.
    """
    if isinstance(src, ByteSource):
        return src
    if isinstance(src, (bytes, bytearray, memoryview)):
        return MemoryByteSource(src)
    read = getattr(src, 'read', None)
    if read is not None and inspect.iscoroutinefunction(read):
        data: bytes = await read()
        return MemoryByteSource(data)
    return await asyncio.to_thread(open_byte_source, src)
