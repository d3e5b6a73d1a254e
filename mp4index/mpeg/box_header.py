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

from dataclasses import dataclass

from mp4index.utils.json_object import JsonObject

@dataclass(frozen=True, slots=True, kw_only=True)
class BoxHeader:
    """
    The header of one box, plus where it was found in the file
    """
    fourcc: bytes
    size: int
    offset: int
    level: int
    header_size: int

    @property
    def tag(self) -> str:
        # latin-1 maps every byte to one character, so this never fails
        return str(self.fourcc, 'latin-1')

    @property
    def payload_offset(self) -> int:
        return self.offset + self.header_size

    @property
    def payload_size(self) -> int:
        return self.size - self.header_size

    @property
    def end(self) -> int:
        return self.offset + self.size

    def to_dict(self) -> JsonObject:
        return {
            'tag': self.tag,
            'size': self.size,
            'offset': self.offset,
            'level': self.level,
            'header_size': self.header_size,
            'payload_offset': self.payload_offset,
            'payload_size': self.payload_size,
        }

    def __str__(self) -> str:
        indent = '\t' * self.level
        return f'{indent}[{self.tag}, size: {self.size}, offset: {self.offset}]'
