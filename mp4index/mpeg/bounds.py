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

from .errors import (
    ContainerOverrun, ParseError, UndersizedBox, UnrepresentableSize
)

# largest byte length that fits in a signed 64 bit file offset
MAX_BOX_SIZE: int = (1 << 63) - 1

def check_bounds(fourcc: bytes, header_size: int, size: int, offset: int,
                 container_end: int) -> ParseError | None:
    """
    Checks that a box fits inside its container.
    Returns the defect that was found, or None if the box is valid.
    """
    if size < header_size:
        return UndersizedBox(fourcc, offset, size, header_size)
    if size > MAX_BOX_SIZE:
        return UnrepresentableSize(fourcc, offset, size)
    if offset + size > container_end:
        return ContainerOverrun(fourcc, offset, size, container_end)
    return None
