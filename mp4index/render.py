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
import json
from typing import TextIO

from mp4index.mpeg.box_header import BoxHeader
from mp4index.utils.json_object import JsonArray

def format_tree(headers: Iterable[BoxHeader]) -> str:
    return ''.join(f'{box}\n' for box in headers)


def print_tree(headers: Iterable[BoxHeader], dest: TextIO) -> None:
    """
    Writes one line per box, indented with one tab per nesting level
    """
    for box in headers:
        dest.write(f'{box}\n')


def to_json(headers: Iterable[BoxHeader]) -> JsonArray:
    return [box.to_dict() for box in headers]


def dump_json(headers: Iterable[BoxHeader], dest: TextIO) -> None:
    json.dump(to_json(headers), dest, indent=2)
    dest.write('\n')
