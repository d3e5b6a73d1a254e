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

import argparse
import logging
import sys
from typing import ClassVar, TextIO

import requests

from mp4index.fetch import HttpSession, resolve_input
from mp4index.mpeg import DEFAULT_MAX_DEPTH, ParseError, ParseOptions, parse
from mp4index.render import dump_json, print_tree

class IsoParser:
    """
    Command line tool that prints the box structure of an MP4 file
    """

    # exit codes from sysexits.h
    EX_OK: ClassVar[int] = 0
    EX_USAGE: ClassVar[int] = 64
    EX_DATAERR: ClassVar[int] = 65
    EX_NOINPUT: ClassVar[int] = 66
    EX_UNAVAILABLE: ClassVar[int] = 69
    EX_IOERR: ClassVar[int] = 74

    FORMAT: ClassVar[str] = r"%(asctime)-15s:%(levelname)s:%(filename)s@%(lineno)d: %(message)s"

    def __init__(self, options: ParseOptions, as_json: bool = False,
                 out: TextIO | None = None,
                 session: HttpSession | None = None) -> None:
        self.options = options
        self.as_json = as_json
        self.out = sys.stdout if out is None else out
        self.session = session
        self.log = logging.getLogger('mp4index')

    def show(self, path_or_url: str) -> int:
        try:
            with resolve_input(path_or_url, self.session) as filename:
                if not filename.is_file():
                    self.log.error('File not found: %s', filename)
                    return self.EX_NOINPUT
                boxes = parse(filename, self.options)
        except requests.RequestException as err:
            self.log.error('Failed to download %s: %s', path_or_url, err)
            return self.EX_UNAVAILABLE
        except FileNotFoundError as err:
            self.log.error('File not found: %s', err)
            return self.EX_NOINPUT
        except OSError as err:
            self.log.error('Failed to read %s: %s', path_or_url, err)
            return self.EX_IOERR
        except ParseError as err:
            self.log.error('%s', err)
            return self.EX_DATAERR
        if self.as_json:
            dump_json(boxes, self.out)
        else:
            print_tree(boxes, self.out)
        return self.EX_OK

    @staticmethod
    def create_argument_parser() -> argparse.ArgumentParser:
        ap = argparse.ArgumentParser(
            prog='mp4index', description='MP4 box header parser',
            epilog='examples: "mp4index sample.mp4", '
            '"mp4index https://example.com/video.mp4 --json"')
        ap.add_argument('-d', '--debug', action="store_true")
        ap.add_argument('--json', action="store_true",
                        help='Output box headers as JSON')
        ap.add_argument('--strict', action="store_true",
                        help='Fail on malformed input instead of stopping early')
        ap.add_argument('--max-depth', type=int, default=DEFAULT_MAX_DEPTH,
                        dest='max_depth', help='Maximum nesting depth to parse')
        ap.add_argument('mp4file', help='Filename or http(s) URL of MP4 file')
        return ap

    @classmethod
    def main(cls, argv: list[str] | None = None) -> int:
        args = cls.create_argument_parser().parse_args(argv)
        logging.basicConfig(format=cls.FORMAT)
        if args.debug:
            logging.getLogger().setLevel(logging.DEBUG)
        try:
            options = ParseOptions(strict=args.strict, max_depth=args.max_depth)
        except ValueError as err:
            logging.error('%s', err)
            return cls.EX_USAGE
        return cls(options, as_json=args.json).show(args.mp4file)
