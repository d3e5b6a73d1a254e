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
import json
import struct
import unittest
from unittest.mock import patch

from pyfakefs.fake_filesystem_unittest import TestCase
import requests

from mp4index.main import IsoParser
from mp4index.mpeg import ParseOptions

from .mixins.mixin import make_box
from .test_fetch import make_session

class CommandLineTests(TestCase):
    def setUp(self) -> None:
        self.setUpPyfakefs()
        self.data = (make_box('ftyp', b'isom') +
                     make_box('moov', make_box('trak', make_box('tkhd', bytes(4)))))
        self.fs.create_file('/media/movie.mp4', contents=self.data)
        self.fs.create_file(
            '/media/bad.mp4',
            contents=self.data + struct.pack('>I4s', 4, b'bad!'))

    def test_show_tree(self) -> None:
        out = io.StringIO()
        parser = IsoParser(ParseOptions(), out=out)
        self.assertEqual(parser.show('/media/movie.mp4'), IsoParser.EX_OK)
        self.assertEqual(
            out.getvalue(),
            '[ftyp, size: 12, offset: 0]\n'
            '[moov, size: 28, offset: 12]\n'
            '\t[trak, size: 20, offset: 20]\n'
            '\t\t[tkhd, size: 12, offset: 28]\n')

    def test_show_json(self) -> None:
        out = io.StringIO()
        parser = IsoParser(ParseOptions(max_depth=1), as_json=True, out=out)
        self.assertEqual(parser.show('/media/movie.mp4'), IsoParser.EX_OK)
        js = json.loads(out.getvalue())
        self.assertListEqual(['ftyp', 'moov', 'trak'], [b['tag'] for b in js])
        self.assertEqual(js[2]['level'], 1)

    def test_missing_file(self) -> None:
        out = io.StringIO()
        parser = IsoParser(ParseOptions(), out=out)
        with self.assertLogs('mp4index', level='ERROR'):
            self.assertEqual(parser.show('/media/missing.mp4'), IsoParser.EX_NOINPUT)
        self.assertEqual(out.getvalue(), '')

    def test_strict_defect(self) -> None:
        out = io.StringIO()
        parser = IsoParser(ParseOptions(strict=True), out=out)
        with self.assertLogs('mp4index', level='ERROR'):
            self.assertEqual(parser.show('/media/bad.mp4'), IsoParser.EX_DATAERR)
        self.assertEqual(out.getvalue(), '')

    def test_lenient_defect(self) -> None:
        out = io.StringIO()
        parser = IsoParser(ParseOptions(), out=out)
        self.assertEqual(parser.show('/media/bad.mp4'), IsoParser.EX_OK)
        self.assertEqual(len(out.getvalue().splitlines()), 4)

    def test_show_url(self) -> None:
        out = io.StringIO()
        session = make_session([self.data])
        parser = IsoParser(ParseOptions(), out=out, session=session)
        self.assertEqual(
            parser.show('https://example.com/movie.mp4'), IsoParser.EX_OK)
        self.assertEqual(len(out.getvalue().splitlines()), 4)

    def test_download_failure(self) -> None:
        session = make_session([])
        session.get.side_effect = requests.ConnectionError('no route to host')
        parser = IsoParser(ParseOptions(), out=io.StringIO(), session=session)
        with self.assertLogs('mp4index', level='ERROR'):
            self.assertEqual(
                parser.show('https://example.com/movie.mp4'),
                IsoParser.EX_UNAVAILABLE)

    def test_unreadable_file(self) -> None:
        out = io.StringIO()
        parser = IsoParser(ParseOptions(), out=out)
        with patch('mp4index.main.parse', side_effect=PermissionError(13, 'Permission denied')):
            with self.assertLogs('mp4index', level='ERROR'):
                self.assertEqual(parser.show('/media/movie.mp4'), IsoParser.EX_IOERR)
        self.assertEqual(out.getvalue(), '')

    def test_file_removed_while_opening(self) -> None:
        parser = IsoParser(ParseOptions(), out=io.StringIO())
        with patch('mp4index.main.parse', side_effect=FileNotFoundError(2, 'No such file')):
            with self.assertLogs('mp4index', level='ERROR'):
                self.assertEqual(parser.show('/media/movie.mp4'), IsoParser.EX_NOINPUT)

    def test_download_write_failure(self) -> None:
        session = make_session([])
        session.get.return_value.iter_content.side_effect = OSError(28, 'No space left on device')
        parser = IsoParser(ParseOptions(), out=io.StringIO(), session=session)
        with self.assertLogs('mp4index', level='ERROR'):
            self.assertEqual(
                parser.show('https://example.com/movie.mp4'), IsoParser.EX_IOERR)

    def test_main(self) -> None:
        with patch('sys.stdout', new_callable=io.StringIO) as stdout:
            rv = IsoParser.main(['--json', '--max-depth', '0', '/media/movie.mp4'])
        self.assertEqual(rv, IsoParser.EX_OK)
        js = json.loads(stdout.getvalue())
        self.assertListEqual(['ftyp', 'moov'], [b['tag'] for b in js])

    def test_main_strict(self) -> None:
        with patch('sys.stdout', new_callable=io.StringIO):
            self.assertEqual(
                IsoParser.main(['--strict', '/media/bad.mp4']), IsoParser.EX_DATAERR)
            self.assertEqual(IsoParser.main(['/media/bad.mp4']), IsoParser.EX_OK)

    def test_main_invalid_max_depth(self) -> None:
        self.assertEqual(
            IsoParser.main(['--max-depth', '-1', '/media/movie.mp4']),
            IsoParser.EX_USAGE)


if __name__ == "__main__":
    unittest.main()
