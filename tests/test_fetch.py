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

from pathlib import Path
import unittest
from unittest.mock import MagicMock

from pyfakefs.fake_filesystem_unittest import TestCase
import requests

from mp4index.fetch import download, is_url, resolve_input

from .mixins.mixin import make_box

def make_session(chunks: list[bytes], status_error: Exception | None = None) -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.iter_content.return_value = iter(chunks)
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    session = MagicMock()
    session.get.return_value = response
    return session


class FetchTests(TestCase):
    def setUp(self) -> None:
        self.setUpPyfakefs()
        self.data = make_box('ftyp', b'isom') + make_box('free', bytes(40))

    def test_is_url(self) -> None:
        self.assertTrue(is_url('http://example.com/video.mp4'))
        self.assertTrue(is_url('https://example.com/video.mp4'))
        self.assertFalse(is_url('ftp://example.com/video.mp4'))
        self.assertFalse(is_url('/media/video.mp4'))
        self.assertFalse(is_url('video.mp4'))

    def test_download(self) -> None:
        url = 'https://example.com/video.mp4'
        session = make_session([self.data[:10], self.data[10:]])
        filename = download(url, session)
        try:
            self.assertTrue(filename.name.startswith('mp4index_'))
            self.assertEqual(filename.suffix, '.mp4')
            self.assertEqual(filename.read_bytes(), self.data)
        finally:
            filename.unlink()
        session.get.assert_called_once_with(url, stream=True)

    def test_download_http_error(self) -> None:
        session = make_session([], status_error=requests.HTTPError('404 Not Found'))
        with self.assertRaises(requests.HTTPError):
            download('http://example.com/missing.mp4', session)

    def test_resolve_local_file(self) -> None:
        session = make_session([])
        with resolve_input('/media/video.mp4', session) as filename:
            self.assertEqual(filename, Path('/media/video.mp4'))
        session.get.assert_not_called()

    def test_resolve_url_removes_temporary_file(self) -> None:
        session = make_session([self.data])
        with resolve_input('http://example.com/video.mp4', session) as filename:
            self.assertTrue(filename.exists())
            self.assertEqual(filename.read_bytes(), self.data)
        self.assertFalse(filename.exists())


if __name__ == "__main__":
    unittest.main()
