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

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from pathlib import Path
import tempfile
from typing import Protocol
import urllib.parse
import uuid

import requests

CHUNK_SIZE: int = 65536

class HttpSession(Protocol):
    """
    The part of requests.Session that is used to download files
    """
    def get(self, url: str, headers: dict | None = None,
            stream: bool = False) -> requests.Response:
        ...


def is_url(text: str) -> bool:
    return urllib.parse.urlparse(text).scheme in {'http', 'https'}


def download(url: str, session: HttpSession | None = None) -> Path:
    """
    Downloads the given URL into a new temporary file and returns
    the path of that file. The caller is responsible for deleting it.
    """
    log = logging.getLogger('mp4index.fetch')
    if session is None:
        session = requests.Session()
    filename = Path(tempfile.gettempdir()) / f'mp4index_{uuid.uuid4().hex}.mp4'
    log.debug('GET %s', url)
    response = session.get(url, stream=True)
    response.raise_for_status()
    log.info('Writing %s to %s', url, filename)
    try:
        with filename.open('wb') as dest:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                dest.write(chunk)
    except (OSError, requests.RequestException):
        filename.unlink(missing_ok=True)
        raise
    return filename


@contextmanager
def resolve_input(path_or_url: str,
                  session: HttpSession | None = None) -> Iterator[Path]:
    """
    Yields a local Path for a filename or http(s) URL. Files downloaded
    from a URL are deleted when the context exits.
    """
    if not is_url(path_or_url):
        yield Path(path_or_url)
        return
    filename = download(path_or_url, session)
    try:
        yield filename
    finally:
        filename.unlink(missing_ok=True)
