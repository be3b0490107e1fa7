"""Pytest configuration and fixtures."""
from urllib.parse import urlparse

import pytest
import requests
from requests.structures import CaseInsensitiveDict
from playwright.sync_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

import linkbox_downloader as ld


def folder_node(*children):
    """A folder node; children are (display name, node) pairs in page order."""
    return {'kind': 'folder', 'children': list(children)}


def file_node(url=None, video_src=None, control=None, download=None, fail_open=False):
    """
    A file node.

    Args:
        url: href of the download button
        video_src: src of the video element
        control: 'button', 'video' or None, what the page offers to click
        download: bytes delivered by a click-triggered download, None for no download
        fail_open: clicking the entry raises a Playwright error
    """
    return {
        'kind': 'file',
        'url': url,
        'video_src': video_src,
        'control': control,
        'download': download,
        'fail_open': fail_open,
    }


class FakeDownload:
    def __init__(self, data):
        self.data = data

    def save_as(self, path):
        with open(path, 'wb') as f:
            f.write(self.data)


class FakeDownloadInfo:
    def __init__(self, page):
        self.page = page
        self.value = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            return False
        if self.page.pending_download is None:
            raise PlaywrightTimeoutError('Timeout waiting for event "download"')
        self.value = FakeDownload(self.page.pending_download)
        self.page.pending_download = None
        return False


class FakeElement:
    def __init__(self, on_click):
        self.on_click = on_click

    def click(self, timeout=None):
        self.on_click()


class FakeContext:
    def __init__(self, cookies=None):
        self._cookies = cookies or []

    def cookies(self, urls=None):
        if urls is None:
            return self._cookies
        if isinstance(urls, str):
            urls = [urls]
        hosts = [urlparse(url).hostname or '' for url in urls]
        matched = []
        for cookie in self._cookies:
            domain = cookie.get('domain', '').lstrip('.')
            if not domain or any(host == domain or host.endswith('.' + domain) for host in hosts):
                matched.append(cookie)
        return matched


class FakePage:
    """Just enough of a Playwright page to walk a tree of folder nodes."""

    def __init__(self, root, consent=False, cookies=None):
        self.root = root
        self.history = [root]
        self.consent = consent
        self.consent_clicked = False
        self.context = FakeContext(cookies)
        self.pending_download = None
        self.opened = []
        self.clicks = []
        self.back_count = 0
        self.visited_urls = []
        # Called with the current node after every back navigation
        self.on_back = None

    @property
    def current(self):
        return self.history[-1]

    def goto(self, url, wait_until=None, timeout=None):
        self.visited_urls.append(url)
        self.history = [self.root]

    def wait_for_timeout(self, ms):
        pass

    def wait_for_selector(self, selector, timeout=None, state=None):
        node = self.current
        if selector == ld.ITEM_SELECTOR:
            if node['kind'] == 'folder' and node['children']:
                return FakeElement(lambda: None)
        elif selector == ld.FILE_VIEW_SELECTOR:
            if node['kind'] == 'file' and (node['url'] or node['video_src'] or node['control']):
                return FakeElement(lambda: None)
        raise PlaywrightTimeoutError(f'Timeout {timeout}ms exceeded waiting for "{selector}"')

    def go_back(self, wait_until=None, timeout=None):
        self.back_count += 1
        if len(self.history) > 1:
            self.history.pop()
        if self.on_back:
            self.on_back(self.current)

    def query_selector(self, selector):
        if selector == ld.CONSENT_SELECTOR and self.consent:
            return FakeElement(self._click_consent)
        return None

    def _click_consent(self):
        self.consent_clicked = True

    def expect_download(self, timeout=None):
        return FakeDownloadInfo(self)

    def evaluate(self, script, arg=None):
        node = self.current
        if script == ld.LIST_ENTRIES_JS:
            if node['kind'] != 'folder':
                return []
            return [{'name': name, 'index': i} for i, (name, _) in enumerate(node['children'])]
        if script == ld.OPEN_ENTRY_JS:
            _, _, name, occurrence = arg
            matches = [child for child_name, child in node['children'] if child_name.strip() == name]
            if occurrence >= len(matches):
                return False
            child = matches[occurrence]
            if child['kind'] == 'file' and child['fail_open']:
                raise PlaywrightError('Element is not attached to the DOM')
            self.opened.append(name)
            self.history.append(child)
            return True
        if script == ld.DIRECT_URL_JS:
            return node.get('url') or node.get('video_src')
        if script == ld.FIND_CONTROL_JS:
            return node.get('control')
        if script == ld.CLICK_CONTROL_JS:
            self.clicks.append(arg)
            if node.get('download') is not None:
                self.pending_download = node['download']
            return True
        raise AssertionError(f'Unexpected script: {script!r}')


class FakeResponse:
    """A requests.Response stand-in usable as a context manager."""

    def __init__(self, status_code=200, headers=None, body=b'', chunk_size=4096):
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        self.body = body
        self.chunk_size = chunk_size

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} Error')

    def iter_content(self, chunk_size=None):
        for start in range(0, len(self.body), self.chunk_size):
            yield self.body[start:start + self.chunk_size]


@pytest.fixture
def config(tmp_path):
    """Configuration writing under a temporary directory."""
    return ld.Config(
        output_dir=str(tmp_path / 'downloads'),
        settle_delay=0,
        startup_delay=0,
        selector_timeout=10,
        download_timeout=10,
    )


@pytest.fixture
def download_dir(tmp_path):
    path = tmp_path / 'downloads'
    path.mkdir()
    return path
