#!/usr/bin/env python3
"""
Linkbox Folder Downloader

Opens a shared Linkbox folder in a browser, walks every subfolder depth-first
and saves each file into a local tree that mirrors the remote one. Files are
fetched directly when the page exposes a URL for them, otherwise the page's
download control is clicked and the browser download is captured.
"""

import os
import sys
import re
import shutil
import argparse
import requests
from typing import List, Dict, Optional, Iterable
from urllib.parse import urlparse
from dotenv import load_dotenv
from playwright.sync_api import sync_playwright, Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError
import yt_dlp

# Exit codes
EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_ERROR = 2

# Defaults
DEFAULT_MAX_FILE_SIZE = 104857600  # 100 MB
DEFAULT_SELECTOR_TIMEOUT = 5000
DEFAULT_DOWNLOAD_TIMEOUT = 30000
DEFAULT_NAVIGATION_TIMEOUT = 60000
DEFAULT_REQUEST_TIMEOUT = 15
DEFAULT_SETTLE_DELAY = 500
DEFAULT_STARTUP_DELAY = 2000
DEFAULT_OUTPUT_DIR = 'downloads'

# Page markup
ITEM_SELECTOR = '.nfli-info'
ITEM_NAME_SELECTOR = '.nfli-info-name'
DOWNLOAD_BUTTON_SELECTOR = '.download-btn, [data-role="download"], a[download]'
VIDEO_SELECTOR = 'video'
FILE_VIEW_SELECTOR = f'{DOWNLOAD_BUTTON_SELECTOR}, {VIDEO_SELECTOR}'
CONSENT_SELECTOR = '.fc-button.fc-cta-consent'

USER_AGENT = 'Mozilla/5.0'
REQUEST_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'video/mp4,video/*;q=0.9,application/octet-stream;q=0.8,*/*;q=0.7',
    # Content-Length must describe the bytes written to disk
    'Accept-Encoding': 'identity',
}
HTML_EXTENSIONS = ('.html', '.htm')
BROWSER_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-popup-blocking',
    '--disable-dev-shm-usage',
    '--window-size=1280,800',
]

STREAMING_EXTENSIONS = ['.m3u8', '.mpd']
PART_SUFFIX = '.part'
CHUNK_SIZE = 8192

# Download outcomes, also the keys of the run statistics
RESULT_DOWNLOADED = 'downloaded'
RESULT_CLICKED = 'clicked'
RESULT_SKIPPED = 'skipped'
RESULT_FAILED = 'failed'

# Letters, digits, underscore, Arabic block, emoji block, "." and "-" survive
UNSAFE_NAME_CHARS = re.compile(r'[^\w\u0600-\u06FF\U0001F300-\U0001F9FF.\-]')

LIST_ENTRIES_JS = """
([itemSelector, nameSelector]) => {
    const results = [];
    document.querySelectorAll(itemSelector).forEach((el, index) => {
        const nameEl = el.querySelector(nameSelector);
        if (nameEl) results.push({name: nameEl.textContent.trim(), index: index});
    });
    return results;
}
"""

OPEN_ENTRY_JS = """
([itemSelector, nameSelector, name, occurrence]) => {
    let seen = 0;
    for (const el of document.querySelectorAll(itemSelector)) {
        const nameEl = el.querySelector(nameSelector);
        if (!nameEl || nameEl.textContent.trim() !== name) continue;
        if (seen === occurrence) {
            el.click();
            return true;
        }
        seen++;
    }
    return false;
}
"""

DIRECT_URL_JS = """
([buttonSelector, videoSelector]) => {
    const button = document.querySelector(buttonSelector);
    if (button && button.href) return button.href;
    const video = document.querySelector(videoSelector);
    if (!video) return null;
    if (video.currentSrc || video.src) return video.currentSrc || video.src;
    const source = video.querySelector('source[src]');
    return source ? source.src : null;
}
"""

FIND_CONTROL_JS = """
([buttonSelector, videoSelector]) => {
    if (document.querySelector(buttonSelector)) return 'button';
    if (document.querySelector(videoSelector)) return 'video';
    return null;
}
"""

CLICK_CONTROL_JS = """
(selector) => {
    const el = document.querySelector(selector);
    if (!el) return false;
    el.click();
    return true;
}
"""


class DownloadError(Exception):
    """A direct download returned something other than the expected file."""


def load_env_file() -> None:
    """Load environment variables from .env next to the script or in the working directory."""
    for env_path in (os.path.join(os.path.dirname(os.path.abspath(__file__)), '.env'),
                     os.path.join(os.getcwd(), '.env')):
        if os.path.exists(env_path):
            load_dotenv(env_path)


def get_env_int(name: str, default: int) -> int:
    """
    Get an integer setting from the environment.

    Args:
        name: Environment variable name
        default: Value used when the variable is unset or empty

    Returns:
        Integer value

    Raises:
        ValueError: If the variable is set but is not an integer
    """
    value = os.getenv(name, '').strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def get_env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name, '').strip().lower()
    if not value:
        return default
    return value in ('1', 'true', 'yes', 'on')


def get_env_list(name: str) -> List[str]:
    """Comma separated names from the environment, blanks dropped."""
    return [part.strip() for part in os.getenv(name, '').split(',') if part.strip()]


class Config:
    """Operational parameters shared by the walker and the downloader."""

    def __init__(
            self,
            max_file_size: int = DEFAULT_MAX_FILE_SIZE,
            selector_timeout: int = DEFAULT_SELECTOR_TIMEOUT,
            download_timeout: int = DEFAULT_DOWNLOAD_TIMEOUT,
            navigation_timeout: int = DEFAULT_NAVIGATION_TIMEOUT,
            request_timeout: int = DEFAULT_REQUEST_TIMEOUT,
            settle_delay: int = DEFAULT_SETTLE_DELAY,
            startup_delay: int = DEFAULT_STARTUP_DELAY,
            output_dir: str = DEFAULT_OUTPUT_DIR,
            headless: bool = False,
            skip_existing: bool = True,
            verbose: bool = False,
            folder_names: Optional[Iterable[str]] = None,
            file_names: Optional[Iterable[str]] = None,
    ) -> None:
        """
        Initialize the configuration.

        Args:
            max_file_size: Largest file in bytes that will be kept
            selector_timeout: Wait for a folder list or file view, in ms
            download_timeout: Wait for a click-triggered download to start, in ms
            navigation_timeout: Page load and back navigation timeout, in ms
            request_timeout: HTTP timeout for direct downloads, in seconds
            settle_delay: Pause after each click and back navigation, in ms
            startup_delay: Pause after the first page load, in ms
            output_dir: Root directory of the mirrored folder tree
            headless: Run the browser without a window
            skip_existing: Leave non-empty files that already exist untouched
            verbose: Print detail lines
            folder_names: Display names always treated as folders
            file_names: Display names always treated as files
        """
        self.max_file_size = max_file_size
        self.selector_timeout = selector_timeout
        self.download_timeout = download_timeout
        self.navigation_timeout = navigation_timeout
        self.request_timeout = request_timeout
        self.settle_delay = settle_delay
        self.startup_delay = startup_delay
        self.output_dir = output_dir
        self.headless = headless
        self.skip_existing = skip_existing
        self.verbose = verbose
        self.folder_names = set(folder_names or [])
        self.file_names = set(file_names or [])

    @classmethod
    def from_env(cls) -> 'Config':
        """
        Build the configuration from LINKBOX_* environment variables.

        Raises:
            ValueError: If a numeric setting is malformed
        """
        return cls(
            max_file_size=get_env_int('LINKBOX_MAX_FILE_SIZE', DEFAULT_MAX_FILE_SIZE),
            selector_timeout=get_env_int('LINKBOX_SELECTOR_TIMEOUT', DEFAULT_SELECTOR_TIMEOUT),
            download_timeout=get_env_int('LINKBOX_DOWNLOAD_TIMEOUT', DEFAULT_DOWNLOAD_TIMEOUT),
            navigation_timeout=get_env_int('LINKBOX_NAVIGATION_TIMEOUT', DEFAULT_NAVIGATION_TIMEOUT),
            request_timeout=get_env_int('LINKBOX_REQUEST_TIMEOUT', DEFAULT_REQUEST_TIMEOUT),
            settle_delay=get_env_int('LINKBOX_SETTLE_DELAY', DEFAULT_SETTLE_DELAY),
            startup_delay=get_env_int('LINKBOX_STARTUP_DELAY', DEFAULT_STARTUP_DELAY),
            output_dir=os.getenv('LINKBOX_OUTPUT_DIR') or DEFAULT_OUTPUT_DIR,
            headless=get_env_bool('LINKBOX_HEADLESS', False),
            skip_existing=get_env_bool('LINKBOX_SKIP_EXISTING', True),
            verbose=get_env_bool('LINKBOX_VERBOSE', False),
            folder_names=get_env_list('LINKBOX_FOLDER_NAMES'),
            file_names=get_env_list('LINKBOX_FILE_NAMES'),
        )


def new_stats() -> Dict[str, int]:
    return {
        'folders': 0,
        RESULT_DOWNLOADED: 0,
        RESULT_CLICKED: 0,
        RESULT_SKIPPED: 0,
        RESULT_FAILED: 0,
    }


def sanitize_filename(name: str) -> str:
    """
    Make a display name safe to use as a file or folder name.

    Every character outside the allow-list becomes "_", one for one, so a
    non-empty name never sanitizes to an empty one.

    Args:
        name: Display name as shown on the page

    Returns:
        Sanitized name
    """
    sanitized = UNSAFE_NAME_CHARS.sub('_', name)
    # "." and ".." would resolve to the current or parent directory
    if sanitized in ('.', '..'):
        sanitized = sanitized.replace('.', '_')
    return sanitized


def is_folder_name(name: str) -> bool:
    """
    Guess whether a display name belongs to a folder.

    Names without a "." are folders. Files without an extension and folders
    with a period in their name are misclassified.
    """
    return '.' not in name


def classify_entry(name: str, config: Config) -> bool:
    """Return True if the entry should be walked as a folder."""
    if name in config.folder_names:
        return True
    if name in config.file_names:
        return False
    return is_folder_name(name)


def format_size(size: int) -> str:
    return f"{size / 1024 / 1024:.2f} MB"


def is_direct_url(url: Optional[str]) -> bool:
    """Only http(s) URLs can be fetched outside the browser (not blob: or data:)."""
    return bool(url) and urlparse(url).scheme in ('http', 'https')


def is_streaming_url(url: str) -> bool:
    path = urlparse(url).path.lower()
    return any(path.endswith(ext) for ext in STREAMING_EXTENSIONS)


def get_browser_cookies(page, url: str) -> Dict[str, str]:
    """Cookies the browser would send to url, so direct requests look like the page's own."""
    try:
        cookies = page.context.cookies(url)
    except PlaywrightError:
        return {}
    return {cookie['name']: cookie['value'] for cookie in cookies}


def check_file_size(url: str, config: Config, cookies: Optional[Dict[str, str]] = None) -> Optional[int]:
    """
    Ask the server for the size of a file without downloading it.

    Args:
        url: Direct file URL
        config: Run configuration
        cookies: Cookies to send along

    Returns:
        Size in bytes, or None if the server did not say
    """
    try:
        response = requests.head(url, headers=REQUEST_HEADERS, cookies=cookies,
                                 timeout=config.request_timeout, allow_redirects=True)
    except requests.RequestException as e:
        if config.verbose:
            print(f"    Size check failed: {e}")
        return None

    size = response.headers.get('content-length')
    if not size:
        return None
    try:
        return int(size)
    except ValueError:
        return None


def fetch_file_directly(url: str, file_path: str, config: Config,
                        cookies: Optional[Dict[str, str]] = None) -> str:
    """
    Download a file over HTTP into file_path.

    The body is streamed into a .part file that is renamed once complete,
    so a skipped or failed download never leaves a partial file behind.

    Args:
        url: Direct file URL
        file_path: Destination path
        config: Run configuration
        cookies: Cookies to send along

    Returns:
        RESULT_DOWNLOADED, RESULT_SKIPPED (over the size cap) or RESULT_FAILED
    """
    if config.verbose:
        print(f"  Direct download: {url}")
    part_path = file_path + PART_SUFFIX

    try:
        os.makedirs(os.path.dirname(file_path) or '.', exist_ok=True)
        with requests.get(url, stream=True, headers=REQUEST_HEADERS, cookies=cookies,
                          timeout=config.request_timeout) as r:
            r.raise_for_status()
            content_type = r.headers.get('content-type', '').lower()
            if 'text/html' in content_type and not file_path.lower().endswith(HTML_EXTENSIONS):
                raise DownloadError("URL returned HTML instead of a file")
            # A server may still compress; iter_content then yields more bytes than announced
            encoded = r.headers.get('content-encoding', 'identity').lower() != 'identity'

            total_size = int(r.headers.get('content-length') or 0)
            if total_size > config.max_file_size:
                print(f"Warning: File too large ({format_size(total_size)}): skipped.")
                return RESULT_SKIPPED

            downloaded = 0
            with open(part_path, 'wb') as f:
                for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    downloaded += len(chunk)
                    if downloaded > config.max_file_size:
                        break
                    f.write(chunk)

            if downloaded > config.max_file_size:
                os.remove(part_path)
                print(f"Warning: File grew past {format_size(config.max_file_size)}: skipped.")
                return RESULT_SKIPPED
            if total_size and not encoded and downloaded != total_size:
                raise DownloadError(f"Incomplete download: {downloaded} of {total_size} bytes")

        os.replace(part_path, file_path)
    except (requests.RequestException, OSError, ValueError, DownloadError) as e:
        if os.path.exists(part_path):
            os.remove(part_path)
        print(f"ERROR: Direct download failed: {e}")
        return RESULT_FAILED

    print(f"  File saved: {file_path}")
    return RESULT_DOWNLOADED


def download_stream(url: str, file_path: str, config: Config) -> str:
    """Download an HLS/DASH stream with yt-dlp."""
    print("  Downloading streaming video with yt-dlp...")
    ydl_opts = {
        'outtmpl': file_path.replace('%', '%%'),
        'quiet': not config.verbose,
        'no_warnings': not config.verbose,
        'max_filesize': config.max_file_size,
        'http_headers': {'User-Agent': USER_AGENT},
    }
    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            ydl.download([url])
    except yt_dlp.utils.DownloadError as e:
        print(f"ERROR: Streaming download failed: {e}")
        return RESULT_FAILED

    size = os.path.getsize(file_path) if os.path.exists(file_path) else 0
    # max_filesize only applies when yt-dlp knows the size up front
    if size > config.max_file_size:
        os.remove(file_path)
        print(f"Warning: Stream too large ({format_size(size)}), removed.")
        return RESULT_SKIPPED
    if size > 0:
        print(f"  File saved: {file_path}")
        return RESULT_DOWNLOADED
    print("Warning: Streaming download produced no file (too large or empty stream)")
    return RESULT_FAILED


def download_direct(target: Dict, config: Config, cookies: Optional[Dict[str, str]] = None) -> str:
    url = target['direct_url']
    if is_streaming_url(url):
        return download_stream(url, target['path'], config)

    size = check_file_size(url, config, cookies)
    if size and size > config.max_file_size:
        print(f"Warning: File too large ({format_size(size)}), skipping.")
        return RESULT_SKIPPED

    return fetch_file_directly(url, target['path'], config, cookies)


def extract_direct_url(page) -> Optional[str]:
    """Return a URL for the open file that can be fetched outside the browser, if any."""
    url = page.evaluate(DIRECT_URL_JS, [DOWNLOAD_BUTTON_SELECTOR, VIDEO_SELECTOR])
    return url if is_direct_url(url) else None


def download_via_click(page, target: Dict, config: Config) -> str:
    """
    Click the download control (or the video) and save the browser download.

    Args:
        page: Playwright page showing the file
        target: Download target
        config: Run configuration

    Returns:
        RESULT_CLICKED, RESULT_SKIPPED (over the size cap) or RESULT_FAILED
    """
    control = page.evaluate(FIND_CONTROL_JS, [DOWNLOAD_BUTTON_SELECTOR, VIDEO_SELECTOR])
    if not control:
        print("Warning: No clickable button or video detected for download.")
        return RESULT_FAILED

    selector = DOWNLOAD_BUTTON_SELECTOR if control == 'button' else VIDEO_SELECTOR
    print(f"  Download click for \"{target['name']}\" ({control})")
    try:
        with page.expect_download(timeout=config.download_timeout) as download_info:
            page.evaluate(CLICK_CONTROL_JS, selector)
        download = download_info.value
        download.save_as(target['path'])
    except PlaywrightTimeoutError:
        print(f"Warning: No download started within {config.download_timeout} ms for \"{target['name']}\"")
        return RESULT_FAILED

    size = os.path.getsize(target['path'])
    if size > config.max_file_size:
        os.remove(target['path'])
        print(f"Warning: File too large ({format_size(size)}), removed.")
        return RESULT_SKIPPED

    print(f"  Download completed: {target['name']}")
    return RESULT_CLICKED


def download_file(page, name: str, folder_path: str, config: Config) -> str:
    """
    Save the file currently open in the page.

    A direct URL, when the page exposes one, is the only strategy tried: a
    failed fetch is not retried by clicking. Without a direct URL the
    download control is clicked instead.

    Args:
        page: Playwright page showing the file
        name: Display name of the file
        folder_path: Local directory to save into
        config: Run configuration

    Returns:
        One of the RESULT_* outcomes
    """
    print(f"\nDownloading: {name}")
    target = {
        'name': name,
        'path': os.path.join(folder_path, sanitize_filename(name)),
        'direct_url': None,
    }

    try:
        os.makedirs(folder_path, exist_ok=True)
        if config.skip_existing and os.path.exists(target['path']) and os.path.getsize(target['path']) > 0:
            print(f"  Skipping {name}: already present")
            return RESULT_SKIPPED

        target['direct_url'] = extract_direct_url(page)
        if target['direct_url']:
            result = download_direct(target, config, get_browser_cookies(page, target['direct_url']))
            if result == RESULT_DOWNLOADED:
                print(f"  Direct download successful for \"{name}\"")
            return result

        return download_via_click(page, target, config)
    except (PlaywrightError, OSError) as e:
        print(f"ERROR: Error downloading \"{name}\": {e}")
        return RESULT_FAILED


def wait_for_items(page, config: Config) -> bool:
    try:
        page.wait_for_selector(ITEM_SELECTOR, timeout=config.selector_timeout)
    except PlaywrightTimeoutError:
        return False
    return True


def wait_for_file_view(page, config: Config) -> bool:
    """Wait until the opened file shows a download control or a video."""
    try:
        page.wait_for_selector(FILE_VIEW_SELECTOR, state='attached', timeout=config.selector_timeout)
    except PlaywrightTimeoutError:
        if config.verbose:
            print("    No download control or video appeared")
        return False
    return True


def list_folder_entries(page, config: Config) -> List[Dict]:
    """
    Read the entries of the folder currently shown.

    Returns:
        Entries in page order: {'name', 'index', 'occurrence', 'is_folder'}
    """
    entries = []
    seen = {}
    for item in page.evaluate(LIST_ENTRIES_JS, [ITEM_SELECTOR, ITEM_NAME_SELECTOR]):
        name = (item.get('name') or '').strip()
        if not name:
            continue
        occurrence = seen.get(name, 0)
        seen[name] = occurrence + 1
        entries.append({
            'name': name,
            'index': item['index'],
            'occurrence': occurrence,
            'is_folder': classify_entry(name, config),
        })
    return entries


def open_entry(page, entry: Dict) -> bool:
    """Click an entry, found again by name since the list may have changed since it was read."""
    return bool(page.evaluate(
        OPEN_ENTRY_JS,
        [ITEM_SELECTOR, ITEM_NAME_SELECTOR, entry['name'], entry['occurrence']],
    ))


def go_back(page, config: Config) -> None:
    try:
        page.go_back(wait_until='domcontentloaded', timeout=config.navigation_timeout)
    except PlaywrightError as e:
        if config.verbose:
            print(f"    Warning: Back navigation failed: {e}")
    page.wait_for_timeout(config.settle_delay)
    if not wait_for_items(page, config):
        print("Warning: Folder list did not reappear after going back")


def process_folder(page, folder_path: str, config: Config, stats: Optional[Dict[str, int]] = None) -> int:
    """
    Walk the folder shown in the page and everything below it.

    Folders are entered and walked recursively, files are handed to
    download_file. A failing entry is reported and skipped; it never stops
    the rest of the folder.

    Args:
        page: Playwright page positioned at a folder view
        folder_path: Local directory mirroring this folder
        config: Run configuration
        stats: Run statistics, updated in place

    Returns:
        Number of entries processed
    """
    if stats is None:
        stats = new_stats()

    print(f"\nProcessing folder: {folder_path}")
    os.makedirs(folder_path, exist_ok=True)
    stats['folders'] += 1

    if not wait_for_items(page, config):
        print(f"Warning: No {ITEM_SELECTOR} items, assuming no subfolders/files.")
        return 0

    entries = list_folder_entries(page, config)
    if not entries:
        print("Warning: No items in this folder.")
        return 0

    print(f"  {len(entries)} item(s) detected.")

    processed = 0
    for entry in entries:
        opened = False
        try:
            opened = open_entry(page, entry)
            if not opened:
                print(f"Warning: \"{entry['name']}\" is no longer listed, skipping.")
                stats[RESULT_FAILED] += 1
                continue
            page.wait_for_timeout(config.settle_delay)

            if entry['is_folder']:
                process_folder(page, os.path.join(folder_path, sanitize_filename(entry['name'])), config, stats)
            else:
                wait_for_file_view(page, config)
                result = download_file(page, entry['name'], folder_path, config)
                stats[result] += 1

            # Back is attempted once per entry, even if it raises after navigating
            opened = False
            go_back(page, config)
            processed += 1
        except Exception as e:
            print(f"ERROR: Error with item \"{entry['name']}\": {e}")
            stats[RESULT_FAILED] += 1
            if opened:
                go_back(page, config)

    return processed


def dismiss_consent(page, config: Config) -> bool:
    """Click the cookie consent button once, if the page shows one."""
    try:
        button = page.query_selector(CONSENT_SELECTOR)
        if button:
            button.click(timeout=config.selector_timeout)
            print("  Consent dialog dismissed")
            return True
    except PlaywrightError as e:
        if config.verbose:
            print(f"    Could not dismiss consent dialog: {e}")
    return False


def open_target(page, url: str, config: Config) -> None:
    page.goto(url, wait_until='networkidle', timeout=config.navigation_timeout)
    print("Page loaded")
    dismiss_consent(page, config)
    page.wait_for_timeout(config.startup_delay)


def find_system_browser() -> Optional[str]:
    chrome_paths = [
        '/Applications/Google Chrome.app/Contents/MacOS/Google Chrome',
        '/Applications/Chromium.app/Contents/MacOS/Chromium',
        shutil.which('google-chrome'),
        shutil.which('chromium'),
        shutil.which('chromium-browser'),
    ]
    for path in chrome_paths:
        if path and os.path.exists(path):
            return path
    return None


def launch_browser(playwright_instance, config: Config):
    """Launch the system Chrome if there is one, else Playwright's own Chromium."""
    chrome_executable = find_system_browser()
    if chrome_executable and config.verbose:
        print(f"Using system browser: {chrome_executable}")
    try:
        return playwright_instance.chromium.launch(
            headless=config.headless,
            executable_path=chrome_executable,
            args=BROWSER_ARGS,
        )
    except PlaywrightError as e:
        if chrome_executable is None:
            raise
        print(f"Could not use system Chrome, using Playwright Chromium: {e}")
        return playwright_instance.chromium.launch(headless=config.headless, args=BROWSER_ARGS)


def print_summary(stats: Dict[str, int]) -> None:
    print(f"\nCompleted: {stats[RESULT_DOWNLOADED]} downloaded, {stats[RESULT_CLICKED]} via browser, "
          f"{stats[RESULT_SKIPPED]} skipped, {stats[RESULT_FAILED]} failed "
          f"in {stats['folders']} folder(s)")


def run(url: str, config: Config) -> Dict[str, int]:
    """
    Download everything below a shared folder URL.

    Errors while launching the browser, loading the page or walking the
    tree are reported; the browser is closed in every case.

    Args:
        url: Shared folder URL
        config: Run configuration

    Returns:
        Run statistics
    """
    print("\n" + "=" * 60)
    print("Linkbox folder downloader")
    print(f"URL: {url}")
    print("=" * 60)

    download_path = os.path.abspath(config.output_dir)
    os.makedirs(download_path, exist_ok=True)
    stats = new_stats()

    playwright_instance = sync_playwright().start()
    browser = None
    try:
        browser = launch_browser(playwright_instance, config)
        context = browser.new_context(user_agent=USER_AGENT, no_viewport=True, accept_downloads=True)
        page = context.new_page()
        open_target(page, url, config)
        process_folder(page, download_path, config, stats)
        print("\nDownloads completed!")
    except Exception as e:
        print(f"ERROR: Global error: {e}")
    finally:
        if browser:
            try:
                browser.close()
                print("Browser closed")
            except PlaywrightError as e:
                print(f"Warning: Could not close browser: {e}")
        playwright_instance.stop()

    print_summary(stats)
    return stats


def main(argv: Optional[List[str]] = None) -> None:
    load_env_file()

    parser = argparse.ArgumentParser(
        description='Download every file below a shared Linkbox folder, mirroring its folder tree.',
        epilog='Tuning: LINKBOX_* variables in the environment or a .env file.',
    )
    parser.add_argument('url', nargs='?', help='Shared folder URL')
    args = parser.parse_args(argv)

    if not args.url:
        print("Error: Please provide the URL as an argument.")
        sys.exit(EXIT_INVALID_ARGS)

    try:
        config = Config.from_env()
    except ValueError as e:
        print(f"Error: Invalid configuration: {e}")
        sys.exit(EXIT_INVALID_ARGS)

    try:
        run(args.url, config)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(EXIT_ERROR)
    sys.exit(EXIT_SUCCESS)


if __name__ == '__main__':
    main()
