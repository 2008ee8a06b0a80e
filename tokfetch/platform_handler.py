"""
Extraction strategies for TikTok page links.
The primary strategy reads structured post data through yt-dlp; the fallback
drives a headless Chromium through Playwright and scrapes the page.
"""
import functools
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from urllib.parse import urlparse

import yt_dlp
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from tokfetch.errors import ExtractionError, ValidationError
from tokfetch.metadata import METHOD_FALLBACK, METHOD_PRIMARY, normalize_scraped, normalize_structured

VIDEO_EXTENSIONS = ('.mp4', '.webm', '.mov', '.m4v')
AUDIO_EXTENSIONS = ('.mp3', '.m4a', '.aac', '.ogg', '.wav')

MEDIA_SRC_SCRIPT = """
    () => {
        const video = document.querySelector('video');
        return video ? (video.currentSrc || video.src) : null;
    }
"""


def validate_page_url(page_url, domain_markers, language='en'):
    """
    Rejects empty links and links that are not on a supported domain.
    """
    if not page_url or not page_url.strip():
        raise ValidationError('missing', language)
    if not any(marker in page_url for marker in domain_markers):
        raise ValidationError('invalid', language)


class BaseExtractor(ABC):
    method = None
    label = None

    @abstractmethod
    def extract(self, page_url):
        """Returns a MediaResult or raises ExtractionError."""


# --- Primary: structured data via yt-dlp ---

def _is_watermarked(fmt):
    label = f"{fmt.get('format_id') or ''} {fmt.get('format_note') or ''}".lower()
    return 'watermark' in label and 'no watermark' not in label


def payload_from_info(info):
    """
    Reshapes a yt-dlp info dict into the structured post payload.
    Video URLs are ordered unwatermarked, progressive and highest quality first.
    """
    thumbnails = {
        thumb.get('id'): thumb['url']
        for thumb in info.get('thumbnails') or []
        if thumb.get('url')
    }
    formats = [fmt for fmt in info.get('formats') or [] if fmt.get('url')]

    video_formats = [fmt for fmt in formats if fmt.get('vcodec') != 'none']
    video_formats.sort(key=lambda fmt: (
        _is_watermarked(fmt),
        fmt.get('protocol', 'https') not in ('http', 'https'),
        -(fmt.get('height') or 0),
        -(fmt.get('tbr') or 0),
    ))
    video_urls = [fmt['url'] for fmt in video_formats]
    if not video_urls and info.get('url'):
        video_urls = [info['url']]

    audio_url = next(
        (fmt['url'] for fmt in formats if fmt.get('vcodec') == 'none' and fmt.get('acodec') != 'none'),
        None
    )

    return {
        'id': info.get('id'),
        'title': info.get('title'),
        'desc': info.get('description'),
        'author': {
            'nickname': info.get('channel') or info.get('creator'),
            'unique_id': info.get('uploader'),
        },
        'cover': thumbnails.get('cover') or info.get('thumbnail'),
        'dynamicCover': thumbnails.get('dynamicCover'),
        'originCover': thumbnails.get('originCover'),
        'duration': info.get('duration'),
        'playCount': info.get('view_count'),
        'diggCount': info.get('like_count'),
        'commentCount': info.get('comment_count'),
        'shareCount': info.get('repost_count'),
        'video': video_urls,
        'music': audio_url,
        'musicInfo': {
            'title': info.get('track'),
            'playUrl': None,
        },
    }


def fetch_with_ytdlp(url, version, settings):
    """
    Runs yt-dlp for one version hint.
    Returns {'status': 'success', 'result': payload} or {'status': 'error', 'message': ...}.
    """
    primary = settings['primary']
    profiles = primary.get('version_profiles', {})
    if version not in profiles:
        raise ExtractionError(f"unknown version hint: {version}")

    ydl_opts = {
        'quiet': True,
        'no_warnings': True,
        'skip_download': True,
        'noplaylist': True,
        'socket_timeout': primary.get('socket_timeout', 15),
        'extractor_args': profiles[version],
    }
    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            info = ydl.extract_info(url, download=False)
    except yt_dlp.utils.DownloadError as e:
        return {'status': 'error', 'message': str(e)}

    if not info:
        return {'status': 'error', 'message': "yt-dlp returned no data"}
    return {'status': 'success', 'result': payload_from_info(info)}


class StructuredExtractor(BaseExtractor):
    """
    Tries each version hint in order and keeps the first successful payload.
    A failing hint never aborts the loop.
    """
    method = METHOD_PRIMARY
    label = "yt-dlp structured data"

    def __init__(self, settings, fetch=None):
        self.versions = list(settings['primary']['versions'])
        self.language = settings['general']['language']
        self.fetch = fetch or functools.partial(fetch_with_ytdlp, settings=settings)

    def extract(self, page_url):
        payload = None
        for version in self.versions:
            logging.info(f"  Trying structured extraction version: {version}")
            try:
                response = self.fetch(page_url, version)
            except Exception as e:
                logging.warning(f"  Version {version} failed: {e}")
                continue

            if response and response.get('status') == 'success' and response.get('result') is not None:
                payload = response['result']
                break
            message = (response or {}).get('message', "no result")
            logging.warning(f"  Version {version} returned no data: {message}")

        if payload is None:
            raise ExtractionError("no structured data available")
        return normalize_structured(payload, page_url, self.language)


# --- Fallback: headless browser scraping via Playwright ---

def _path_endswith(url, extensions):
    return urlparse(url).path.lower().endswith(extensions)


class MediaCandidates:
    """
    Media URLs seen in network responses, in first-seen order, each kept once.
    """

    def __init__(self):
        self.video = []
        self.audio = []

    def observe(self, url, content_type=''):
        content_type = (content_type or '').lower()
        if 'video' in content_type or _path_endswith(url, VIDEO_EXTENSIONS):
            if url not in self.video:
                self.video.append(url)
        if 'audio' in content_type or _path_endswith(url, AUDIO_EXTENSIONS):
            if url not in self.audio:
                self.audio.append(url)

    def handle_response(self, response):
        """Playwright 'response' event listener."""
        self.observe(response.url, response.headers.get('content-type', ''))


def reconcile(media_src, candidates):
    """
    Picks the final (video_url, audio_url).
    The page's own media source wins; otherwise the first captured video that
    is not watermarked, then any captured video.
    """
    video_url = None
    if media_src and media_src.startswith(('http://', 'https://')):
        video_url = media_src
    else:
        video_url = next((u for u in candidates.video if 'watermark' not in u), None)
        if video_url is None and candidates.video:
            video_url = candidates.video[0]
    audio_url = candidates.audio[0] if candidates.audio else None
    return video_url, audio_url


def _release(label, close):
    try:
        close()
    except Exception as e:
        logging.warning(f"  {label} teardown failed: {e}")


@contextmanager
def browser_session(settings):
    """
    Launches an isolated headless browser and yields a configured page.
    The browser and driver are always shut down, and a failing shutdown
    never replaces an error raised inside the block.
    """
    fallback = settings['fallback']
    playwright = sync_playwright().start()
    browser = None
    try:
        logging.info("  Launching browser...")
        browser = playwright.chromium.launch(
            headless=fallback.get('headless', True),
            args=fallback.get('launch_args', [])
        )
        context = browser.new_context(
            user_agent=fallback['user_agent'],
            viewport=fallback['viewport']
        )
        yield context.new_page()
    finally:
        if browser is not None:
            _release("Browser", browser.close)
        _release("Playwright", playwright.stop)


def first_match(page, selectors, attribute=None):
    """Returns the first non-empty text (or attribute) among the selectors, else ''."""
    for selector in selectors:
        element = page.query_selector(selector)
        if element is None:
            continue
        value = element.get_attribute(attribute) if attribute else element.text_content()
        if value and value.strip():
            return value.strip()
    return ''


def scrape_page(page, selectors):
    author = first_match(page, selectors.get('author', []))
    return {
        'title': first_match(page, selectors.get('title', [])),
        'author': author.lstrip('@'),
        'thumbnail': first_match(page, selectors.get('thumbnail', []), attribute='src'),
        'media_src': page.evaluate(MEDIA_SRC_SCRIPT),
    }


class BrowserExtractor(BaseExtractor):
    """
    Opens the page in a headless browser, captures media responses and scrapes
    the visible fields. Counts and duration are not available on this path.
    """
    method = METHOD_FALLBACK
    label = "Playwright scraping"

    def __init__(self, settings, session_factory=browser_session):
        self.settings = settings
        self.language = settings['general']['language']
        self.session_factory = session_factory

    def extract(self, page_url):
        fallback = self.settings['fallback']
        candidates = MediaCandidates()

        try:
            with self.session_factory(self.settings) as page:
                page.on("response", candidates.handle_response)

                logging.info(f"  Navigating to {page_url}")
                try:
                    page.goto(page_url, wait_until="networkidle", timeout=fallback['navigation_timeout_ms'])
                except PlaywrightTimeoutError as e:
                    raise ExtractionError("navigation timeout") from e

                try:
                    page.wait_for_selector("video", timeout=fallback['media_timeout_ms'])
                except PlaywrightTimeoutError as e:
                    raise ExtractionError("no media element") from e

                logging.info("  Extracting video data...")
                scraped = scrape_page(page, fallback['selectors'])
        except PlaywrightError as e:
            raise ExtractionError(f"browser session failed: {e}") from e

        video_url, audio_url = reconcile(scraped.pop('media_src'), candidates)
        logging.info(f"  Captured {len(candidates.video)} video and {len(candidates.audio)} audio responses")
        scraped['video_url'] = video_url
        scraped['audio_url'] = audio_url
        return normalize_scraped(scraped, page_url, self.language)


def default_extractors(settings):
    """Strategies in the order they are tried."""
    return [StructuredExtractor(settings), BrowserExtractor(settings)]
