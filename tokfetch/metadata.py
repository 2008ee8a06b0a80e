"""
Canonical media result and the normalizers that build it from the raw output
of either extraction strategy.
"""
from dataclasses import dataclass
from typing import Optional

from tokfetch.errors import ExtractionError
from tokfetch.helpers import derive_video_id, format_count, format_duration
from tokfetch.messages import DEFAULT_LANGUAGE, get_message

METHOD_PRIMARY = 'primary'
METHOD_FALLBACK = 'fallback'

COUNT_FIELDS = (
    ('views_label', 'playCount'),
    ('likes_label', 'diggCount'),
    ('comments_label', 'commentCount'),
    ('shares_label', 'shareCount'),
)


@dataclass
class MediaResult:
    video_id: str
    title: str
    author: str
    author_username: str
    video_url: str
    thumbnail_url: Optional[str] = None
    duration_label: str = "unknown"
    views_label: str = "0"
    likes_label: str = "0"
    comments_label: str = "0"
    shares_label: str = "0"
    audio_url: Optional[str] = None
    music_title: str = "original sound"
    method: Optional[str] = None

    def to_dict(self):
        """Serializes to the camelCase shape returned by the HTTP API."""
        data = {
            'videoId': self.video_id,
            'title': self.title,
            'author': self.author,
            'authorUsername': self.author_username,
            'thumbnailUrl': self.thumbnail_url,
            'durationLabel': self.duration_label,
            'viewsLabel': self.views_label,
            'likesLabel': self.likes_label,
            'commentsLabel': self.comments_label,
            'sharesLabel': self.shares_label,
            'videoUrl': self.video_url,
            'audioUrl': self.audio_url,
            'musicTitle': self.music_title,
        }
        if self.method:
            data['method'] = self.method
        return data


def select_video_url(video):
    """
    Picks the download URL from a structured payload's video field.
    Lists are ordered with the unwatermarked variant first.
    """
    if isinstance(video, (list, tuple)):
        return video[0] if video else None
    if isinstance(video, str):
        return video or None
    if isinstance(video, dict):
        return video.get('noWatermark') or video.get('watermark')
    return None


def normalize_structured(payload, page_url, language=DEFAULT_LANGUAGE):
    """Maps a structured-extraction payload to a MediaResult."""
    video_url = select_video_url(payload.get('video'))
    if not video_url:
        raise ExtractionError("no video URL in structured data")

    author = payload.get('author') or {}
    music_info = payload.get('musicInfo') or {}
    duration = payload.get('duration')

    result = MediaResult(
        video_id=str(payload.get('id') or derive_video_id(page_url)),
        title=payload.get('title') or payload.get('desc') or get_message('placeholder_title', language),
        author=author.get('nickname') or author.get('unique_id') or get_message('unknown_author', language),
        author_username=author.get('unique_id') or '',
        thumbnail_url=payload.get('cover') or payload.get('dynamicCover') or payload.get('originCover'),
        duration_label=format_duration(duration) if duration else get_message('unknown_duration', language),
        video_url=video_url,
        audio_url=payload.get('music') or music_info.get('playUrl'),
        music_title=music_info.get('title') or get_message('original_sound', language),
    )
    for attr, key in COUNT_FIELDS:
        value = payload.get(key)
        if value:
            setattr(result, attr, format_count(value))
    return result


def normalize_scraped(scraped, page_url, language=DEFAULT_LANGUAGE):
    """
    Maps browser-scraped page data to a MediaResult. Counts and duration are
    not available on this path and keep their placeholders.
    """
    if not scraped.get('video_url'):
        raise ExtractionError("no video URL found")

    author = scraped.get('author') or ''
    return MediaResult(
        video_id=derive_video_id(page_url),
        title=scraped.get('title') or get_message('placeholder_title', language),
        author=author or get_message('fallback_author', language),
        author_username=author,
        thumbnail_url=scraped.get('thumbnail') or None,
        duration_label=get_message('unknown_duration', language),
        video_url=scraped['video_url'],
        audio_url=scraped.get('audio_url'),
        music_title=get_message('original_sound', language),
    )
