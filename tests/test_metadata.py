"""
Tests for the normalizers that build MediaResult objects.
"""
import pytest

from tokfetch.errors import ExtractionError
from tokfetch.metadata import MediaResult, normalize_scraped, normalize_structured, select_video_url

PAGE_URL = "https://www.tiktok.com/@someone/video/7123456789"


@pytest.mark.parametrize("video, expected", [
    (["a.mp4", "b.mp4"], "a.mp4"),
    ("single.mp4", "single.mp4"),
    ({'noWatermark': "clean.mp4", 'watermark': "wm.mp4"}, "clean.mp4"),
    ({'watermark': "wm.mp4"}, "wm.mp4"),
    ([], None),
    ("", None),
    ({}, None),
    (None, None),
    (42, None),
])
def test_select_video_url(video, expected):
    assert select_video_url(video) == expected


def test_normalize_structured_full_payload():
    payload = {
        'id': "999",
        'title': "Dance",
        'desc': "ignored",
        'author': {'nickname': "Some One", 'unique_id': "someone"},
        'cover': None,
        'dynamicCover': "dyn.jpg",
        'originCover': "origin.jpg",
        'duration': 65,
        'playCount': 2_500_000,
        'diggCount': 1500,
        'commentCount': 999,
        'video': ["a.mp4", "b.mp4"],
        'musicInfo': {'title': "Song", 'playUrl': "song.mp3"},
    }
    result = normalize_structured(payload, PAGE_URL)

    assert result.video_id == "999"
    assert result.title == "Dance"
    assert result.author == "Some One"
    assert result.author_username == "someone"
    assert result.thumbnail_url == "dyn.jpg"
    assert result.duration_label == "1:05"
    assert result.views_label == "2.5M"
    assert result.likes_label == "1.5K"
    assert result.comments_label == "999"
    assert result.shares_label == "0"
    assert result.video_url == "a.mp4"
    assert result.audio_url == "song.mp3"
    assert result.music_title == "Song"
    assert result.method is None


def test_normalize_structured_defaults():
    result = normalize_structured({'video': "v.mp4", 'desc': "from description"}, PAGE_URL)

    assert result.video_id == "7123456789"
    assert result.title == "from description"
    assert result.author == "Unknown"
    assert result.author_username == ""
    assert result.thumbnail_url is None
    assert result.duration_label == "unknown"
    assert result.views_label == "0"
    assert result.audio_url is None
    assert result.music_title == "original sound"


def test_normalize_structured_placeholder_title_and_music_field():
    result = normalize_structured({'video': "v.mp4", 'music': "m.mp3"}, PAGE_URL)
    assert result.title == "TikTok video"
    assert result.audio_url == "m.mp3"


def test_normalize_structured_localized_placeholders():
    result = normalize_structured({'video': "v.mp4"}, PAGE_URL, language='ar')
    assert result.title == "فيديو TikTok"
    assert result.duration_label == "غير معروف"
    assert result.music_title == "صوت أصلي"


def test_normalize_structured_without_video_fails():
    with pytest.raises(ExtractionError, match="no video URL in structured data"):
        normalize_structured({'id': "1", 'title': "No video"}, PAGE_URL)


def test_normalize_scraped():
    scraped = {
        'title': "Scraped title",
        'author': "someone",
        'thumbnail': "thumb.jpg",
        'video_url': "https://cdn.test/clean.mp4",
        'audio_url': None,
    }
    result = normalize_scraped(scraped, PAGE_URL)

    assert result.video_id == "7123456789"
    assert result.title == "Scraped title"
    assert result.author == "someone"
    assert result.author_username == "someone"
    assert result.duration_label == "unknown"
    assert (result.views_label, result.likes_label, result.comments_label, result.shares_label) == ("0", "0", "0", "0")
    assert result.video_url == "https://cdn.test/clean.mp4"


def test_normalize_scraped_placeholders():
    result = normalize_scraped({'video_url': "v.mp4"}, PAGE_URL)
    assert result.title == "TikTok video"
    assert result.author == "User"
    assert result.author_username == ""
    assert result.thumbnail_url is None


def test_normalize_scraped_without_video_fails():
    with pytest.raises(ExtractionError, match="no video URL found"):
        normalize_scraped({'title': "x", 'video_url': None}, PAGE_URL)


def test_to_dict_uses_api_field_names():
    result = MediaResult(
        video_id="1", title="t", author="a", author_username="u", video_url="v.mp4", method="primary"
    )
    data = result.to_dict()
    assert data['videoId'] == "1"
    assert data['videoUrl'] == "v.mp4"
    assert data['authorUsername'] == "u"
    assert data['durationLabel'] == "unknown"
    assert data['method'] == "primary"

    result.method = None
    assert 'method' not in result.to_dict()
