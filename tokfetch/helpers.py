"""
Utility functions for the application.
"""
import logging
import os
import re
import sys
import time

VIDEO_ID_PATTERN = re.compile(r'/video/(\d+)')


def get_app_path():
    """Returns the directory the application runs from (frozen or source)."""
    if getattr(sys, 'frozen', False):
        return os.path.dirname(sys.executable)
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def format_duration(seconds):
    """Converts seconds to an M:SS label."""
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


def format_count(n):
    """Abbreviates large counts (1500 -> 1.5K, 2500000 -> 2.5M)."""
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(int(n))


def derive_video_id(page_url):
    """
    Extracts the numeric id after /video/ in a page URL.
    Falls back to the current time in milliseconds, which is not stable
    across calls for the same URL.
    """
    match = VIDEO_ID_PATTERN.search(page_url or '')
    if match:
        return match.group(1)
    logging.warning(f"No numeric video id in {page_url!r}; using a timestamp id")
    return str(int(time.time() * 1000))
