import copy
import json
import os
from tokfetch.helpers import get_app_path

SETTINGS_FILE = os.path.join(get_app_path(), "settings.json")

DEFAULT_SETTINGS = {
    'server': {
        'host': "0.0.0.0",
        'port': 3000,
        'cors_origins': ["*"]
    },
    'general': {
        'language': "en",
        'domain_markers': ["tiktok.com", "vm.tiktok.com"],
        'log_file': "debug_log.txt",
        'log_level': "INFO"
    },
    'primary': {
        'versions': ["v1", "v2", "v3"],
        # yt-dlp TikTok extractor_args per version hint
        'version_profiles': {
            'v1': {},
            'v2': {'tiktok': {'api_hostname': ["api22-normal-c-alisg.tiktokv.com"]}},
            'v3': {'tiktok': {'api_hostname': ["api16-normal-c-useast1a.tiktokv.com"]}}
        },
        'socket_timeout': 15
    },
    'fallback': {
        'headless': True,
        'user_agent': "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        'viewport': {'width': 1920, 'height': 1080},
        'navigation_timeout_ms': 30000,
        'media_timeout_ms': 10000,
        'launch_args': [
            "--no-sandbox",
            "--disable-setuid-sandbox",
            "--disable-dev-shm-usage",
            "--disable-accelerated-2d-canvas",
            "--disable-gpu"
        ],
        'selectors': {
            'title': [
                '[data-e2e="browse-video-desc"]',
                '.tiktok-j2a19r-SpanText',
                'h1',
                '.video-meta-title'
            ],
            'author': [
                '[data-e2e="browse-username"]',
                '.author-uniqueId',
                '.tiktok-author'
            ],
            'thumbnail': [
                'img[alt*="video"]',
                '.tiktok-video-thumbnail img',
                'video + img'
            ]
        }
    }
}

ENV_OVERRIDES = (
    ('HOST', 'server', 'host', str),
    ('PORT', 'server', 'port', int),
    ('TOKFETCH_LANGUAGE', 'general', 'language', str),
)


def get_settings_file():
    return os.environ.get('TOKFETCH_SETTINGS', SETTINGS_FILE)


def apply_env_overrides(settings, environ=None):
    """Overrides individual settings from environment variables."""
    environ = os.environ if environ is None else environ
    for env_name, section, key, cast in ENV_OVERRIDES:
        value = environ.get(env_name)
        if value:
            try:
                settings[section][key] = cast(value)
            except ValueError:
                continue
    return settings


def merge_settings(base, overrides):
    """Recursively merges overrides into base; nested dicts are merged, other values replaced."""
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_settings(base[key], value)
        else:
            base[key] = value
    return base


def load_settings(path=None):
    """Loads settings from the JSON file, falling back to defaults."""
    path = path or get_settings_file()
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    if not os.path.exists(path):
        return apply_env_overrides(settings)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            loaded_settings = json.load(f)
        if isinstance(loaded_settings, dict):
            merge_settings(settings, loaded_settings)
    except (json.JSONDecodeError, IOError):
        settings = copy.deepcopy(DEFAULT_SETTINGS)
    return apply_env_overrides(settings)

