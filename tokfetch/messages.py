"""
User-facing strings, keyed by language code.
"""

DEFAULT_LANGUAGE = 'en'

MESSAGES = {
    'en': {
        'service_name': "TikTok Downloader API",
        'placeholder_title': "TikTok video",
        'unknown_duration': "unknown",
        'original_sound': "original sound",
        'unknown_author': "Unknown",
        'fallback_author': "User",
        'url_required': "URL is required",
        'invalid_url': "Invalid TikTok URL",
        'processing_failed': "Failed to process video",
        'all_methods_failed': "All methods failed. Please try again later.",
    },
    'ar': {
        'service_name': "TikTok Downloader API",
        'placeholder_title': "فيديو TikTok",
        'unknown_duration': "غير معروف",
        'original_sound': "صوت أصلي",
        'unknown_author': "Unknown",
        'fallback_author': "مستخدم",
        'url_required': "الرجاء إدخال رابط الفيديو",
        'invalid_url': "الرجاء إدخال رابط صحيح من TikTok",
        'processing_failed': "فشل في معالجة الفيديو",
        'all_methods_failed': "جميع الطرق فشلت. حاول مرة أخرى لاحقاً.",
    },
}


def get_message(key, language=DEFAULT_LANGUAGE):
    """Looks up a message, falling back to English for unknown languages or keys."""
    table = MESSAGES.get(language) or MESSAGES[DEFAULT_LANGUAGE]
    if key in table:
        return table[key]
    return MESSAGES[DEFAULT_LANGUAGE][key]
