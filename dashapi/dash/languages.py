"""Language code helpers for audio and subtitle tracks."""

from typing import Dict, Optional

UNDEFINED_LANGUAGE = "und"
UNKNOWN_LANGUAGE_NAME = "Unknown"

LANGUAGE_NAMES: Dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "ar": "Arabic",
    "hi": "Hindi",
    UNDEFINED_LANGUAGE: UNKNOWN_LANGUAGE_NAME,
}


def normalize_language_code(language: Optional[str]) -> str:
    """
    Reduce a locale-like value to its base language code.

    Args:
        language: Locale or language tag (e.g., "en-US", "pt_BR", "es")

    Returns:
        Lower-cased base language code, or "und" when absent
    """
    if not language or not isinstance(language, str):
        return UNDEFINED_LANGUAGE

    base = language.strip().replace("_", "-").split("-")[0].lower()
    return base or UNDEFINED_LANGUAGE


def get_language_name(language: Optional[str]) -> str:
    """
    Get a display name for a language code.

    Args:
        language: Language code

    Returns:
        Display name from the table, the upper-cased code when unrecognized,
        or "Unknown" when absent
    """
    if not language:
        return UNKNOWN_LANGUAGE_NAME

    code = language.lower()
    return LANGUAGE_NAMES.get(code, code.upper())
