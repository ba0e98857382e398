"""Language code conversion and label utilities."""

from types import MappingProxyType
from typing import Optional

# ISO 639-1 (2-letter) to ISO 639-2/B (3-letter) mapping
# Users tend to type ISO 639-1, ffprobe reports ISO 639-2
ISO_639_1_TO_639_2 = MappingProxyType({
    "en": "eng",  # English
    "es": "spa",  # Spanish
    "fr": "fre",  # French
    "de": "ger",  # German
    "it": "ita",  # Italian
    "pt": "por",  # Portuguese
    "ru": "rus",  # Russian
    "ja": "jpn",  # Japanese
    "ko": "kor",  # Korean
    "zh": "chi",  # Chinese
    "ar": "ara",  # Arabic
    "hi": "hin",  # Hindi
    "nl": "dut",  # Dutch
    "pl": "pol",  # Polish
    "tr": "tur",  # Turkish
    "sv": "swe",  # Swedish
    "da": "dan",  # Danish
    "no": "nor",  # Norwegian
    "fi": "fin",  # Finnish
    "cs": "cze",  # Czech
    "hu": "hun",  # Hungarian
    "ro": "rum",  # Romanian
    "th": "tha",  # Thai
    "vi": "vie",  # Vietnamese
    "id": "ind",  # Indonesian
    "he": "heb",  # Hebrew
    "el": "gre",  # Greek
    "uk": "ukr",  # Ukrainian
    "ca": "cat",  # Catalan
    "sk": "slo",  # Slovak
    "hr": "hrv",  # Croatian
    "sr": "srp",  # Serbian
    "bg": "bul",  # Bulgarian
    "lt": "lit",  # Lithuanian
    "lv": "lav",  # Latvian
    "et": "est",  # Estonian
    "sl": "slv",  # Slovenian
    "fa": "per",  # Persian
    "ms": "may",  # Malay
    "ta": "tam",  # Tamil
    "te": "tel",  # Telugu
    "bn": "ben",  # Bengali
    "mr": "mar",  # Marathi
})

# ISO 639-2/T codes that differ from their /B counterpart
ISO_639_2_T_TO_B = MappingProxyType({
    "fra": "fre",
    "deu": "ger",
    "zho": "chi",
    "nld": "dut",
    "ces": "cze",
    "ron": "rum",
    "ell": "gre",
    "slk": "slo",
    "fas": "per",
    "msa": "may",
})

# ISO 639-2/B code to English name
LANGUAGE_NAMES = MappingProxyType({
    "eng": "English",
    "spa": "Spanish",
    "fre": "French",
    "ger": "German",
    "ita": "Italian",
    "por": "Portuguese",
    "rus": "Russian",
    "jpn": "Japanese",
    "kor": "Korean",
    "chi": "Chinese",
    "ara": "Arabic",
    "hin": "Hindi",
    "dut": "Dutch",
    "pol": "Polish",
    "tur": "Turkish",
    "swe": "Swedish",
    "dan": "Danish",
    "nor": "Norwegian",
    "fin": "Finnish",
    "cze": "Czech",
    "hun": "Hungarian",
    "rum": "Romanian",
    "tha": "Thai",
    "vie": "Vietnamese",
    "ind": "Indonesian",
    "heb": "Hebrew",
    "gre": "Greek",
    "ukr": "Ukrainian",
    "cat": "Catalan",
    "slo": "Slovak",
    "hrv": "Croatian",
    "srp": "Serbian",
    "bul": "Bulgarian",
    "lit": "Lithuanian",
    "lav": "Latvian",
    "est": "Estonian",
    "slv": "Slovenian",
    "per": "Persian",
    "may": "Malay",
    "tam": "Tamil",
    "tel": "Telugu",
    "ben": "Bengali",
    "mar": "Marathi",
    "und": "Undetermined",
    "mul": "Multiple languages",
    "zxx": "No linguistic content",
})

# ffprobe language tag to the ISO 639-1 code CyTube expects
FFMPEG_TO_CYTUBE = MappingProxyType(
    {b: one for one, b in ISO_639_1_TO_639_2.items()}
)


def _to_639_2_b(code: str) -> str:
    """Fold ISO 639-2/T variants onto their /B form."""
    return ISO_639_2_T_TO_B.get(code, code)


def convert_iso639_1_to_2(code: str) -> str:
    """Convert ISO 639-1 (2-letter) code to ISO 639-2/B (3-letter).

    Args:
        code: 2-letter language code (e.g., 'en')

    Returns:
        3-letter language code (e.g., 'eng'), or original if not found
    """
    if not code:
        return code

    # If already 3 letters, return as-is
    if len(code) == 3:
        return code.lower()

    code_lower = code.lower()
    return ISO_639_1_TO_639_2.get(code_lower, code_lower)


def normalize_language_code(code: Optional[str]) -> Optional[str]:
    """Normalize a user-supplied language code to what ffprobe reports.

    Handles both 2-letter and 3-letter codes.
    """
    if not code:
        return None

    return convert_iso639_1_to_2(code)


def language_name(code: str) -> str:
    """Human-readable name for a language code, or the code itself."""
    folded = _to_639_2_b(code.lower())
    if len(folded) == 2:
        folded = ISO_639_1_TO_639_2.get(folded, folded)
    return LANGUAGE_NAMES.get(folded, code)


def to_cytube_language(code: str) -> str:
    """Map an ffprobe language tag to CyTube's language code.

    Unknown codes are passed through unchanged.
    """
    return FFMPEG_TO_CYTUBE.get(_to_639_2_b(code.lower()), code)


def build_language_label(code: str, title: Optional[str] = None) -> str:
    """Build a track label like ``"English (Commentary)"``.

    Args:
        code: Language tag of the track
        title: Optional track title appended in parentheses

    Returns:
        Language name (or the raw code when unknown), with the title if any
    """
    label = language_name(code)
    if title:
        label = f"{label} ({title})"
    return label


def languages_match(code: Optional[str], preferred: Optional[str]) -> bool:
    """Whether a track's language tag names the preferred language.

    ISO 639-1, 639-2/B and 639-2/T spellings of the same language match
    (``de``, ``ger`` and ``deu``).
    """
    if not code or not preferred:
        return False
    return _to_639_2_b(normalize_language_code(code)) == _to_639_2_b(
        normalize_language_code(preferred)
    )
