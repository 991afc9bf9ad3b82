"""
Language Detection Service

Best-effort language tagging for incoming questions using langdetect with a
Unicode script fallback. The tag is diagnostic only (logs, routing metadata):
the analyzer always evaluates every language pack, so a wrong guess here can
never change how a question is routed.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from langdetect import DetectorFactory, detect_langs
from langdetect.lang_detect_exception import LangDetectException

logger = logging.getLogger("lifelog.common.language")

SUPPORTED_LANGUAGES = ("en", "zh", "ja", "ko", "es", "fr", "de", "it", "pt")

# Matches any Hangul, Kana, or CJK character
_NON_LATIN_RE = re.compile(
    r'[ᄀ-ᇿ぀-ゟ゠-ヿ㄰-㆏'
    r'㐀-䶿一-鿿가-힯]'
)

# Seed langdetect for deterministic results
DetectorFactory.seed = 0


@dataclass(frozen=True)
class LanguageInfo:
    """Detected language information"""
    code: str           # ISO 639-1: "en", "zh", "ja", ...
    confidence: float   # 0.0~1.0
    script: str         # "Latin", "Hangul", "CJK", "Kana", "Mixed"

    @property
    def is_english(self) -> bool:
        return self.code == "en"

    @property
    def is_supported(self) -> bool:
        return self.code in SUPPORTED_LANGUAGES


# Unicode range based script detection
_SCRIPT_RANGES = [
    (0xAC00, 0xD7AF, "Hangul", "ko"),    # Hangul Syllables
    (0x1100, 0x11FF, "Hangul", "ko"),    # Hangul Jamo
    (0x3130, 0x318F, "Hangul", "ko"),    # Hangul Compatibility Jamo
    (0x3040, 0x309F, "Kana", "ja"),      # Hiragana
    (0x30A0, 0x30FF, "Kana", "ja"),      # Katakana
    (0x4E00, 0x9FFF, "CJK", "zh"),      # CJK Unified Ideographs
    (0x3400, 0x4DBF, "CJK", "zh"),      # CJK Extension A
]


def _detect_script(text: str) -> tuple[str, Optional[str]]:
    """Detect dominant script from Unicode character ranges.

    Returns:
        (script_name, language_code) or ("Latin", None) for Latin-dominant text
    """
    script_counts: dict[str, int] = {}
    total = 0

    for ch in text:
        if ch.isspace() or ch in '.,!?;:"\'-()[]{}？！。、':
            continue
        total += 1
        cp = ord(ch)
        for start, end, script, _lang in _SCRIPT_RANGES:
            if start <= cp <= end:
                script_counts[script] = script_counts.get(script, 0) + 1
                break
        else:
            script_counts["Latin"] = script_counts.get("Latin", 0) + 1

    if total == 0:
        return "Latin", None

    # Any kana at all means Japanese (kanji alone is indistinguishable from Chinese)
    if script_counts.get("Kana", 0) > 0:
        return "Kana", "ja"

    if script_counts.get("Hangul", 0) > total * 0.15:
        return "Hangul", "ko"

    if script_counts.get("CJK", 0) > total * 0.15:
        return "CJK", "zh"

    return "Latin", None


def detect_language(text: str) -> LanguageInfo:
    """Detect language of a question.

    Non-Latin scripts are decided from Unicode ranges alone. Latin text is
    passed to langdetect and kept only when the result is one of the nine
    supported languages; anything else is reported as English.

    Args:
        text: Input text to detect language for

    Returns:
        LanguageInfo with detected language code, confidence, and script
    """
    if not text or not text.strip():
        return LanguageInfo(code="en", confidence=1.0, script="Latin")

    cleaned = text.strip()

    script, script_lang = _detect_script(cleaned)
    if script_lang:
        return LanguageInfo(code=script_lang, confidence=0.9, script=script)

    # Very short Latin text is too ambiguous for langdetect
    if len(cleaned) < 10:
        return LanguageInfo(code="en", confidence=0.5, script="Latin")

    try:
        results = detect_langs(cleaned)
    except LangDetectException as e:
        logger.debug("langdetect could not classify %r: %s", cleaned, e)
        results = []

    for candidate in results:
        code = candidate.lang.split("-")[0]
        if code in SUPPORTED_LANGUAGES and not _NON_LATIN_RE.search(cleaned):
            return LanguageInfo(
                code=code,
                confidence=round(candidate.prob, 4),
                script="Latin",
            )

    return LanguageInfo(code="en", confidence=0.5, script="Latin")
