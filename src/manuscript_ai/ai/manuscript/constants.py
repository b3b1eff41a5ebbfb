"""
Manuscript chat constants and enums.
"""

from enum import Enum


class Language(str, Enum):
    """Supported interface languages."""

    ARABIC = "ar"
    ENGLISH = "en"

    @property
    def display_name(self) -> str:
        return LANGUAGE_NAMES[self]


LANGUAGE_NAMES = {
    Language.ARABIC: "Arabic",
    Language.ENGLISH: "English",
}

# Query words that mean the user is asking who wrote the manuscript
DEFAULT_AUTHOR_QUERY_WORDS = ("كاتب", "مؤلف", "author")

CHUNK_SEPARATOR = "\n\n---\n\n"

PDF_DATA_URL_PREFIX = "data:application/pdf;base64,"
