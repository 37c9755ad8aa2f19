"""Text helpers for tutorial metadata.

Derived display values used when the content bundle leaves a field out.
"""

import math
import re

WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 150

TAG_PATTERN = re.compile(r"<[^>]*>")
WORD_PATTERN = re.compile(r"\S+")
SEGMENT_PATTERN = re.compile(r"[\w-]+")

_DIFFICULTY_COLORS = {
    "beginner": "green",
    "intermediate": "orange",
    "advanced": "red",
}


def calculate_read_time(content: str) -> str:
    """Estimate reading time from word count.

    Args:
        content: Tutorial body (HTML tags count as part of words)

    Returns:
        Reading time label (e.g., "3 min"), at least "1 min"
    """
    word_count = len(WORD_PATTERN.findall(content))
    minutes = max(1, math.ceil(word_count / WORDS_PER_MINUTE))
    return f"{minutes} min"


def generate_excerpt(content: str, max_length: int = EXCERPT_LENGTH) -> str:
    """Build a plain-text excerpt from HTML content.

    Runs of whitespace left by the HTML source (line breaks, indentation) are
    collapsed to single spaces before the text is cut, so the limit counts
    visible characters only.

    Args:
        content: HTML or markdown content
        max_length: Maximum excerpt length before truncation

    Returns:
        Tag-free text, truncated with "..." when longer than max_length
    """
    plain_text = " ".join(TAG_PATTERN.sub("", content).split())
    if len(plain_text) <= max_length:
        return plain_text
    return plain_text[:max_length].strip() + "..."


def slugify(text: str) -> str:
    """Convert text to a URL-safe slug."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"\s+", "-", slug.strip())
    return re.sub(r"-+", "-", slug)


def is_url_segment(text: str) -> bool:
    """Check that text is a single URL path segment of slug characters."""
    return SEGMENT_PATTERN.fullmatch(text) is not None


def title_case(text: str) -> str:
    """Capitalize the first letter of each word."""
    return re.sub(r"\w\S*", lambda match: match.group(0)[0].upper() + match.group(0)[1:].lower(), text)


def difficulty_color(difficulty: str) -> str:
    """Map a difficulty label to its display color token."""
    return _DIFFICULTY_COLORS.get(difficulty.lower(), "gray")
