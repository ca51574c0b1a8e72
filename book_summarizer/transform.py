"""
Transform module for the book summarizer.
Splits extracted book text into chapters.
"""

import re
import logging
from typing import List

from .constants import CHAPTER_HEADING_PATTERN
from .models import Chapter

# Set up logging
logger = logging.getLogger(__name__)

CHAPTER_HEADING_RE = re.compile(CHAPTER_HEADING_PATTERN, re.IGNORECASE)


def segment_into_chapters(text: str) -> List[Chapter]:
    """
    Split book text on "Chapter <number>" headings.

    The headings themselves are dropped and blank segments are discarded, so
    chapters are numbered by position, not by the numeral in the heading. Text
    without any heading comes back as a single chapter.

    Args:
        text: The full extracted text of the book

    Returns:
        Chapters in document order, numbered from 1
    """
    segments = [segment.strip() for segment in CHAPTER_HEADING_RE.split(text)]
    chapters = [
        Chapter(index=index, text=segment)
        for index, segment in enumerate((s for s in segments if s), start=1)
    ]
    logger.info(f"Segmented text into {len(chapters)} chapters")
    return chapters
