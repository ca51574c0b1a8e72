"""
Utility functions for the book summarizer.
"""

import os
import re
import logging

from .constants import CODE_FENCE_OPEN_PATTERN, CODE_FENCE_CLOSE_PATTERN
from .exceptions import ValidationError

# Configure logging
logger = logging.getLogger(__name__)


def strip_code_fences(text: str) -> str:
    """
    Remove a surrounding Markdown code fence (```json ... ```) from an LLM response.
    
    Args:
        text: Raw response text
        
    Returns:
        The text between the fences, or the stripped text if it is not fenced
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = re.sub(CODE_FENCE_OPEN_PATTERN, "", cleaned)
        cleaned = re.sub(CODE_FENCE_CLOSE_PATTERN, "", cleaned)
    return cleaned.strip()


def remove_file(path: str) -> bool:
    """
    Delete a file, logging instead of raising when it cannot be removed.
    
    Args:
        path: Path of the file to delete
        
    Returns:
        True if the file no longer exists, False otherwise
    """
    try:
        os.remove(path)
        logger.debug(f"Removed temporary file {path}")
        return True
    except FileNotFoundError:
        return True
    except OSError as e:
        logger.warning(f"Failed to remove temporary file {path}: {str(e)}")
        return False


def validate_pdf_path(pdf_path: str) -> bool:
    """
    Validate that the PDF path exists and is accessible.
    
    Args:
        pdf_path: Path to the PDF file
        
    Returns:
        True if the PDF exists and is accessible
        
    Raises:
        ValidationError: If the path is invalid or the file is not accessible
    """
    if not pdf_path:
        raise ValidationError("PDF path cannot be empty")
    
    if not os.path.exists(pdf_path):
        raise ValidationError(f"PDF file not found at {pdf_path}")
    
    if not os.path.isfile(pdf_path):
        raise ValidationError(f"Path {pdf_path} is not a file")
    
    # Check if the file is readable
    try:
        with open(pdf_path, 'rb'):
            pass
    except OSError as e:
        raise ValidationError(f"PDF file is not accessible: {e}")
    
    return True
