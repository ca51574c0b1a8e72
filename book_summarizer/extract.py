"""
Extract module for the book summarizer.
Handles PDF text extraction with PyMuPDF.
"""

import logging

import pymupdf

from .exceptions import ExtractionError, ValidationError
from .metrics import time_extraction
from .utils import validate_pdf_path

# Set up logging
logger = logging.getLogger(__name__)


def extract_text_with_pymupdf(pdf_path: str) -> str:
    """
    Extract the plain text of every page of a PDF file, in page order.
    
    Args:
        pdf_path: Path to the PDF file
        
    Returns:
        The text of the whole document
        
    Raises:
        ExtractionError: If the file cannot be parsed as a PDF or holds no text
    """
    logger.info(f"Extracting text from {pdf_path} using PyMuPDF")
    try:
        with pymupdf.open(pdf_path, filetype="pdf") as doc:
            page_count = doc.page_count
            text = "".join(page.get_text() for page in doc)
    except Exception as e:
        logger.error(f"Error extracting text with PyMuPDF: {str(e)}")
        raise ExtractionError(f"Failed to extract text with PyMuPDF: {str(e)}") from e
    
    if not text.strip():
        raise ExtractionError("No text found in the PDF.")
    
    logger.info(f"Extracted {len(text)} characters from {page_count} pages using PyMuPDF")
    return text


@time_extraction()
def extract_text(pdf_path: str) -> str:
    """
    Main text extraction function: validates the path, then extracts with PyMuPDF.
    
    Args:
        pdf_path: Path to the PDF file
        
    Returns:
        The extracted text
        
    Raises:
        ExtractionError: If the file is missing, unreadable or empty
    """
    try:
        validate_pdf_path(pdf_path)
    except ValidationError as e:
        raise ExtractionError(str(e)) from e
    
    return extract_text_with_pymupdf(pdf_path)
