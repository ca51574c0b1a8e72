"""
Main module for the book summarizer.
Provides the upload processing pipeline and the CLI that serves the API.
"""

import time
import logging
import argparse
from typing import List

import uvicorn

from book_summarizer.logging import configure_logging, get_logger
from book_summarizer.extract import extract_text
from book_summarizer.transform import segment_into_chapters
from book_summarizer.load import ChapterSummarizer
from book_summarizer.store import SummaryStore
from book_summarizer.models import BookResult, Chapter
from book_summarizer.exceptions import PersistenceError, StartupConnectivityError, SummarizationError
from book_summarizer.utils import remove_file
from book_summarizer.metrics import record_error, record_upload, track_active_upload
from book_summarizer.config import HOST, PORT, METRICS_PORT

logger = get_logger(__name__)


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Serve the book summarization API")

    parser.add_argument("--host", default=HOST, help="Interface to bind to")
    parser.add_argument("--port", type=int, default=PORT, help="Port to listen on")
    parser.add_argument("--metrics-port", type=int, default=METRICS_PORT, help="Port for metrics server (0 to disable)")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                      help="Set log level")

    return parser.parse_args()


def extract_stage(pdf_path: str) -> str:
    """
    Extraction stage of the pipeline.

    Args:
        pdf_path: Path to the uploaded PDF file

    Returns:
        The extracted text
    """
    logger.info("Starting extraction stage", pdf_path=pdf_path)
    try:
        text = extract_text(pdf_path)
        logger.info("Extraction completed", characters=len(text))
        return text
    except Exception as e:
        logger.exception("Extraction failed", error=str(e))
        record_error("extraction")
        raise


def segment_stage(text: str) -> List[Chapter]:
    """Segmentation stage of the pipeline. Never fails for extracted text."""
    logger.info("Starting segmentation stage")
    chapters = segment_into_chapters(text)
    logger.info("Segmentation completed", chapter_count=len(chapters))
    return chapters


def chapter_stage(chapter: Chapter, summarizer: ChapterSummarizer, store: SummaryStore) -> None:
    """
    Summarize one chapter, then store the result.

    Args:
        chapter: The chapter to process
        summarizer: Client used to evaluate the chapter
        store: Store the evaluation is written to
    """
    logger.info(f"Processing Chapter {chapter.index}...", chapter=chapter.index)
    try:
        summary = summarizer.summarize(chapter.text)
    except SummarizationError as e:
        logger.exception("Summarization failed", chapter=chapter.index, error=str(e))
        record_error("summarization")
        raise

    try:
        store.insert_summary(chapter.index, summary)
    except PersistenceError as e:
        logger.exception("Storing summary failed", chapter=chapter.index, error=str(e))
        record_error("persistence")
        raise

    logger.info(f"Chapter {chapter.index} summary stored in Supabase.",
               chapter=chapter.index,
               overall_score=summary.overall_score)


def cleanup_stage(pdf_path: str) -> None:
    """Delete the uploaded file. Failures are logged and never raised."""
    if not remove_file(pdf_path):
        logger.warning("Could not delete uploaded file", pdf_path=pdf_path)
        record_error("cleanup")


def process_book(
    pdf_path: str,
    summarizer: ChapterSummarizer,
    store: SummaryStore,
) -> BookResult:
    """
    Process an uploaded book: extract, segment, then summarize and store every chapter in order.

    Chapters are handled one at a time, and the first failure stops the run.
    Rows stored before a failure are kept. The uploaded file is always deleted.

    Args:
        pdf_path: Path to the uploaded PDF file
        summarizer: Client used to evaluate chapters
        store: Store chapter evaluations are written to

    Returns:
        BookResult object
    """
    start_time = time.time()
    logger.info("Starting book processing", pdf_path=pdf_path)

    chapters: List[Chapter] = []
    processed = 0

    with track_active_upload():
        try:
            text = extract_stage(pdf_path)
            chapters = segment_stage(text)

            for chapter in chapters:
                chapter_stage(chapter, summarizer, store)
                processed += 1

            result = BookResult(
                status="success",
                source_file=pdf_path,
                chapters_found=len(chapters),
                chapters_processed=processed,
                processing_time=time.time() - start_time
            )
            logger.info("Book processed successfully",
                       chapters_processed=processed,
                       processing_time=f"{result.processing_time:.2f}s")
            record_upload("success")
            return result

        except Exception as e:
            logger.exception("Book processing failed",
                            error=str(e),
                            pdf_path=pdf_path,
                            chapters_processed=processed)
            record_upload("error")
            return BookResult(
                status="error",
                source_file=pdf_path,
                chapters_found=len(chapters),
                chapters_processed=processed,
                error=str(e),
                processing_time=time.time() - start_time
            )

        finally:
            cleanup_stage(pdf_path)


def run_startup_check(store: SummaryStore) -> None:
    """
    Verify the summaries store is reachable before serving requests.

    Raises:
        StartupConnectivityError: If the store cannot be reached
    """
    try:
        store.check_connection()
    except StartupConnectivityError as e:
        logger.critical("Failed to connect to Supabase. Exiting...", error=str(e))
        record_error("startup")
        raise


def main():
    """Main entry point for CLI."""
    args = parse_args()

    configure_logging(console_level=getattr(logging, args.log_level))
    logger.info("Starting server", host=args.host, port=args.port)

    from api.main import create_app

    # With lifespan="on" a failed startup check makes uvicorn exit non-zero
    uvicorn.run(
        create_app(metrics_port=args.metrics_port),
        host=args.host,
        port=args.port,
        lifespan="on",
        log_config=None,
    )


if __name__ == "__main__":
    main()
