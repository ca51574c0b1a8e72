"""
FastAPI application for the book summarizer.
"""

import os
import logging
import tempfile
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from book_summarizer.logging import configure_logging, get_logger
from book_summarizer.load import ChapterSummarizer, build_summarizer
from book_summarizer.store import SummaryStore, build_store
from book_summarizer.metrics import start_metrics_server
from book_summarizer.constants import UPLOAD_SUCCESS_MESSAGE, UPLOAD_ERROR_MESSAGE
from book_summarizer.config import UPLOAD_DIR, METRICS_PORT, MAX_BODY_SIZE
from book_summarizer import __version__
import main as pipeline_main

logger = get_logger(__name__)

LIMITED_CONTENT_TYPES = ("application/json", "application/x-www-form-urlencoded")


def create_app(
    summarizer: Optional[ChapterSummarizer] = None,
    store: Optional[SummaryStore] = None,
    metrics_port: int = METRICS_PORT,
    max_body_size: int = MAX_BODY_SIZE,
    upload_dir: str = UPLOAD_DIR,
) -> FastAPI:
    """
    Create the API application.

    Clients that are not passed in are built from configuration at startup.

    Args:
        summarizer: Chapter summarizer shared by all requests
        store: Summary store shared by all requests
        metrics_port: Port for the Prometheus metrics server (0 to disable)
        max_body_size: Largest accepted JSON or URL-encoded body, in bytes
        upload_dir: Directory uploaded files are written to while processed

    Returns:
        The FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # The CLI configures logging itself; plain `uvicorn api.main:app` does not
        if not logging.getLogger().handlers:
            configure_logging()

        owns_store = store is None
        app.state.summarizer = summarizer if summarizer is not None else build_summarizer()
        app.state.store = store if store is not None else build_store()

        # Raises StartupConnectivityError, which aborts startup
        pipeline_main.run_startup_check(app.state.store)

        if metrics_port > 0:
            if start_metrics_server(metrics_port):
                logger.info("Metrics server started", port=metrics_port)
            else:
                logger.warning("Failed to start metrics server")

        logger.info("Application started", version=__version__)
        yield

        logger.info("Shutting down application")
        if owns_store:
            app.state.store.close()

    app = FastAPI(
        title="Book Summarizer API",
        description="API for summarizing and scoring the chapters of uploaded books",
        version=__version__,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        """Reject oversized JSON and URL-encoded bodies. Multipart uploads are not limited."""
        # Only the declared Content-Length is checked; chunked bodies without one pass through
        content_type = request.headers.get("content-type", "").lower()
        content_length = request.headers.get("content-length")
        if (
            content_type.startswith(LIMITED_CONTENT_TYPES)
            and content_length
            and content_length.isdigit()
            and int(content_length) > max_body_size
        ):
            return JSONResponse(status_code=413, content={"error": "Request body too large."})
        return await call_next(request)

    @app.get("/")
    async def read_root():
        """API root endpoint."""
        return {
            "message": "Welcome to the Book Summarizer API",
            "endpoints": {
                "POST /upload": "Upload a PDF book (form field 'book') to summarize its chapters",
            }
        }

    @app.post("/upload")
    async def upload_book(request: Request, book: UploadFile = File(...)):
        """
        Summarize and store every chapter of an uploaded book.

        Args:
            request: Incoming request, used to reach the shared clients
            book: Uploaded PDF file

        Returns:
            A confirmation message, or a generic error message with status 500
        """
        os.makedirs(upload_dir, exist_ok=True)
        fd, file_path = tempfile.mkstemp(suffix=".pdf", dir=upload_dir)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(await book.read())
        except Exception as e:
            logger.exception("Failed to save upload", filename=book.filename, error=str(e))
            pipeline_main.cleanup_stage(file_path)
            return JSONResponse(status_code=500, content={"error": UPLOAD_ERROR_MESSAGE})

        logger.info("Received upload", filename=book.filename, file_path=file_path)
        result = await run_in_threadpool(
            pipeline_main.process_book,
            file_path,
            request.app.state.summarizer,
            request.app.state.store,
        )

        if result.status != "success":
            return JSONResponse(status_code=500, content={"error": UPLOAD_ERROR_MESSAGE})

        return JSONResponse(status_code=200, content={"message": UPLOAD_SUCCESS_MESSAGE})

    return app


app = create_app()
