"""
Metrics collection module for the book summarizer.
Uses Prometheus metrics for tracking upload processing and usage.
"""

import time
import logging
import contextlib
from typing import Optional, Dict, Callable
from functools import wraps

from prometheus_client import Counter, Histogram, Gauge, start_http_server

# Set up logging
logger = logging.getLogger(__name__)

# Counters
UPLOADS_TOTAL = Counter(
    'uploads_total',
    'Total number of processed book uploads',
    ['status']
)

LLM_CALLS_TOTAL = Counter(
    'llm_calls_total',
    'Total number of LLM API calls',
    ['model', 'status']
)

SUMMARIES_STORED_TOTAL = Counter(
    'summaries_stored_total',
    'Total number of chapter summaries written to the store'
)

ERRORS_TOTAL = Counter(
    'errors_total',
    'Total number of errors',
    ['error_type']
)

OUT_OF_RANGE_SCORES_TOTAL = Counter(
    'out_of_range_scores_total',
    'Total number of LLM scores outside the expected range',
    ['field']
)

# Histograms for timings
EXTRACTION_TIME = Histogram(
    'extraction_time_seconds',
    'Time spent on PDF text extraction'
)

LLM_PROCESSING_TIME = Histogram(
    'llm_processing_time_seconds',
    'Time spent waiting for chapter evaluations',
    ['model']
)

STORE_WRITE_TIME = Histogram(
    'store_write_time_seconds',
    'Time spent writing summaries to the store'
)

# Gauges for active processes
ACTIVE_UPLOADS = Gauge(
    'active_uploads',
    'Number of uploads currently being processed'
)


def start_metrics_server(port: int = 8001) -> bool:
    """
    Start the Prometheus metrics server.
    
    Args:
        port: The port to run the server on
        
    Returns:
        True if server started successfully, False otherwise
    """
    try:
        start_http_server(port)
        logger.info(f"Metrics server started on port {port}")
        return True
    except OSError as e:
        logger.error(f"Failed to start metrics server: {str(e)}")
        return False


def increment_counter(counter, labels: Optional[Dict[str, str]] = None) -> None:
    """
    Increment a Prometheus counter, with labels if given.
    
    Args:
        counter: The counter to increment
        labels: Optional labels to apply to the counter
    """
    if labels:
        counter.labels(**labels).inc()
    else:
        counter.inc()


def record_error(error_type: str) -> None:
    """Record an error of the given stage in the metrics."""
    increment_counter(ERRORS_TOTAL, {"error_type": error_type})


def record_upload(status: str = "success") -> None:
    """
    Record a processed upload in the metrics.
    
    Args:
        status: The status of the upload ("success" or "error")
    """
    increment_counter(UPLOADS_TOTAL, {"status": status})


def record_llm_call(model: str, status: str = "success") -> None:
    """
    Record an LLM API call in the metrics.
    
    Args:
        model: The model used for the call
        status: The status of the call
    """
    increment_counter(LLM_CALLS_TOTAL, {"model": model, "status": status})


def record_summary_stored() -> None:
    """Record a summary row written to the store."""
    increment_counter(SUMMARIES_STORED_TOTAL)


def record_out_of_range_score(field: str) -> None:
    """Record an LLM score that fell outside the expected range."""
    increment_counter(OUT_OF_RANGE_SCORES_TOTAL, {"field": field})


def time_it(histogram, labels: Optional[Dict[str, str]] = None):
    """
    Decorator to measure and record the execution time of a function.
    
    Args:
        histogram: The Prometheus histogram to record the time in
        labels: Optional labels to apply to the histogram
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            finally:
                execution_time = time.time() - start_time
                if labels:
                    histogram.labels(**labels).observe(execution_time)
                else:
                    histogram.observe(execution_time)
                
        return wrapper
    return decorator


@contextlib.contextmanager
def time_it_context(histogram, labels: Optional[Dict[str, str]] = None):
    """
    Context manager to measure and record the execution time of a block of code.

    Args:
        histogram: The Prometheus histogram to record the time in
        labels: Optional labels to apply to the histogram
    """
    start_time = time.time()
    try:
        yield
    finally:
        execution_time = time.time() - start_time
        if labels:
            histogram.labels(**labels).observe(execution_time)
        else:
            histogram.observe(execution_time)


@contextlib.contextmanager
def track_active_upload():
    """Context manager that counts an upload as active while its block runs."""
    ACTIVE_UPLOADS.inc()
    try:
        yield
    finally:
        ACTIVE_UPLOADS.dec()


# Define convenience decorators for commonly timed functions
def time_extraction():
    """Time an extraction function."""
    return time_it(EXTRACTION_TIME)


def time_llm_processing_context(model: str = "default"):
    """Context manager to time a single LLM call."""
    return time_it_context(LLM_PROCESSING_TIME, {"model": model})


def time_store_write():
    """Time a store write function."""
    return time_it(STORE_WRITE_TIME)
