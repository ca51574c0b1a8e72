"""
Load module for the book summarizer.
Handles LLM evaluation of chapters: prompting, response cleanup and validation.
"""

import json
import logging
from typing import Any, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import ValidationError as PydanticValidationError

from .config import (
    DEEPSEEK_API_KEY, GOOGLE_API_KEY, LLM_PROVIDER, LLM_MODEL, LLM_BASE_URL,
    LLM_TEMPERATURE, SUMMARY_EVALUATION_PROMPT
)
from .constants import SCORE_FIELDS, MIN_SCORE, MAX_SCORE
from .exceptions import APIKeyError, ConfigurationError, ResponseParsingError, SummarizationError
from .metrics import record_llm_call, record_out_of_range_score, time_llm_processing_context
from .models import ChapterSummary
from .utils import strip_code_fences

# Set up logging
logger = logging.getLogger(__name__)


def initialize_llm(
    provider: str = LLM_PROVIDER,
    model: str = LLM_MODEL,
    temperature: float = LLM_TEMPERATURE,
    base_url: str = LLM_BASE_URL,
):
    """
    Initialize the chat model used to evaluate chapters.

    Args:
        provider: "deepseek" for any OpenAI-compatible endpoint, "gemini" for Google
        model: Model identifier sent with every request
        temperature: Sampling temperature
        base_url: Endpoint of the OpenAI-compatible API

    Returns:
        An initialized langchain chat model

    Raises:
        APIKeyError: If the provider's API key is not configured
        ConfigurationError: If the provider is unknown
    """
    if provider == "deepseek":
        from langchain_openai import ChatOpenAI

        if not DEEPSEEK_API_KEY:
            raise APIKeyError("DEEPSEEK_API_KEY not found in environment variables")

        llm = ChatOpenAI(
            model=model,
            temperature=temperature,
            base_url=base_url,
            api_key=DEEPSEEK_API_KEY,
            max_retries=0,
        )
    elif provider == "gemini":
        from langchain_google_genai import ChatGoogleGenerativeAI

        if not GOOGLE_API_KEY:
            raise APIKeyError("GOOGLE_API_KEY not found in environment variables")

        llm = ChatGoogleGenerativeAI(
            model=model,
            temperature=temperature,
            google_api_key=GOOGLE_API_KEY,
            max_retries=0,
        )
    else:
        raise ConfigurationError(f"Unknown LLM provider: {provider}")

    logger.info(f"Initialized {provider} LLM client with model: {model}")
    return llm


def parse_chapter_summary(raw_text: str) -> ChapterSummary:
    """
    Parse the raw LLM response into a ChapterSummary.

    Args:
        raw_text: Response text, optionally wrapped in a Markdown code fence

    Returns:
        The validated chapter summary

    Raises:
        ResponseParsingError: If the text is not JSON or lacks a required field
    """
    cleaned_text = strip_code_fences(raw_text)
    try:
        payload = json.loads(cleaned_text)
    except json.JSONDecodeError as e:
        raise ResponseParsingError(f"LLM response is not valid JSON: {str(e)}") from e

    if not isinstance(payload, dict):
        raise ResponseParsingError(f"LLM response is a JSON {type(payload).__name__}, expected an object")

    try:
        return ChapterSummary.model_validate(payload)
    except PydanticValidationError as e:
        raise ResponseParsingError(f"LLM response does not match the evaluation schema: {str(e)}") from e


def warn_out_of_range_scores(summary: ChapterSummary) -> None:
    """Log every score outside the expected range. Scores are kept as returned."""
    for field in SCORE_FIELDS:
        value = getattr(summary, field)
        if not MIN_SCORE <= value <= MAX_SCORE:
            logger.warning(f"{field}={value} is outside the expected range [{MIN_SCORE}, {MAX_SCORE}]")
            record_out_of_range_score(field)


class ChapterSummarizer:
    """Summarizes and scores single chapters with a chat model."""

    def __init__(self, llm: Any, model_name: str = LLM_MODEL, prompt: Optional[str] = None):
        """
        Args:
            llm: A langchain chat model, or anything with a compatible invoke()
            model_name: Model identifier, used for metrics
            prompt: System instruction describing the rubric and the JSON format
        """
        self.llm = llm
        self.model_name = model_name
        self.prompt = prompt or SUMMARY_EVALUATION_PROMPT

    def summarize(self, chapter_text: str) -> ChapterSummary:
        """
        Evaluate one chapter.

        Args:
            chapter_text: The text of the chapter

        Returns:
            The summary and scores returned by the model

        Raises:
            SummarizationError: If the LLM call fails or its answer cannot be parsed
        """
        messages = [
            SystemMessage(content=self.prompt),
            HumanMessage(content=chapter_text),
        ]

        try:
            with time_llm_processing_context(self.model_name):
                response = self.llm.invoke(messages)
        except Exception as e:
            record_llm_call(self.model_name, "failure")
            raise SummarizationError(f"LLM request failed: {str(e)}") from e

        try:
            if not isinstance(response.content, str):
                raise ResponseParsingError(
                    f"LLM response content is a {type(response.content).__name__}, expected text"
                )
            summary = parse_chapter_summary(response.content)
        except ResponseParsingError:
            record_llm_call(self.model_name, "invalid_response")
            raise

        record_llm_call(self.model_name, "success")
        warn_out_of_range_scores(summary)
        return summary


def build_summarizer(llm: Any = None) -> ChapterSummarizer:
    """Build the summarizer from configuration, creating the LLM client unless one is given."""
    return ChapterSummarizer(llm if llm is not None else initialize_llm(), model_name=LLM_MODEL)
