"""
Pydantic models for data validation across the pipeline.
"""

import math
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Chapter(BaseModel):
    """A single chapter produced by the segmenter."""
    index: int = Field(..., ge=1, description="1-based position among the non-empty chapters")
    text: str = Field(..., description="The chapter text with surrounding whitespace removed")


class ChapterSummary(BaseModel):
    """Schema for the LLM output containing the summary and the 5C scores."""
    model_config = ConfigDict(frozen=True)

    summary: str = Field(..., description="A concise summary of the chapter.")
    clarity_score: float = Field(..., description="How clear and straightforward the language is.")
    cohesion_score: float = Field(..., description="How logically the ideas flow.")
    coverage_score: float = Field(..., description="How well the vital points are covered.")
    granularity_score: float = Field(..., description="How appropriate the level of detail is.")
    storytelling_score: float = Field(..., description="How natural and engaging the narrative is.")
    overall_score: float = Field(..., description="Overall rating of the chapter.")

    @field_validator(
        "clarity_score",
        "cohesion_score",
        "coverage_score",
        "granularity_score",
        "storytelling_score",
        "overall_score",
        mode="before",
    )
    @classmethod
    def require_number(cls, value: Any) -> Any:
        # bool is an int subclass and numeric strings would be coerced otherwise
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"expected a number, got {type(value).__name__}")
        # json.loads accepts NaN and Infinity, which the store cannot encode
        if not math.isfinite(value):
            raise ValueError(f"expected a finite number, got {value}")
        return value

    @field_validator("summary", mode="before")
    @classmethod
    def require_string(cls, value: Any) -> Any:
        if not isinstance(value, str):
            raise ValueError(f"expected a string, got {type(value).__name__}")
        return value


class SummaryRecord(ChapterSummary):
    """A row of the summaries table."""
    chapter_number: int = Field(..., ge=1, description="Position of the chapter within its book")

    @classmethod
    def from_summary(cls, chapter_number: int, summary: ChapterSummary) -> "SummaryRecord":
        return cls(chapter_number=chapter_number, **summary.model_dump())


class BookResult(BaseModel):
    """Full result of processing one uploaded book."""
    status: str = Field("success", description="Processing status (success/error)")
    source_file: str = Field(..., description="Path to the uploaded PDF")
    chapters_found: int = Field(0, description="Number of chapters produced by the segmenter")
    chapters_processed: int = Field(0, description="Number of chapters summarized and stored")
    error: Optional[str] = Field(None, description="Error message if processing failed")
    processing_time: Optional[float] = Field(None, description="Total processing time in seconds")
