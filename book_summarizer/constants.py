"""
Constants for the book summarizer that are unlikely to change between runs.
These are different from configuration parameters as they are not meant to be modified
by the user and are intrinsic to the algorithm's function.
"""

# Chapter heading delimiter, matched case-insensitively
CHAPTER_HEADING_PATTERN = r'Chapter\s+\d+'

# Markdown code fences the LLM may wrap its JSON in
CODE_FENCE_OPEN_PATTERN = r'^```[a-zA-Z]*\s*'
CODE_FENCE_CLOSE_PATTERN = r'\s*```$'

# Names of the six numeric fields in a chapter evaluation
SCORE_FIELDS = (
    "clarity_score",
    "cohesion_score",
    "coverage_score",
    "granularity_score",
    "storytelling_score",
    "overall_score",
)

# Expected score range; values outside it are stored but flagged
MIN_SCORE = 0.0
MAX_SCORE = 10.0

# Response bodies of the upload endpoint
UPLOAD_SUCCESS_MESSAGE = "Book processed successfully!"
UPLOAD_ERROR_MESSAGE = "An error occurred while processing the book."
