"""
Book Summarizer

A PDF ingestion service that splits books into chapters, scores and
summarizes each chapter with an LLM, and stores the results in Supabase.
"""

__version__ = "0.1.0"
