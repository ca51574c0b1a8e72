"""Pytest configuration and shared fixtures."""

import json
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx
import pymupdf
import pytest
from langchain_core.messages import AIMessage

from book_summarizer.load import ChapterSummarizer
from book_summarizer.store import SummaryStore, create_supabase_client


def evaluation_json(summary: str = "A summary.", score: float = 7, **overrides: Any) -> str:
    """Build an LLM answer in the expected evaluation format."""
    payload = {
        "summary": summary,
        "clarity_score": score,
        "cohesion_score": score,
        "coverage_score": score,
        "granularity_score": score,
        "storytelling_score": score,
        "overall_score": score,
    }
    payload.update(overrides)
    return json.dumps(payload)


class FakeChatModel:
    """Stands in for a langchain chat model, answering from a script.

    Each scripted item is either the response text or an exception to raise.
    """

    def __init__(self, responses: Sequence[Union[str, Exception]]):
        self.responses = list(responses)
        self.calls: List[list] = []

    def invoke(self, messages):
        self.calls.append(messages)
        response = self.responses[len(self.calls) - 1]
        if isinstance(response, Exception):
            raise response
        return AIMessage(content=response)


class FakeSupabase:
    """In-memory Supabase REST endpoint served through httpx.MockTransport."""

    def __init__(self, fail_insert_at: Optional[int] = None, reachable: bool = True):
        self.rows: List[Dict[str, Any]] = []
        self.requests: List[httpx.Request] = []
        self.insert_attempts = 0
        self.fail_insert_at = fail_insert_at
        self.reachable = reachable

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.reachable:
            raise httpx.ConnectError("connection refused", request=request)

        if request.method == "GET":
            return httpx.Response(200, json=self.rows[:1])

        self.insert_attempts += 1
        if self.insert_attempts == self.fail_insert_at:
            return httpx.Response(400, json={"message": "insert rejected"})
        self.rows.extend(json.loads(request.content))
        return httpx.Response(201)

    def client(self) -> httpx.Client:
        return create_supabase_client(
            url="https://example.supabase.co",
            key="test-key",
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def store(fake_supabase: FakeSupabase) -> SummaryStore:
    return SummaryStore(fake_supabase.client())


@pytest.fixture
def make_summarizer():
    """Create a summarizer backed by a scripted chat model."""
    def _make(responses: Sequence[Union[str, Exception]]) -> ChapterSummarizer:
        return ChapterSummarizer(FakeChatModel(responses), model_name="test-model", prompt="Evaluate.")
    return _make


@pytest.fixture
def make_pdf(tmp_path):
    """Write a PDF with one page per given text and return its path."""
    def _make(pages: Sequence[str], name: str = "book.pdf") -> str:
        path = tmp_path / name
        doc = pymupdf.open()
        for text in pages:
            page = doc.new_page()
            if text:
                page.insert_text((72, 72), text)
        doc.save(str(path))
        doc.close()
        return str(path)
    return _make
