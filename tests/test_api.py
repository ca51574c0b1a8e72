"""
Tests for the HTTP API.
"""

import os
from pathlib import Path

import pytest
import starlette.datastructures
from fastapi.testclient import TestClient

from api.main import create_app
from book_summarizer.constants import UPLOAD_ERROR_MESSAGE, UPLOAD_SUCCESS_MESSAGE
from book_summarizer.exceptions import StartupConnectivityError
from book_summarizer.store import SummaryStore
from conftest import FakeSupabase, evaluation_json


@pytest.fixture
def upload_dir(tmp_path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def make_client(store, upload_dir):
    """Start the app with the given summarizer and the fake store."""
    def _make(summarizer, **kwargs) -> TestClient:
        app = create_app(
            summarizer=summarizer,
            store=store,
            metrics_port=0,
            upload_dir=str(upload_dir),
            **kwargs,
        )
        return TestClient(app)
    return _make


def upload(client: TestClient, pdf_path: str):
    with open(pdf_path, "rb") as f:
        return client.post("/upload", files={"book": ("book.pdf", f, "application/pdf")})


def test_root(make_client, make_summarizer):
    with make_client(make_summarizer([])) as client:
        response = client.get("/")

    assert response.status_code == 200
    assert "POST /upload" in response.json()["endpoints"]


def test_upload_success(make_client, make_summarizer, make_pdf, fake_supabase, upload_dir):
    pdf_path = make_pdf(["Chapter 1\nfoo", "Chapter 2\nbar"])
    summarizer = make_summarizer([evaluation_json(summary="Foo."), evaluation_json(summary="Bar.")])

    with make_client(summarizer) as client:
        response = upload(client, pdf_path)

    assert response.status_code == 200
    assert response.json() == {"message": UPLOAD_SUCCESS_MESSAGE}
    assert [(row["chapter_number"], row["summary"]) for row in fake_supabase.rows] == [(1, "Foo."), (2, "Bar.")]
    assert os.listdir(upload_dir) == []


def test_upload_fails_midway_on_llm_network_error(make_client, make_summarizer, make_pdf, fake_supabase, upload_dir):
    pdf_path = make_pdf(["Chapter 1\nfoo", "Chapter 2\nbar"])
    summarizer = make_summarizer([
        evaluation_json(summary="Foo."),
        ConnectionError("connection reset by peer"),
    ])

    with make_client(summarizer) as client:
        response = upload(client, pdf_path)

    assert response.status_code == 500
    assert response.json() == {"error": UPLOAD_ERROR_MESSAGE}
    assert [row["chapter_number"] for row in fake_supabase.rows] == [1]
    assert os.listdir(upload_dir) == []


def test_upload_of_corrupt_file(make_client, make_summarizer, fake_supabase, upload_dir):
    summarizer = make_summarizer([])

    with make_client(summarizer) as client:
        response = client.post("/upload", files={"book": ("book.pdf", b"garbage", "application/pdf")})

    assert response.status_code == 500
    assert response.json() == {"error": UPLOAD_ERROR_MESSAGE}
    assert fake_supabase.rows == []
    assert os.listdir(upload_dir) == []


def test_upload_without_file_is_a_client_error(make_client, make_summarizer, fake_supabase):
    summarizer = make_summarizer([])

    with make_client(summarizer) as client:
        response = client.post("/upload", data={"title": "no file"})

    assert 400 <= response.status_code < 500
    assert summarizer.llm.calls == []
    assert fake_supabase.rows == []


def test_oversized_json_body_is_rejected(make_client, make_summarizer):
    with make_client(make_summarizer([]), max_body_size=16) as client:
        response = client.post("/upload", json={"padding": "x" * 64})

    assert response.status_code == 413


def test_does_not_serve_when_store_unreachable(make_summarizer, upload_dir):
    store = SummaryStore(FakeSupabase(reachable=False).client())
    app = create_app(
        summarizer=make_summarizer([]),
        store=store,
        metrics_port=0,
        upload_dir=str(upload_dir),
    )

    with pytest.raises(StartupConnectivityError):
        with TestClient(app):
            pass


def test_body_limit_ignores_content_type_case(make_client, make_summarizer):
    with make_client(make_summarizer([]), max_body_size=16) as client:
        response = client.post(
            "/upload",
            content=b'{"padding": "' + b"x" * 64 + b'"}',
            headers={"Content-Type": "Application/JSON"},
        )

    assert response.status_code == 413


def test_failed_upload_read_removes_temp_file(make_client, make_summarizer, fake_supabase, upload_dir, monkeypatch):
    async def broken_read(self, size=-1):
        raise RuntimeError("client disconnected")

    monkeypatch.setattr(starlette.datastructures.UploadFile, "read", broken_read)
    summarizer = make_summarizer([])

    with make_client(summarizer) as client:
        response = client.post("/upload", files={"book": ("book.pdf", b"%PDF-1.4", "application/pdf")})

    assert response.status_code == 500
    assert response.json() == {"error": UPLOAD_ERROR_MESSAGE}
    assert summarizer.llm.calls == []
    assert os.listdir(upload_dir) == []
