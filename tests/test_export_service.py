# /tests/test_export_service.py

import base64
import io
import re
from datetime import date

import fitz  # PyMuPDF
import httpx
import pytest
from bs4 import BeautifulSoup
from fastapi.testclient import TestClient
from PIL import Image

from app.main import app
from app.models.export_model import ExportFormat, ExportRequest
from app.services import export_service

SAMPLE_CONTENT = """# The Future of Work

Remote teams are **reshaping** how companies hire and collaborate.

## Key Benefits

• Flexible schedules for every employee
- Lower office costs
* Access to global talent

Why It Matters Now

Leaders who adapt early will attract stronger candidates."""


@pytest.fixture
def export_request():
    return ExportRequest(
        content=SAMPLE_CONTENT,
        images=[],
        tone="professional",
        platform="linkedin",
        contentType="article",
    )


def _png_bytes(color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (40, 30), color).save(buffer, format="PNG")
    return buffer.getvalue()


# --- Shared formatting ---

def test_format_content_html_converts_markers():
    html = export_service.format_content_html(SAMPLE_CONTENT)

    assert "<h2>The Future of Work</h2>" in html
    assert "<h3>Key Benefits</h3>" in html
    assert "<strong>reshaping</strong>" in html
    assert "<ul><li>Flexible schedules for every employee</li>" in html
    assert "<li>Access to global talent</li></ul>" in html
    # Short Title Case line on its own becomes a sub-heading.
    assert "<h3>Why It Matters Now</h3>" in html
    assert "<p>Leaders who adapt early will attract stronger candidates.</p>" in html


def test_sentences_are_not_promoted_to_headings():
    html = export_service.format_content_html("This is a normal sentence.\n\nanother lowercase line")
    assert html == "<p>This is a normal sentence.</p><p>another lowercase line</p>"


def test_raw_html_in_content_is_escaped():
    html = export_service.format_content_html("Use <script>alert(1)</script> & more")
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


# --- HTML export ---

def test_html_export_round_trips_the_word_sequence(export_request):
    document = export_service.render_html(export_request, generated_on=date(2025, 1, 2)).decode("utf-8")
    soup = BeautifulSoup(document, "html.parser")

    exported_words = soup.select_one("div.content").get_text(" ").split()
    raw_without_markers = re.sub(r"^(#+|[•\-\*])\s+", "", SAMPLE_CONTENT, flags=re.MULTILINE).replace("**", "")
    assert exported_words == raw_without_markers.split()

    assert soup.h1.get_text() == "Article"
    meta = soup.select_one("div.meta").get_text(" ")
    assert "linkedin" in meta and "2025-01-02" in meta
    assert "Generated by AI Writing Studio" in soup.select_one("div.footer").get_text()


def test_html_export_includes_images_section():
    request = ExportRequest(content="Some words", images=["https://images.example/a.jpg", "https://images.example/b.jpg"])
    document = export_service.render_html(request).decode("utf-8")
    soup = BeautifulSoup(document, "html.parser")

    assert [img["src"] for img in soup.select(".images-grid img")] == [
        "https://images.example/a.jpg", "https://images.example/b.jpg"
    ]


def test_export_filenames():
    assert export_service.build_export_filename(ExportFormat.TEXT, "article", "linkedin", now_ms=123) == "article-linkedin-123.txt"
    assert export_service.build_export_filename(ExportFormat.MARKDOWN, "blog", None, now_ms=5) == "blog-standard-5.md"
    assert export_service.build_export_filename(ExportFormat.PDF, "essay", "medium", now_ms=9) == "essay-9.pdf"


# --- PDF export ---

def test_pdf_contains_title_content_and_footer(export_request):
    pdf_bytes = export_service.build_pdf(export_request, images=[])

    assert pdf_bytes.startswith(b"%PDF")
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        text = "".join(page.get_text() for page in doc)
        assert doc.page_count == 1
    assert "Article" in text
    assert "Key Benefits" in text
    assert "Page 1 of 1" in text
    assert "Generated by AI Writing Studio" in text


def test_long_content_paginates():
    paragraph = "Sustainable design keeps buildings efficient for decades and lowers their running costs. " * 6
    request = ExportRequest(content="\n\n".join([paragraph] * 25), contentType="essay")

    pdf_bytes = export_service.build_pdf(request, images=[])

    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        page_count = doc.page_count
        last_page_text = doc[page_count - 1].get_text()
    assert page_count > 1
    assert f"Page {page_count} of {page_count}" in last_page_text


def test_pdf_embeds_images(export_request):
    jpeg = export_service.reencode_as_jpeg(_png_bytes())
    pdf_bytes = export_service.build_pdf(export_request, images=[jpeg, jpeg])

    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        assert len(doc[0].get_images()) >= 1


@pytest.mark.asyncio
async def test_image_fetch_failures_are_skipped():
    png = _png_bytes()

    def handler(request):
        if request.url.path == "/missing.jpg":
            return httpx.Response(404)
        if request.url.path == "/garbage.jpg":
            return httpx.Response(200, content=b"not an image")
        return httpx.Response(200, content=png, headers={"Content-Type": "image/png"})

    data_uri = "data:image/png;base64," + base64.b64encode(png).decode("ascii")
    images = await export_service.fetch_export_images(
        ["https://images.example/ok.jpg", "https://images.example/missing.jpg",
         "https://images.example/garbage.jpg", data_uri],
        transport=httpx.MockTransport(handler),
    )

    assert len(images) == 2
    for jpeg in images:
        with Image.open(io.BytesIO(jpeg)) as img:
            assert img.format == "JPEG"


# --- Export endpoint ---

@pytest.fixture
def client():
    return TestClient(app)


def test_text_export_endpoint(client):
    response = client.post("/api/export/txt", json={"content": "Plain words here", "contentType": "email", "platform": "standard"})

    assert response.status_code == 200
    assert response.text == "Plain words here"
    assert response.headers["content-type"].startswith("text/plain")
    assert re.match(r'attachment; filename="email-standard-\d+\.txt"', response.headers["content-disposition"])


def test_pdf_export_endpoint(client):
    response = client.post("/api/export/pdf", json={"content": SAMPLE_CONTENT})

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")


def test_empty_content_is_rejected(client):
    response = client.post("/api/export/html", json={"content": "   "})
    assert response.status_code == 400
    assert response.json() == {"error": "Content is required"}


def test_unknown_format_is_rejected(client):
    response = client.post("/api/export/docx", json={"content": "Some words"})
    assert response.status_code == 400
