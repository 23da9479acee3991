# /app/services/export_service.py

import asyncio
import base64
import html
import io
import re
import time
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

import fitz  # PyMuPDF
import httpx
from bs4 import BeautifulSoup, NavigableString, Tag, Comment
from PIL import Image

from ..models.export_model import ExportFormat, ExportRequest

FOOTER_TEXT = "Generated by AI Writing Studio"

MEDIA_TYPES = {
    ExportFormat.TEXT: "text/plain; charset=utf-8",
    ExportFormat.MARKDOWN: "text/markdown; charset=utf-8",
    ExportFormat.HTML: "text/html; charset=utf-8",
    ExportFormat.PDF: "application/pdf",
}


# --- Shared Formatting (markdown-like text -> HTML fragment) ---

_BOLD = re.compile(r"\*\*(.*?)\*\*")
_H3 = re.compile(r"^###\s+(.+)$", re.MULTILINE)
_H2_AS_H3 = re.compile(r"^##\s+(.+)$", re.MULTILINE)
_H1_AS_H2 = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_BULLET = re.compile(r"^[•\-\*]\s+(.+)$", re.MULTILINE)
_HEADING_LIKE = re.compile(r"^[A-Z][^.!?]*$")
_CAPITALISED = re.compile(r"^[A-Z]")


def _looks_like_heading(line: str) -> bool:
    """Short Title Case line with no sentence punctuation, e.g. "Key Benefits of AI"."""
    if len(line) >= 80 or line.startswith("<") or not _HEADING_LIKE.match(line):
        return False
    return all(_CAPITALISED.match(word) or len(word) <= 3 for word in line.split(" "))


def format_content_html(content: str) -> str:
    """
    Converts the model's markdown-like output into the HTML fragment every
    renderer works from: bold, headings, bullet lists and paragraphs.
    """
    if not content:
        return ""

    formatted = html.escape(content, quote=False)
    formatted = _BOLD.sub(r"<strong>\1</strong>", formatted)
    formatted = _H3.sub(r"<h3>\1</h3>", formatted)
    formatted = _H2_AS_H3.sub(r"<h3>\1</h3>", formatted)
    formatted = _H1_AS_H2.sub(r"<h2>\1</h2>", formatted)
    formatted = _BULLET.sub(r"<li>\1</li>", formatted)

    processed = []
    for para in formatted.split("\n\n"):
        para = para.strip()
        if not para:
            continue
        if para.startswith("<h"):
            processed.append(para)
        elif "<li>" in para:
            processed.append(f"<ul>{para}</ul>")
        elif "\n" not in para and _looks_like_heading(para):
            processed.append(f"<h3>{para}</h3>")
        else:
            processed.append(f"<p>{para}</p>")
    return "".join(processed)


def _title_for(content_type: Optional[str]) -> str:
    content_type = content_type or "content"
    return content_type[:1].upper() + content_type[1:]


def _word_count_for(request: ExportRequest) -> int:
    return round(request.wordCount) if request.wordCount is not None else len(request.content.split())


def build_export_filename(export_format: ExportFormat, content_type: Optional[str], platform: Optional[str], now_ms: Optional[int] = None) -> str:
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    content_type = content_type or "content"
    if export_format in (ExportFormat.TEXT, ExportFormat.MARKDOWN):
        return f"{content_type}-{platform or 'standard'}-{now_ms}.{export_format.value}"
    return f"{content_type}-{now_ms}.{export_format.value}"


# --- Plain Text / Markdown ---

def render_text(request: ExportRequest) -> bytes:
    return request.content.encode("utf-8")


def render_markdown(request: ExportRequest) -> bytes:
    return request.content.encode("utf-8")


# --- HTML ---

HTML_STYLES = """
        body { font-family: Georgia, serif; line-height: 1.8; max-width: 900px; margin: 2rem auto; padding: 2rem; color: #2c3e50; background: #fff; }
        h1 { color: #1e3c72; border-bottom: 3px solid #1e3c72; padding-bottom: 0.5rem; margin-bottom: 1rem; }
        h2 { color: #2c5282; margin-top: 2rem; margin-bottom: 1rem; }
        h3 { color: #2d3748; margin-top: 1.5rem; margin-bottom: 0.75rem; }
        .meta { color: #666; font-size: 0.9rem; margin-bottom: 2rem; padding: 1rem; background: #f7fafc; border-radius: 8px; }
        .content { margin-bottom: 2rem; }
        .content p { margin-bottom: 1rem; }
        .content ul { margin: 1rem 0; padding-left: 2rem; }
        .content li { margin-bottom: 0.5rem; }
        .content strong { color: #1a202c; font-weight: 600; }
        .images-section { margin: 2rem 0; padding: 1.5rem; background: #f7fafc; border-radius: 8px; }
        .images-section h2 { margin-top: 0; color: #2c5282; }
        .images-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(250px, 1fr)); gap: 1rem; margin-top: 1rem; }
        .image-item img { width: 100%; height: 200px; object-fit: cover; border-radius: 8px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); }
        .footer { margin-top: 3rem; padding-top: 1rem; border-top: 1px solid #ddd; color: #999; font-size: 0.85rem; text-align: center; }
"""

HTML_DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{content_type} - AI Writing Studio</title>
    <style>{styles}</style>
</head>
<body>
    <h1>{title}</h1>
    <div class="meta">
        <strong>Tone:</strong> {tone} |
        <strong>Platform:</strong> {platform} |
        <strong>Words:</strong> {word_count} |
        <strong>Generated:</strong> {generated_on}
    </div>
    {images_html}
    <div class="content">{content_html}</div>
    <div class="footer">
        {footer}
    </div>
</body>
</html>"""


def _render_images_html(images: List[str]) -> str:
    if not images:
        return ""
    items = "".join(
        f'<div class="image-item"><img src="{html.escape(url)}" alt="Content image {i + 1}" /></div>'
        for i, url in enumerate(images)
    )
    return (
        '<div class="images-section"><h2>Related Images</h2>'
        f'<div class="images-grid">{items}</div></div>'
    )


def render_html(request: ExportRequest, generated_on: Optional[date] = None) -> bytes:
    generated_on = generated_on or date.today()
    document = HTML_DOCUMENT_TEMPLATE.format(
        content_type=html.escape(request.contentType or "content"),
        styles=HTML_STYLES,
        title=html.escape(_title_for(request.contentType)),
        tone=html.escape(request.tone or "professional"),
        platform=html.escape(request.platform or "standard"),
        word_count=_word_count_for(request),
        generated_on=generated_on.isoformat(),
        images_html=_render_images_html(request.images),
        content_html=format_content_html(request.content),
        footer=FOOTER_TEXT,
    )
    return document.encode("utf-8")


# --- PDF ---

MM = 72 / 25.4
PAGE_WIDTH, PAGE_HEIGHT = fitz.paper_size("a4")
MARGIN = 20 * MM
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
LINE_HEIGHT = 6 * MM
IMAGE_HEIGHT = 60 * MM

FONT_REGULAR = "helv"
FONT_BOLD = "hebo"
BLACK = (0, 0, 0)
GREY = (100 / 255, 100 / 255, 100 / 255)
LIGHT_GREY = (150 / 255, 150 / 255, 150 / 255)
RULE_GREY = (200 / 255, 200 / 255, 200 / 255)


def decode_data_uri(uri: str) -> bytes:
    header, _, payload = uri.partition(",")
    if ";base64" in header:
        return base64.b64decode(payload)
    return payload.encode("utf-8")


def reencode_as_jpeg(raw: bytes, quality: int = 80) -> bytes:
    """Normalises any image Pillow can read into an RGB JPEG the PDF can embed."""
    with Image.open(io.BytesIO(raw)) as img:
        buffer = io.BytesIO()
        img.convert("RGB").save(buffer, format="JPEG", quality=quality)
        return buffer.getvalue()


async def fetch_export_images(
    urls: List[str],
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout_seconds: float = 10.0,
) -> List[bytes]:
    """
    Re-fetches each image and re-encodes it as JPEG. An image that cannot be
    fetched or decoded is logged and left out; the rest still export.
    """
    encoded: List[bytes] = []
    async with httpx.AsyncClient(timeout=timeout_seconds, transport=transport, follow_redirects=True) as client:
        for index, url in enumerate(urls):
            try:
                if url.startswith("data:"):
                    raw = decode_data_uri(url)
                else:
                    response = await client.get(url)
                    response.raise_for_status()
                    raw = response.content
                encoded.append(reencode_as_jpeg(raw))
            except Exception as e:
                print(f"[EXPORT] Failed to load image {index}: {e}")
    return encoded


def wrap_text(text: str, max_width: float, fontname: str = FONT_REGULAR, fontsize: float = 11) -> List[str]:
    """Greedy word wrap measured with the PDF font metrics."""
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if current and fitz.get_text_length(candidate, fontname=fontname, fontsize=fontsize) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


class _PdfWriter:
    """Keeps the running vertical cursor and starts a new page when it runs out."""

    def __init__(self):
        self.doc = fitz.open()
        self.page = self.doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        self.y = MARGIN
        self.fontname = FONT_REGULAR

    def ensure_space(self, required: float) -> bool:
        if self.y + required > PAGE_HEIGHT - MARGIN:
            self.page = self.doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
            self.y = MARGIN
            return True
        return False

    def text(self, text: str, x: float, fontsize: float, fontname: Optional[str] = None, color=BLACK):
        self.page.insert_text((x, self.y), text, fontsize=fontsize, fontname=fontname or self.fontname, color=color)

    def wrapped(self, text: str, indent: float = 0, fontsize: float = 11, bullet: bool = False) -> None:
        lines = wrap_text(text, CONTENT_WIDTH - indent, fontname=self.fontname, fontsize=fontsize)
        for i, line in enumerate(lines):
            self.ensure_space(LINE_HEIGHT)
            if bullet and i == 0:
                self.page.draw_circle((MARGIN + 2 * MM, self.y - 1 * MM), 0.8 * MM, color=BLACK, fill=BLACK)
            self.text(line, MARGIN + indent, fontsize)
            self.y += LINE_HEIGHT

    def heading(self, text: str, fontsize: float, space_before: float, space_after: float, required: float) -> None:
        self.ensure_space(required)
        self.y += space_before
        self.text(text, MARGIN, fontsize, fontname=FONT_BOLD)
        self.y += space_after

    def image(self, jpeg_bytes: bytes) -> None:
        self.ensure_space(70 * MM)
        rect = fitz.Rect(MARGIN, self.y, MARGIN + CONTENT_WIDTH, self.y + IMAGE_HEIGHT)
        self.page.insert_image(rect, stream=jpeg_bytes, keep_proportion=False)
        self.y += IMAGE_HEIGHT + 5 * MM

    def render_node(self, node) -> None:
        if isinstance(node, Comment):
            return
        if isinstance(node, NavigableString):
            text = str(node).strip()
            if text:
                self.ensure_space(10 * MM)
                self.wrapped(text)
            return
        if not isinstance(node, Tag):
            return

        text = node.get_text().strip()
        if node.name == "h2":
            self.heading(text, 16, 5 * MM, 10 * MM, 15 * MM)
        elif node.name == "h3":
            self.heading(text, 13, 3 * MM, 8 * MM, 12 * MM)
        elif node.name == "p":
            self.ensure_space(10 * MM)
            if text:
                self.wrapped(text)
                self.y += 3 * MM
        elif node.name == "ul":
            for item in node.find_all("li", recursive=False):
                item_text = item.get_text().strip()
                if item_text:
                    self.ensure_space(8 * MM)
                    self.wrapped(item_text, indent=6 * MM, bullet=True)
            self.y += 3 * MM
        elif node.name == "strong":
            self.fontname = FONT_BOLD
            for child in node.children:
                self.render_node(child)
            self.fontname = FONT_REGULAR
        else:
            for child in node.children:
                self.render_node(child)

    def add_footers(self) -> None:
        total_pages = self.doc.page_count
        for number, page in enumerate(self.doc, start=1):
            footer_y = PAGE_HEIGHT - 10 * MM
            footer_width = fitz.get_text_length(FOOTER_TEXT, fontname=FONT_REGULAR, fontsize=8)
            page.insert_text(((PAGE_WIDTH - footer_width) / 2, footer_y), FOOTER_TEXT,
                             fontsize=8, fontname=FONT_REGULAR, color=LIGHT_GREY)
            label = f"Page {number} of {total_pages}"
            label_width = fitz.get_text_length(label, fontname=FONT_REGULAR, fontsize=8)
            page.insert_text((PAGE_WIDTH - MARGIN - label_width, footer_y), label,
                             fontsize=8, fontname=FONT_REGULAR, color=LIGHT_GREY)

    def finish(self) -> bytes:
        self.add_footers()
        data = self.doc.tobytes()
        self.doc.close()
        return data


def build_pdf(request: ExportRequest, images: List[bytes], generated_on: Optional[date] = None) -> bytes:
    """Lays out the draft on A4 pages. `images` are already JPEG-encoded."""
    generated_on = generated_on or date.today()
    writer = _PdfWriter()

    writer.text(_title_for(request.contentType), MARGIN, 24, fontname=FONT_BOLD)
    writer.y += 12 * MM

    meta = (f"Tone: {request.tone or 'professional'} | Platform: {request.platform or 'standard'} | "
            f"Words: {_word_count_for(request)} | Generated: {generated_on.isoformat()}")
    writer.text(meta, MARGIN, 10, color=GREY)
    writer.y += 10 * MM

    writer.page.draw_line((MARGIN, writer.y), (PAGE_WIDTH - MARGIN, writer.y), color=RULE_GREY)
    writer.y += 10 * MM

    if images:
        writer.heading("Related Images", 14, 0, 8 * MM, 60 * MM)
        for index, jpeg_bytes in enumerate(images):
            try:
                writer.image(jpeg_bytes)
            except Exception as e:
                print(f"[EXPORT] Failed to embed image {index}: {e}")
        writer.y += 5 * MM

    writer.ensure_space(20 * MM)
    soup = BeautifulSoup(format_content_html(request.content), "html.parser")
    for node in soup.contents:
        writer.render_node(node)

    return writer.finish()


async def render_pdf(
    request: ExportRequest,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout_seconds: float = 10.0,
) -> bytes:
    images = await fetch_export_images(request.images, transport=transport, timeout_seconds=timeout_seconds)
    return await asyncio.to_thread(build_pdf, request, images)


# --- Export Dispatcher ---

async def export_content(
    export_format: ExportFormat,
    request: ExportRequest,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    timeout_seconds: float = 10.0,
) -> Tuple[bytes, str, str]:
    """Returns (body, media type, download filename) for the requested format."""
    if not request.content or not request.content.strip():
        raise ValueError("Content is required")

    if export_format == ExportFormat.PDF:
        body = await render_pdf(request, transport=transport, timeout_seconds=timeout_seconds)
    else:
        body = SYNC_RENDERERS[export_format](request)

    print(f"[EXPORT] Rendered {export_format.value} export ({len(body)} bytes).")
    filename = build_export_filename(export_format, request.contentType, request.platform)
    return body, MEDIA_TYPES[export_format], filename


SYNC_RENDERERS: Dict[ExportFormat, Callable[[ExportRequest], bytes]] = {
    ExportFormat.TEXT: render_text,
    ExportFormat.MARKDOWN: render_markdown,
    ExportFormat.HTML: render_html,
}
