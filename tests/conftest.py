"""Shared fixtures: synthetic messages, PDFs and a browser stand-in."""

import io
from email.message import EmailMessage
from typing import List, Optional

import pytest
from reportlab.pdfgen import canvas

from eml_print.config import ConversionConfig


def make_pdf(pages: int) -> bytes:
    """Build a PDF with the given number of pages."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer)
    for number in range(pages):
        pdf.drawString(72, 720, f"Page {number + 1}")
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def build_eml(
    subject: str = "Quarterly report",
    sender: str = "Jane Doe <jane@example.com>",
    recipient: str = "john@example.com",
    date: Optional[str] = "Fri, 15 Mar 2024 10:30:00 +1000",
    html: Optional[str] = "<p>Hello</p>",
    text: Optional[str] = None,
    images: Optional[List[tuple]] = None,
    files: Optional[List[tuple]] = None,
) -> bytes:
    """
    Build raw EML bytes.

    images: (content_id, subtype, data) tuples attached as related parts
    files: (filename, maintype, subtype, data) tuples attached as attachments
    """
    msg = EmailMessage()
    msg['Subject'] = subject
    msg['From'] = sender
    msg['To'] = recipient
    if date:
        msg['Date'] = date

    if text is not None:
        msg.set_content(text)
        if html is not None:
            msg.add_alternative(html, subtype='html')
    elif html is not None:
        msg.set_content(html, subtype='html')
    else:
        msg.set_content("")

    if images:
        body = msg.get_body(preferencelist=('html',))
        for content_id, subtype, data in images:
            body.add_related(data, maintype='image', subtype=subtype, cid=f"<{content_id}>")

    for filename, maintype, subtype, data in files or []:
        msg.add_attachment(data, maintype=maintype, subtype=subtype, filename=filename)

    return msg.as_bytes()


class FakeSession:
    """Render session that returns a fixed-length PDF instead of launching Chromium."""

    instances: List["FakeSession"] = []

    def __init__(self, config: Optional[ConversionConfig] = None, pages: int = 1):
        self.config = config or ConversionConfig()
        self.pages = pages
        self.rendered: List[str] = []
        self.starts = 0
        self.restarts = 0
        self.closed = False
        FakeSession.instances.append(self)

    def __enter__(self):
        self.starts += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    def restart(self):
        self.restarts += 1

    def render_pdf(self, html_content: str) -> bytes:
        self.rendered.append(html_content)
        return make_pdf(self.pages)


@pytest.fixture
def fake_session_factory():
    FakeSession.instances = []
    yield FakeSession
    FakeSession.instances = []


@pytest.fixture
def config():
    return ConversionConfig()
