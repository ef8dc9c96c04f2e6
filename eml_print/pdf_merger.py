"""Append PDF attachments to a rendered email body."""

import io
import logging
from typing import Iterable

from pypdf import PdfReader, PdfWriter

from .attachment_handler import Attachment

logger = logging.getLogger(__name__)


def count_pages(pdf_bytes: bytes) -> int:
    """Number of pages in a PDF held in memory."""
    return len(PdfReader(io.BytesIO(pdf_bytes)).pages)


def append_pdf_attachments(body_pdf: bytes, attachments: Iterable[Attachment]) -> bytes:
    """
    Append the pages of every PDF attachment after the body pages.

    Attachments are taken in message order. One that cannot be read as a PDF
    is logged and skipped. Attachments of other types are ignored.

    Args:
        body_pdf: Rendered email body
        attachments: Message attachments

    Returns:
        Merged PDF bytes, or body_pdf unchanged if nothing was appended
    """
    writer = PdfWriter()
    writer.append(PdfReader(io.BytesIO(body_pdf)))
    merged = 0

    for att in attachments:
        if not att.is_pdf or not att.content:
            continue

        try:
            reader = PdfReader(io.BytesIO(att.content))
            pages = list(reader.pages)
        except Exception as e:
            logger.warning(f"Failed to merge PDF attachment {att.filename or ''}: {e}")
            continue

        for page in pages:
            writer.add_page(page)
        merged += 1
        logger.debug(f"Appended {len(pages)} page(s) from {att.filename or 'attachment'}")

    if not merged:
        return body_pdf

    output = io.BytesIO()
    writer.write(output)
    return output.getvalue()
