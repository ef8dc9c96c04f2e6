"""
eml-print

Converts EML email files to PDF by printing the message's own HTML/CSS
through headless Chromium. Inline cid: images are embedded as data URLs and
PDF attachments are appended as trailing pages.

Usage:
    # Single message, written to ./output/ beside it
    eml-print message.eml

    # Every .eml under a folder
    eml-print ./emails ./pdfs

    # As a module
    python -m eml_print ./emails
"""

__version__ = "1.0.0"

from .config import ConversionConfig
from .message import ParsedMessage, EmlParseError, parse_eml, load_eml
from .attachment_handler import Attachment
from .html_renderer import build_email_html
from .browser import BrowserSession, RenderTimeoutError
from .pdf_merger import append_pdf_attachments
from .output_paths import resolve_output_path
from .converter import (
    convert_batch,
    convert_path,
    convert_single_email,
    ConversionResult,
    BatchConversionResult,
)
from .cli import main

__all__ = [
    "ConversionConfig",
    "ParsedMessage",
    "EmlParseError",
    "parse_eml",
    "load_eml",
    "Attachment",
    "build_email_html",
    "BrowserSession",
    "RenderTimeoutError",
    "append_pdf_attachments",
    "resolve_output_path",
    "convert_batch",
    "convert_path",
    "convert_single_email",
    "ConversionResult",
    "BatchConversionResult",
    "main",
    "__version__",
]
