"""EML parsing into the structure the converter works with."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from typing import List, Optional

from .attachment_handler import Attachment, extract_attachments
from .utils import parse_email_date

logger = logging.getLogger(__name__)


class EmlParseError(ValueError):
    """Raised when a file cannot be read as an email message."""


@dataclass
class ParsedMessage:
    """Headers, body and attachments of one email message."""
    subject: str = ""
    from_header: str = ""
    to_header: str = ""
    cc_header: str = ""
    date: Optional[datetime] = None
    html: Optional[str] = None
    text: Optional[str] = None
    attachments: List[Attachment] = field(default_factory=list)


def _header_text(msg: EmailMessage, name: str) -> str:
    value = msg[name]
    return str(value).strip() if value is not None else ""


def _part_text(part: EmailMessage) -> str:
    """Decode a text part, tolerating unknown or wrong charsets."""
    try:
        return part.get_content()
    except (LookupError, UnicodeDecodeError):
        payload = part.get_payload(decode=True) or b''
        return payload.decode('utf-8', errors='replace')


def _message_date(msg: EmailMessage) -> Optional[datetime]:
    try:
        header = msg['date']
    except (ValueError, TypeError, IndexError) as e:
        logger.debug(f"Unparsable Date header: {e}")
        return None

    if header is None:
        return None
    return parse_email_date(str(header))


def parse_eml(data: bytes) -> ParsedMessage:
    """
    Parse raw EML bytes.

    Args:
        data: Raw message bytes

    Returns:
        ParsedMessage

    Raises:
        EmlParseError: if the bytes hold no message headers
    """
    if not data or not data.strip():
        raise EmlParseError("Empty message")

    msg = BytesParser(policy=policy.default).parsebytes(data)

    if not list(msg.keys()):
        raise EmlParseError("No message headers found")

    html_part = msg.get_body(preferencelist=('html',))
    text_part = msg.get_body(preferencelist=('plain',))
    body_parts = [p for p in (html_part, text_part) if p is not None]

    return ParsedMessage(
        subject=_header_text(msg, 'subject'),
        from_header=_header_text(msg, 'from'),
        to_header=_header_text(msg, 'to'),
        cc_header=_header_text(msg, 'cc'),
        date=_message_date(msg),
        html=_part_text(html_part) if html_part is not None else None,
        text=_part_text(text_part) if text_part is not None else None,
        attachments=extract_attachments(msg, body_parts),
    )


def load_eml(eml_path: str) -> ParsedMessage:
    """
    Read and parse an EML file.

    Args:
        eml_path: Path to the EML file

    Returns:
        ParsedMessage
    """
    with open(eml_path, 'rb') as f:
        return parse_eml(f.read())
