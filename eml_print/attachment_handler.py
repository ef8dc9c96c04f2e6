"""Attachment collection for parsed EML messages."""

import logging
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = 'application/pdf'


@dataclass(frozen=True)
class Attachment:
    """A non-body MIME part of a message."""
    content_type: str
    content: bytes
    filename: Optional[str] = None
    content_id: Optional[str] = None

    @property
    def clean_content_id(self) -> Optional[str]:
        """Content-ID with surrounding angle brackets removed."""
        if not self.content_id:
            return None
        return self.content_id.replace('<', '').replace('>', '').strip()

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith('image/')

    @property
    def is_pdf(self) -> bool:
        return self.content_type == PDF_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.content)


def _is_body_candidate(part: EmailMessage) -> bool:
    """Text parts with no filename that are not marked as attachments."""
    if part.get_content_maintype() != 'text':
        return False
    if part.get_filename():
        return False
    return part.get_content_disposition() != 'attachment'


def _message_bytes(part: EmailMessage) -> bytes:
    """Serialized form of an attached message (message/rfc822 and kin)."""
    payload = part.get_payload()
    if isinstance(payload, list):
        return payload[0].as_bytes() if payload else b''
    return part.get_payload(decode=True) or b''


def _iter_leaf_parts(part: EmailMessage, root: EmailMessage) -> Iterator[EmailMessage]:
    """
    Walk a MIME tree in order, yielding non-container parts.

    Attached messages are yielded whole; their own parts are not visited.
    """
    if part is not root and part.get_content_maintype() == 'message':
        yield part
    elif part.is_multipart():
        for sub_part in part.iter_parts():
            yield from _iter_leaf_parts(sub_part, root)
    else:
        yield part


def extract_attachments(
    msg: EmailMessage,
    body_parts: Iterable[EmailMessage] = ()
) -> List[Attachment]:
    """
    Collect the attachments of an email message in MIME order.

    Inline images referenced by Content-ID are included; they are told
    apart from regular attachments by their content_id.

    Args:
        msg: Parsed email message object
        body_parts: Parts already used as the message body

    Returns:
        List of Attachment objects
    """
    body_ids = {id(part) for part in body_parts}
    attachments = []

    for part in _iter_leaf_parts(msg, msg):
        if part is msg or id(part) in body_ids:
            continue

        # Alternative text renderings of the body are not attachments
        if _is_body_candidate(part):
            continue

        if part.get_content_maintype() == 'message':
            data = _message_bytes(part)
        else:
            data = part.get_payload(decode=True) or b''

        content_id = part.get('Content-ID')

        attachments.append(Attachment(
            content_type=part.get_content_type(),
            content=data,
            filename=part.get_filename(),
            content_id=str(content_id) if content_id else None,
        ))

        logger.debug(
            f"Found attachment: {part.get_filename() or '(unnamed)'} "
            f"[{part.get_content_type()}] ({len(data)} bytes)"
        )

    return attachments
