"""Sender and receiver extraction from address headers."""

from dataclasses import dataclass
from email.utils import getaddresses
from typing import List, Optional, Tuple

from .utils import sanitize_name

UNKNOWN_SENDER = "unknown_sender"
UNKNOWN_RECEIVER = "unknown_receiver"


@dataclass
class Contact:
    """Represents an email contact."""
    name: str
    email: str
    contact_type: str  # From, To, Cc


def parse_email_header(header_value: str) -> List[Tuple[str, str]]:
    """
    Parse an email header value into (name, email) tuples.

    Handles formats like:
    - "john@example.com"
    - "John Doe <john@example.com>"
    - "John Doe <john@example.com>, Jane <jane@example.com>"

    Args:
        header_value: Decoded header value string

    Returns:
        List of (name, email) tuples
    """
    if not header_value:
        return []

    addresses = getaddresses([header_value])

    result = []
    for name, email in addresses:
        if email:  # Only include if there's an actual email
            # Use email local part if no name provided
            if not name.strip():
                name = email.split('@')[0] if '@' in email else email
            result.append((name.strip(), email.strip().lower()))

    return result


def first_contact(header_value: str, contact_type: str) -> Optional[Contact]:
    """
    Get the first addressee of a header.

    Args:
        header_value: Decoded header value string
        contact_type: Label for the header (From, To, Cc)

    Returns:
        Contact, or None when the header holds no address
    """
    parsed = parse_email_header(header_value)
    if not parsed:
        return None

    name, email = parsed[0]
    return Contact(name=name, email=email, contact_type=contact_type)


def extract_parties(from_header: str, to_header: str) -> Tuple[str, str]:
    """
    Derive filename-safe sender and receiver names.

    Args:
        from_header: Decoded From header
        to_header: Decoded To header

    Returns:
        (sender, receiver) tuple, already sanitized
    """
    sender = first_contact(from_header, "From")
    receiver = first_contact(to_header, "To")

    sender_name = sender.name if sender else UNKNOWN_SENDER
    receiver_name = receiver.name if receiver else UNKNOWN_RECEIVER

    return sanitize_name(sender_name), sanitize_name(receiver_name)
