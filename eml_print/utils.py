"""Shared utility functions for EML to PDF conversion."""

import os
import re
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import List, Optional, Set
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

UNKNOWN_NAME = "unknown"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure root logging for command-line use.

    Args:
        verbose: Log debug messages
        quiet: Log errors only
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def sanitize_name(name: str) -> str:
    """
    Restrict a sender/receiver name to characters safe in a filename.

    Every character outside letters, digits, '.', '_' and '-' becomes '_'.

    Args:
        name: The string to sanitize

    Returns:
        The sanitized string, or a placeholder if nothing is left
    """
    safe = re.sub(r'[^A-Za-z0-9._-]', '_', (name or '').strip())
    return safe or UNKNOWN_NAME


def unique_name(base_name: str, existing_names: Set[str]) -> str:
    """
    Make a filename stem unique within a set of names already handed out.

    Args:
        base_name: Desired filename stem
        existing_names: Stems already used in this run (updated in place)

    Returns:
        base_name, or base_name with a numeric suffix
    """
    name = base_name
    counter = 2
    while name in existing_names:
        name = f"{base_name}_{counter}"
        counter += 1

    existing_names.add(name)
    return name


def find_eml_files(root: str, extension: str = ".eml") -> List[str]:
    """
    Recursively collect message files under a directory.

    Args:
        root: Directory to search
        extension: File extension to match, case-insensitive

    Returns:
        Sorted list of file paths
    """
    extension = extension.lower()
    results = []

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            if os.path.splitext(filename)[1].lower() == extension:
                results.append(os.path.join(dirpath, filename))

    return results


def parse_email_date(date_str: str) -> Optional[datetime]:
    """
    Parse an email date string into an aware datetime object.

    Dates without an offset are taken as UTC.

    Args:
        date_str: The date string from an email header

    Returns:
        datetime object or None if parsing fails
    """
    if not date_str:
        return None

    parsed = None
    try:
        parsed = parsedate_to_datetime(date_str.strip())
    except (ValueError, TypeError, IndexError):
        # Formats RFC 2822 parsing does not cover
        for fmt in [
            "%Y-%m-%d %H:%M:%S %z",
            "%Y-%m-%d %H:%M:%S",
            "%Y-%m-%dT%H:%M:%S%z",
            "%Y-%m-%dT%H:%M:%S",
        ]:
            try:
                parsed = datetime.strptime(date_str.strip(), fmt)
                break
            except (ValueError, TypeError):
                continue

    if parsed is None:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed


def format_timestamp(date: Optional[datetime], tz_name: str) -> str:
    """
    Format a message date as 'YYYY_MM_DD_HH_MM' in a fixed timezone.

    Args:
        date: Message date, or None to use the current time
        tz_name: IANA timezone name

    Returns:
        Timestamp string for use in filenames
    """
    tz = ZoneInfo(tz_name)
    local = date.astimezone(tz) if date else datetime.now(tz)
    return local.strftime("%Y_%m_%d_%H_%M")


def format_display_date(date: datetime, tz_name: str) -> str:
    """Format a message date for the rendered header block."""
    return date.astimezone(ZoneInfo(tz_name)).strftime("%a, %d %b %Y %H:%M:%S %Z")
