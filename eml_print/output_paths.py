"""Destination path resolution for converted messages."""

import os
from typing import Optional, Set

from .config import ConversionConfig
from .contact_extractor import extract_parties
from .message import ParsedMessage
from .utils import format_timestamp, unique_name

PDF_EXTENSION = ".pdf"


def format_output_filename(
    message: ParsedMessage,
    config: ConversionConfig,
    used_names: Optional[Set[str]] = None
) -> str:
    """
    Build '<timestamp>_<sender>_to_<receiver>.pdf' for a message.

    Args:
        message: Parsed email message
        config: Configuration (timezone)
        used_names: Stems already handed out in this run, for uniqueness

    Returns:
        Filename including extension
    """
    timestamp = format_timestamp(message.date, config.timezone)
    sender, receiver = extract_parties(message.from_header, message.to_header)
    stem = f"{timestamp}_{sender}_to_{receiver}"

    if used_names is not None:
        stem = unique_name(stem, used_names)

    return f"{stem}{PDF_EXTENSION}"


def default_output_path(
    eml_path: str,
    message: ParsedMessage,
    output_dir: Optional[str],
    config: ConversionConfig,
    used_names: Optional[Set[str]] = None
) -> str:
    """Computed filename inside output_dir, or the output folder beside the input."""
    directory = output_dir or os.path.join(
        os.path.dirname(os.path.abspath(eml_path)), config.output_dirname
    )
    return os.path.join(directory, format_output_filename(message, config, used_names))


def is_directory_target(output: str) -> bool:
    """An existing directory, or a path without an extension."""
    return os.path.isdir(output) or not os.path.splitext(output)[1]


def resolve_output_path(
    eml_path: str,
    message: ParsedMessage,
    output: Optional[str] = None,
    config: Optional[ConversionConfig] = None,
    used_names: Optional[Set[str]] = None
) -> str:
    """
    Work out where a converted message is written.

    Args:
        eml_path: Source EML file
        message: Parsed email message
        output: Explicit file path or directory, if any
        config: Optional configuration
        used_names: Stems already handed out in this run, for uniqueness

    Returns:
        Output file path
    """
    config = config or ConversionConfig()

    if output and not is_directory_target(output):
        return output

    return default_output_path(eml_path, message, output or None, config, used_names)
