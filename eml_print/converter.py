"""Core email to PDF conversion logic."""

import os
import html
import logging
from typing import Callable, List, Optional, Set
from dataclasses import dataclass

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer

from .browser import BrowserSession
from .config import ConversionConfig
from .html_renderer import build_email_html
from .message import load_eml
from .output_paths import is_directory_target, resolve_output_path
from .pdf_merger import append_pdf_attachments
from .utils import find_eml_files

logger = logging.getLogger(__name__)

REPORT_FILENAME = "Skipped_Files_Report.pdf"

SessionFactory = Callable[[ConversionConfig], BrowserSession]


@dataclass
class ConversionResult:
    """Result of a single email conversion."""
    success: bool
    source_file: str
    output_path: Optional[str] = None
    error_message: Optional[str] = None


@dataclass
class BatchConversionResult:
    """Result of a batch conversion operation."""
    total_files: int
    successful: int
    failed: int
    results: List[ConversionResult]
    output_folder: str
    cancelled: bool = False
    report_path: Optional[str] = None


def convert_single_email(
    eml_path: str,
    output: Optional[str],
    session: BrowserSession,
    config: Optional[ConversionConfig] = None,
    used_names: Optional[Set[str]] = None
) -> ConversionResult:
    """
    Convert a single EML file to PDF.

    Errors are not caught here; batch callers decide whether to carry on.

    Args:
        eml_path: Path to the EML file
        output: Output file path or directory (None for the default folder)
        session: Running browser session
        config: Optional configuration
        used_names: Filename stems already used in this run

    Returns:
        ConversionResult for the written file
    """
    config = config or ConversionConfig()

    message = load_eml(eml_path)
    pdf_path = resolve_output_path(eml_path, message, output, config, used_names)

    logger.info(f"Converting {eml_path} -> {pdf_path}")

    document, inline_cids = build_email_html(message, config)
    logger.debug(f"Inlined {len(inline_cids)} image(s)")

    # Render with headless Chromium to preserve the email's own CSS/layout
    body_pdf = session.render_pdf(document)
    merged_pdf = append_pdf_attachments(body_pdf, message.attachments)

    parent = os.path.dirname(pdf_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(pdf_path, 'wb') as f:
        f.write(merged_pdf)

    logger.info(f"Saved PDF to {pdf_path}")

    return ConversionResult(
        success=True,
        source_file=eml_path,
        output_path=pdf_path
    )


def convert_batch(
    input_folder: str,
    output_folder: Optional[str] = None,
    config: Optional[ConversionConfig] = None,
    session_factory: SessionFactory = BrowserSession,
    progress_callback: Optional[Callable[[int, int, str], bool]] = None
) -> BatchConversionResult:
    """
    Convert all EML files under a folder to PDF.

    One browser is shared by the whole batch and relaunched every
    config.restart_every conversions. A file that fails is logged and
    skipped.

    Args:
        input_folder: Folder searched recursively for EML files
        output_folder: Output folder (default: input_folder/output)
        config: Optional configuration
        session_factory: Callable building a browser session from the config
        progress_callback: Optional callback(current, total, filename) -> continue
                          Return False to cancel

    Returns:
        BatchConversionResult with statistics and details
    """
    config = config or ConversionConfig()

    if output_folder and not is_directory_target(output_folder):
        raise ValueError(f"Output for a folder of messages must be a directory: {output_folder}")

    # Setup output folder
    if output_folder is None:
        output_folder = os.path.join(input_folder, config.output_dirname)
    os.makedirs(output_folder, exist_ok=True)

    eml_files = find_eml_files(input_folder, config.extension)
    logger.info(f"Found {len(eml_files)} EML files")

    results = []
    used_names: Set[str] = set()
    successful = 0
    failed = 0
    cancelled = False

    if eml_files:
        with session_factory(config) as session:
            for i, eml_path in enumerate(eml_files):
                eml_file = os.path.basename(eml_path)

                # Check for cancellation via callback
                if progress_callback:
                    should_continue = progress_callback(i, len(eml_files), eml_file)
                    if not should_continue:
                        cancelled = True
                        break

                if i > 0 and i % config.restart_every == 0:
                    session.restart()

                try:
                    result = convert_single_email(
                        eml_path, output_folder, session, config, used_names
                    )
                    successful += 1
                    logger.info(f"Converted {eml_file}")
                except Exception as e:
                    logger.error(f"Failed: {eml_file}: {e}")
                    result = ConversionResult(
                        success=False,
                        source_file=eml_path,
                        error_message=str(e)
                    )
                    failed += 1

                results.append(result)

    # Final progress callback
    if progress_callback and not cancelled:
        progress_callback(len(eml_files), len(eml_files), "Complete")

    return BatchConversionResult(
        total_files=len(eml_files),
        successful=successful,
        failed=failed,
        results=results,
        output_folder=output_folder,
        cancelled=cancelled
    )


def convert_path(
    input_path: str,
    output: Optional[str] = None,
    config: Optional[ConversionConfig] = None,
    session_factory: SessionFactory = BrowserSession,
    progress_callback: Optional[Callable[[int, int, str], bool]] = None
) -> BatchConversionResult:
    """
    Convert one EML file or every EML file under a directory.

    Args:
        input_path: EML file or directory
        output: Output file path or directory
        config: Optional configuration
        session_factory: Callable building a browser session from the config
        progress_callback: Passed through to convert_batch

    Returns:
        BatchConversionResult (a single file counts as a batch of one)

    Raises:
        FileNotFoundError: if input_path does not exist
    """
    config = config or ConversionConfig()

    if os.path.isdir(input_path):
        return convert_batch(input_path, output, config, session_factory, progress_callback)

    if not os.path.isfile(input_path):
        raise FileNotFoundError(f"Input does not exist: {input_path}")

    with session_factory(config) as session:
        result = convert_single_email(input_path, output, session, config)

    return BatchConversionResult(
        total_files=1,
        successful=1,
        failed=0,
        results=[result],
        output_folder=os.path.dirname(result.output_path)
    )


def create_skipped_files_report(
    results: List[ConversionResult],
    output_folder: str
) -> Optional[str]:
    """
    Create a PDF report of skipped/failed files.

    Args:
        results: List of conversion results
        output_folder: Folder to save the report

    Returns:
        Path to the report PDF, or None if no failures
    """
    failed_results = [r for r in results if not r.success]

    if not failed_results:
        return None

    report_path = os.path.join(output_folder, REPORT_FILENAME)

    try:
        doc = SimpleDocTemplate(report_path, pagesize=A4)
        styles = getSampleStyleSheet()

        elements = [
            Paragraph("<b>Skipped Files Report</b>", styles["Title"]),
            Spacer(1, 20),
            Paragraph(
                "<b>The following files were skipped during processing:</b>",
                styles["Normal"]
            ),
            Spacer(1, 10)
        ]

        for result in failed_results:
            safe_entry = html.escape(
                f"{result.source_file}: {result.error_message or 'Unknown error'}"
            )
            elements.append(Paragraph(safe_entry, styles["Normal"]))
            elements.append(Spacer(1, 5))

        doc.build(elements)
        logger.info(f"Skipped files report saved: {report_path}")
        return report_path

    except Exception as e:
        logger.error(f"Error creating skipped files report: {e}")
        return None
