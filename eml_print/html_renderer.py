"""Build print-ready HTML documents from parsed email messages."""

import base64
import html
import re
import logging
from typing import Dict, Iterable, Optional, Set, Tuple

from .attachment_handler import Attachment
from .config import ConversionConfig
from .message import ParsedMessage
from .utils import format_display_date

logger = logging.getLogger(__name__)

CID_PATTERN = re.compile(r'src=["\']cid:([^"\']+)["\']', re.IGNORECASE)

# Microsoft Word section markup forces page breaks in Chromium
WORD_PAGE_RULE = re.compile(r'@page\s+\w+\s*\{[^}]*\}', re.IGNORECASE)
WORD_SECTION_RULE = re.compile(r'div\.WordSection\d+\s*\{[^}]*\}', re.IGNORECASE)
WORD_SECTION_DIV = re.compile(r'<div\s+class=["\']?WordSection\d+["\']?', re.IGNORECASE)

EMAIL_CSS = """
@page {{ size: {page_size}; margin: {margin}; }}
/* Override Microsoft Word page sections */
div[class*="WordSection"] {{
  page: auto !important;
  margin: 0 !important;
  padding: 0 !important;
}}
blockquote {{
  page-break-inside: avoid !important;
  break-inside: avoid !important;
}}
html, body {{
  margin: 0 !important;
  padding: 0 !important;
  width: 100%;
}}
body {{
  font-family: {font_family};
  font-size: {font_size}pt;
  line-height: 1.4 !important;
}}
p {{
  margin-top: 0 !important;
  margin-bottom: 4pt !important;
}}
img {{
  max-width: 100% !important;
  height: auto !important;
  max-height: {max_image_height} !important;
}}
.email-header {{
  margin-bottom: 8pt !important;
  padding-bottom: 4pt !important;
  border-bottom: 1px solid #ccc;
}}
.attachments {{
  margin-top: 12pt;
  padding-top: 4pt;
  border-top: 1px solid #ccc;
}}
.hdr-attachments {{
  font-weight: bold;
}}
"""


def to_data_url(content: bytes, content_type: str) -> str:
    """Encode bytes as a base64 data URL."""
    b64_data = base64.b64encode(content).decode('ascii')
    return f"data:{content_type};base64,{b64_data}"


def extract_cid_images(attachments: Iterable[Attachment]) -> Dict[str, str]:
    """
    Map inline image Content-IDs to data URLs.

    Args:
        attachments: Message attachments

    Returns:
        Dict mapping normalized CID to base64 data URIs
    """
    cid_images = {}

    for att in attachments:
        cid = att.clean_content_id
        if cid and att.is_image:
            cid_images[cid] = to_data_url(att.content, att.content_type)
            logger.debug(f"Extracted CID image: {cid} ({att.size} bytes)")

    return cid_images


def replace_cid_references(
    html_content: str,
    cid_images: Dict[str, str]
) -> Tuple[str, Set[str]]:
    """
    Replace cid: references in HTML with base64 data URIs.

    References without a matching image are left as they are.

    Args:
        html_content: HTML string with cid: references
        cid_images: Dict mapping CID to data URIs

    Returns:
        (rewritten HTML, set of CIDs that were substituted)
    """
    inlined: Set[str] = set()

    def replace_cid(match):
        cid = match.group(1).replace('<', '').replace('>', '').strip()
        data_url = cid_images.get(cid)
        if data_url is None:
            return match.group(0)
        inlined.add(cid)
        return f'src="{data_url}"'

    return CID_PATTERN.sub(replace_cid, html_content), inlined


def strip_word_sections(html_content: str) -> str:
    """Remove Word @page rules and WordSection wrappers."""
    html_content = WORD_PAGE_RULE.sub('', html_content)
    html_content = WORD_SECTION_RULE.sub('', html_content)
    return WORD_SECTION_DIV.sub('<div', html_content)


def text_to_html(text: str) -> str:
    """Render a plain-text body as escaped HTML."""
    safe_body = html.escape(text).replace("\n", "<br />")
    return f"<p>{safe_body}</p>"


def _header_block(message: ParsedMessage, config: ConversionConfig) -> str:
    rows = [
        f"<div><strong>From:</strong> {html.escape(message.from_header or 'Unknown')}</div>",
        f"<div><strong>To:</strong> {html.escape(message.to_header or 'Unknown')}</div>",
    ]
    if message.cc_header:
        rows.append(f"<div><strong>Cc:</strong> {html.escape(message.cc_header)}</div>")
    if message.subject:
        rows.append(f"<div><strong>Subject:</strong> {html.escape(message.subject)}</div>")
    if message.date:
        display_date = format_display_date(message.date, config.timezone)
        rows.append(f"<div><strong>Date:</strong> {html.escape(display_date)}</div>")

    return (
        '<div class="email-header">\n'
        '  <div class="hdr-meta">\n    '
        + '\n    '.join(rows)
        + '\n  </div>\n</div>'
    )


def _attachment_list(attachments: Iterable[Attachment], inline_cids: Set[str]) -> str:
    items = [
        f"<li>{html.escape(att.filename)}</li>"
        for att in attachments
        if att.filename and att.clean_content_id not in inline_cids
    ]
    if not items:
        return ""

    return (
        '<div class="attachments"><div class="hdr-attachments">Attachments</div>'
        f"<ul>{''.join(items)}</ul></div>"
    )


def build_email_html(
    message: ParsedMessage,
    config: Optional[ConversionConfig] = None
) -> Tuple[str, Set[str]]:
    """
    Build a complete HTML document with email header, body and attachment list.

    Args:
        message: Parsed email message
        config: Optional configuration

    Returns:
        (HTML document string, set of CIDs inlined as data URLs)
    """
    config = config or ConversionConfig()

    if message.html:
        body_html = message.html
    elif message.text:
        body_html = text_to_html(message.text)
    else:
        body_html = ""

    cid_images = extract_cid_images(message.attachments)
    body_html, inline_cids = replace_cid_references(body_html, cid_images)
    body_html = strip_word_sections(body_html)

    css = EMAIL_CSS.format(
        page_size=config.get_page_format(),
        margin=config.margin,
        font_family=config.font_family,
        font_size=config.font_size,
        max_image_height=config.max_image_height,
    )

    document = f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8" />
  <title>{html.escape(message.subject or 'Email')}</title>
  <style>{css}</style>
</head>
<body>
{_header_block(message, config)}
{body_html}
{_attachment_list(message.attachments, inline_cids)}
</body>
</html>"""

    return document, inline_cids
