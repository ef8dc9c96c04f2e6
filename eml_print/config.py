"""Configuration management for eml-print."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class ConversionConfig:
    """Configuration options for EML to PDF conversion."""

    # Page settings
    page_size: str = "a4"  # "a4" or "letter"
    margin: str = "0.5in"
    font_family: str = "Arial, Helvetica, sans-serif"
    font_size: int = 11
    max_image_height: str = "150px"

    # Rendering
    render_timeout: float = 60.0  # seconds, per document
    restart_every: int = 50  # relaunch the browser after this many conversions
    headless: bool = True
    browser_executable: Optional[str] = None

    # Naming
    timezone: str = "Australia/Brisbane"
    extension: str = ".eml"
    output_dirname: str = "output"

    def __post_init__(self):
        if self.restart_every < 1:
            raise ValueError(f"restart_every must be positive, got {self.restart_every}")
        if self.render_timeout <= 0:
            raise ValueError(f"render_timeout must be positive, got {self.render_timeout}")

    @classmethod
    def load(cls, path: Path) -> "ConversionConfig":
        """
        Load configuration from a JSON file.

        Unknown keys are ignored. A missing or corrupted file, or one with
        invalid values, yields the defaults.

        Args:
            path: Path to the config file

        Returns:
            ConversionConfig instance
        """
        path = Path(path)

        if not path.exists():
            logger.warning(f"Config file not found, using defaults: {path}")
            return cls()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
        except (json.JSONDecodeError, TypeError, AttributeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable config file {path}: {e}")
            return cls()

    @property
    def render_timeout_ms(self) -> float:
        """Render timeout in milliseconds, as Playwright expects."""
        return self.render_timeout * 1000

    def get_page_format(self) -> str:
        """Get the Chromium paper format name."""
        if self.page_size.lower() == "letter":
            return "Letter"
        return "A4"

    def get_margins(self) -> Dict[str, str]:
        """Get Chromium print margins, the same on every side."""
        return {
            'top': self.margin,
            'right': self.margin,
            'bottom': self.margin,
            'left': self.margin,
        }


# Available page sizes
PAGE_SIZES = ["a4", "letter"]
