"""
Utility functions and configuration for vorbiscomment.
"""

import os
import sys
import logging
from pathlib import Path
from typing import Any, List, Optional
from logging.handlers import RotatingFileHandler

# ---------- Constants ----------
EXIT_CODE_SUCCESS = 0
EXIT_CODE_ERROR = 1
EXIT_CODE_USAGE = 2
EXIT_CODE_NO_FILE = 3
EXIT_CODE_PERMISSION = 4
EXIT_CODE_INTERRUPTED = 130

_TRUTHY = ('1', 'true', 'yes')

# ---------- Configuration ----------
class Config:
    """Configuration management with validation."""
    BINARY = '/usr/bin/vorbiscomment'
    TIMEOUT: Optional[float] = None  # None waits for the tool indefinitely
    ENCODING = 'utf-8'
    DEFAULT_VERBOSE = False

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values."""
        if not cls.BINARY:
            raise ValueError("BINARY cannot be empty")
        if cls.TIMEOUT is not None and cls.TIMEOUT <= 0:
            raise ValueError("TIMEOUT must be positive")
        try:
            ''.encode(cls.ENCODING)
        except LookupError:
            raise ValueError(f"Unknown ENCODING: {cls.ENCODING}")

    @classmethod
    def load_from_env(cls) -> None:
        """Load configuration from environment variables, updating class attributes."""
        if os.getenv('VORBISCOMMENT_BINARY'):
            cls.BINARY = os.getenv('VORBISCOMMENT_BINARY')
        if os.getenv('VORBISCOMMENT_TIMEOUT'):
            try:
                cls.TIMEOUT = float(os.getenv('VORBISCOMMENT_TIMEOUT'))
            except ValueError:
                raise ValueError(
                    f"VORBISCOMMENT_TIMEOUT must be a number, got {os.getenv('VORBISCOMMENT_TIMEOUT')!r}")
        if os.getenv('VORBISCOMMENT_ENCODING'):
            cls.ENCODING = os.getenv('VORBISCOMMENT_ENCODING')
        if 'VORBISCOMMENT_VERBOSE' in os.environ:
            cls.DEFAULT_VERBOSE = os.environ['VORBISCOMMENT_VERBOSE'].strip().lower() in _TRUTHY
        cls.validate()

# ---------- Logging Setup ----------
def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rotation and proper formatting."""
    log_level = logging.DEBUG if verbose else logging.INFO

    log_dir = Path('logs')
    log_dir.mkdir(exist_ok=True)

    file_handler = RotatingFileHandler(
        log_dir / 'vorbiscomment.log',
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            file_handler
        ]
    )

# ---------- Small Helpers ----------
def join_for_printing(lst: List[str]) -> str:
    """Join list for display, showing '(none)' for empty lists."""
    return '(none)' if not lst else '; '.join(lst)

def decode_output(data: Any) -> str:
    """Decode captured process output, falling back to latin-1."""
    if data is None:
        return ''
    if isinstance(data, bytes):
        try:
            return data.decode(Config.ENCODING)
        except UnicodeDecodeError:
            return data.decode('latin-1')
    return str(data)
