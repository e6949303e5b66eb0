"""
Exception hierarchy for vorbiscomment.

Helpers raise these; the VorbisComment facade turns them into
OperationResult values so none of them escape a session call.
"""

from typing import Optional


class VorbisCommentError(Exception):
    """Base exception for vorbiscomment errors."""
    kind = 'VorbisCommentError'


class FileNotFound(VorbisCommentError):
    """Raised when a target or comment file does not exist."""
    kind = 'FileNotFound'


class FileNotReadable(VorbisCommentError):
    """Raised when a target or comment file exists but cannot be read."""
    kind = 'FileNotReadable'


class EmptyInput(VorbisCommentError):
    """Raised for empty collections, empty comment files and empty value lists."""
    kind = 'EmptyInput'


class MalformedLine(VorbisCommentError):
    """Raised when a comment line lacks the name=value form."""
    kind = 'MalformedLine'

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line


class ExternalToolError(VorbisCommentError):
    """Raised when the vorbiscomment binary fails or cannot be run."""
    kind = 'ExternalToolError'

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ''):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr
