"""vorbiscomment – a Python front end for Xiph's vorbiscomment binary."""

__version__ = "0.1.0"

from .errors import (
    VorbisCommentError,
    FileNotFound,
    FileNotReadable,
    EmptyInput,
    MalformedLine,
    ExternalToolError,
)
from .comments import (
    TagEntry,
    CommentSet,
    FromFile,
    FromPairs,
    FromGroups,
    has_string_keys,
    normalize,
    parse_listing,
    read_comment_file,
    write_comment_file,
)
from .core import VorbisComment, OperationResult, tool_version
from .utils import Config
from .verify import read_tags, verify_written

__all__ = [
    "VorbisCommentError",
    "FileNotFound",
    "FileNotReadable",
    "EmptyInput",
    "MalformedLine",
    "ExternalToolError",
    "TagEntry",
    "CommentSet",
    "FromFile",
    "FromPairs",
    "FromGroups",
    "has_string_keys",
    "normalize",
    "parse_listing",
    "read_comment_file",
    "write_comment_file",
    "VorbisComment",
    "OperationResult",
    "tool_version",
    "Config",
    "read_tags",
    "verify_written",
]
