"""
Comment data model and normalization for vorbiscomment.

Caller input comes in several shapes: a path to a comment file, a flat list
of "name=value" strings, a mapping of name -> value, or a mapping of
name -> list of values. Everything is reduced to one of two canonical forms
before the binary is called: a validated FromFile (handed to the tool with -c)
or a CommentSet (handed to the tool as one -t argument per entry).
"""

import os
import re
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from .errors import EmptyInput, FileNotFound, FileNotReadable, MalformedLine
from .utils import Config, decode_output

logger = logging.getLogger(__name__)

FieldValuesType = Dict[str, List[str]]

# PHP-style array keys: ints and canonical decimal-integer strings are list indexes
_NUMERIC_KEY = re.compile(r'^(0|-?[1-9][0-9]*)$')

# Vorbis field names are ASCII 0x20..0x7D, '=' excluded
_BAD_NAME_CHARS = re.compile(r'[^\x20-\x3c\x3e-\x7d]')

# NUL can never reach argv; other C0 controls except tab/newline/CR are dropped too
_BAD_VALUE_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')

# Escapes understood by `vorbiscomment -e`
_ESCAPES = {'n': '\n', 'r': '\r', '0': '\0', '\\': '\\'}
_ESCAPE_RE = re.compile(r'\\(.)', re.DOTALL)


# ---------- Sanitization ----------
def sanitize_name(name: Any) -> str:
    """Reduce a field name to the characters a Vorbis comment name may hold."""
    return _BAD_NAME_CHARS.sub('', str(name).strip())

def sanitize_value(value: Any) -> str:
    """Strip surrounding whitespace and control characters from a value."""
    return _BAD_VALUE_CHARS.sub('', str(value)).strip()

def unescape_value(value: str) -> str:
    """Undo the backslash escapes `vorbiscomment -e` applies when listing."""
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(0)), value)

def split_assignment(text: Any) -> Tuple[str, str]:
    """
    Split a "name=value" string on the first '='.

    Raises:
        MalformedLine: if text is not a string or has no '='
    """
    if not isinstance(text, str) or '=' not in text:
        raise MalformedLine(f"Comment is not of the form name=value: {text!r}", line=str(text))
    name, value = text.split('=', 1)
    return name, value


# ---------- Canonical Form ----------
@dataclass(frozen=True)
class TagEntry:
    """One name/value comment. Names may repeat within a CommentSet."""
    name: str
    value: str

    @property
    def assignment(self) -> str:
        return f"{self.name}={self.value}"


@dataclass(frozen=True)
class CommentSet:
    """Ordered, immutable sequence of sanitized TagEntry values."""
    entries: Tuple[TagEntry, ...]

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def arguments(self) -> List[str]:
        """Build the repeated -t arguments for the binary."""
        args = []
        for entry in self.entries:
            args.extend(['-t', entry.assignment])
        return args

    def lines(self) -> List[str]:
        return [entry.assignment for entry in self.entries]

    def as_dict(self) -> FieldValuesType:
        """Group values by name, keeping first-seen name order and value order."""
        grouped: FieldValuesType = {}
        for entry in self.entries:
            grouped.setdefault(entry.name, []).append(entry.value)
        return grouped


# ---------- Tag Sources ----------
@dataclass(frozen=True)
class FromFile:
    """Comments stored in a file, one name=value per line."""
    path: Path

    def validate(self) -> List[str]:
        """
        Check the file exists, is readable and holds only name=value lines.

        Returns:
            The non-blank lines of the file

        Raises:
            FileNotFound, FileNotReadable, EmptyInput, MalformedLine
        """
        if not self.path.is_file():
            raise FileNotFound(f"The comments input file does not exist: {self.path}")
        if not os.access(self.path, os.R_OK):
            raise FileNotReadable(f"The comments input file is not readable: {self.path}")
        lines = read_comment_file(self.path)
        if not lines:
            raise EmptyInput(f"The comments input file is empty: {self.path}")
        for number, line in enumerate(lines, 1):
            name, _ = split_assignment(line)
            if not name.strip():
                raise MalformedLine(f"Line {number} of {self.path} has an empty name: {line!r}", line=line)
        return lines

    def arguments(self) -> List[str]:
        return ['-c', str(self.path)]


@dataclass(frozen=True)
class FromPairs:
    """Ordered (name, value) pairs; order is kept as given."""
    pairs: Tuple[Tuple[Any, Any], ...]

    def comment_set(self) -> CommentSet:
        if not self.pairs:
            raise EmptyInput("The supplied array of comments was empty.")
        entries = []
        for name, value in self.pairs:
            clean_name = sanitize_name(name)
            clean_value = sanitize_value(value)
            if not clean_name or not clean_value:
                raise MalformedLine(
                    f"Comment needs a non-empty name and value: {name!r}={value!r}",
                    line=f"{name}={value}")
            entries.append(TagEntry(clean_name, clean_value))
        return CommentSet(tuple(entries))


@dataclass(frozen=True)
class FromGroups:
    """Mapping of name -> sequence of values; one entry per value.

    A scalar value (string, number) counts as a single value.
    """
    groups: Mapping[Any, Any]

    def comment_set(self) -> CommentSet:
        if not self.groups:
            raise EmptyInput("The supplied array of comments was empty.")
        entries = []
        for name, values in self.groups.items():
            clean_name = sanitize_name(name)
            if not clean_name:
                raise MalformedLine(f"Comment name is empty after sanitizing: {name!r}", line=str(name))
            if values is None:
                values = []
            elif not _is_value_list(values):
                values = [values]
            if not values:
                raise EmptyInput(f"No values supplied for comment {clean_name!r}.")
            for value in values:
                clean_value = sanitize_value(value)
                if not clean_value:
                    raise EmptyInput(f"Empty value supplied for comment {clean_name!r}.")
                entries.append(TagEntry(clean_name, clean_value))
        return CommentSet(tuple(entries))


TagSource = Union[FromFile, FromPairs, FromGroups]
CommentsInput = Union[TagSource, str, os.PathLike, Mapping, Iterable]


# ---------- Shape Detection ----------
def is_numeric_key(key: Any) -> bool:
    """True for keys a PHP array would treat as list indexes."""
    if isinstance(key, int):
        return True
    return isinstance(key, str) and bool(_NUMERIC_KEY.match(key))

def has_string_keys(mapping: Mapping) -> bool:
    """Indicates whether any key of the mapping is a non-numeric string."""
    return any(isinstance(k, str) and not is_numeric_key(k) for k in mapping.keys())

def _is_value_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))

def to_source(raw: CommentsInput) -> TagSource:
    """
    Classify untyped caller input as one of the explicit tag sources.

    A mapping counts as keyed if any key is a non-numeric string; the
    decision is made once for the whole mapping. Numeric-keyed mappings
    and plain sequences are flat lists of "name=value" strings.

    Raises:
        EmptyInput: if the collection is empty
        MalformedLine: if a flat-list element is not "name=value"
        TypeError: if raw is not a supported shape
    """
    if isinstance(raw, (FromFile, FromPairs, FromGroups)):
        return raw
    if isinstance(raw, (str, os.PathLike)):
        return FromFile(Path(raw))
    if isinstance(raw, (bytes, bytearray)):
        raise TypeError("Comments must be a path, a mapping or a sequence, not bytes")

    if isinstance(raw, Mapping):
        if not raw:
            raise EmptyInput("The supplied array of comments was empty.")
        if has_string_keys(raw):
            return FromGroups(dict(raw))
        items = list(raw.values())
    elif isinstance(raw, Iterable):
        items = list(raw)
    else:
        raise TypeError(f"Unsupported comments type: {type(raw).__name__}")

    if not items:
        raise EmptyInput("The supplied array of comments was empty.")
    return FromPairs(tuple(split_assignment(item) for item in items))

def normalize(raw: CommentsInput) -> Union[FromFile, CommentSet]:
    """
    Resolve caller input into a validated FromFile or a CommentSet.

    Raises:
        FileNotFound, FileNotReadable, EmptyInput, MalformedLine, TypeError
    """
    source = to_source(raw)
    if isinstance(source, FromFile):
        source.validate()
        return source
    comments = source.comment_set()
    logger.debug(f"Normalized {len(comments)} comment(s) from {type(source).__name__}")
    return comments


# ---------- Listing Parser ----------
def parse_listing(lines: Iterable[str], unescape: bool = False) -> Tuple[FieldValuesType, List[str]]:
    """
    Parse "name=value" lines printed by `vorbiscomment -l`.

    Args:
        lines: Output lines
        unescape: Undo -e style escapes in values

    Returns:
        (mapping of name -> values in output order, lines that had no '=')
    """
    comments: FieldValuesType = {}
    bad_lines = []
    for line in lines:
        if '=' not in line:
            if line.strip():
                bad_lines.append(line)
            continue
        name, value = line.split('=', 1)
        value = value.strip()
        if unescape:
            value = unescape_value(value)
        comments.setdefault(name.strip(), []).append(value)
    return comments, bad_lines


# ---------- Comment File I/O ----------
def read_comment_file(path: Union[str, Path]) -> List[str]:
    """
    Read the non-blank lines of a comment file, newlines stripped.

    Decoded like captured tool output: Config.ENCODING, falling back to
    latin-1 for files written in a legacy locale.
    """
    with open(path, 'rb') as f:
        text = decode_output(f.read())
    return [line.rstrip('\r') for line in text.split('\n') if line.strip()]

def write_comment_file(path: Union[str, Path], comments: CommentsInput) -> int:
    """
    Write comments to a file in the import/export format.

    Returns:
        Number of lines written
    """
    resolved = normalize(comments)
    lines = resolved.validate() if isinstance(resolved, FromFile) else resolved.lines()
    with open(path, 'w', encoding=Config.ENCODING) as f:
        for line in lines:
            f.write(line + '\n')
    return len(lines)
