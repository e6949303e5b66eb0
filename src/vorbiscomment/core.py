"""
VorbisComment - session facade over the vorbiscomment binary.

Wraps the `vorbiscomment` program from Xiph's vorbis-tools: list, append and
write Ogg Vorbis comments through argument vectors (no shell), and report
failures as OperationResult values instead of exceptions.
"""

import os
import shlex
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .comments import (
    CommentsInput,
    FieldValuesType,
    parse_listing,
    normalize,
    read_comment_file,
)
from .errors import (
    VorbisCommentError,
    FileNotFound,
    FileNotReadable,
    MalformedLine,
    ExternalToolError,
)
from .utils import Config, decode_output

logger = logging.getLogger(__name__)

MODE_FLAGS = {
    'list': '-l',
    'append': '-a',
    'write': '-w',
}


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one session call: ok with no error, or failed with one."""
    ok: bool
    error: Optional[VorbisCommentError] = None

    def __post_init__(self):
        if self.ok == (self.error is not None):
            raise ValueError("OperationResult must be either ok or carry an error")

    def __bool__(self) -> bool:
        return self.ok

    @property
    def message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None

    @property
    def kind(self) -> Optional[str]:
        return self.error.kind if self.error is not None else None

    @classmethod
    def success(cls) -> 'OperationResult':
        return cls(True)

    @classmethod
    def failure(cls, error: VorbisCommentError) -> 'OperationResult':
        return cls(False, error)


# ---------- Process Invocation ----------
def _invoke(argv: Sequence[str], timeout: Optional[float] = None,
            merge_stderr: bool = False) -> subprocess.CompletedProcess:
    """
    Run the binary and capture its output.

    Raises:
        ExternalToolError: if the binary cannot be started or times out
    """
    logger.debug(f"Running: {shlex.join(argv)}")
    try:
        return subprocess.run(
            list(argv),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise ExternalToolError(
            f"{argv[0]} did not finish within {timeout} seconds",
            stderr=decode_output(e.stderr))
    except OSError as e:
        raise ExternalToolError(f"Could not run {argv[0]}: {e}")

def _run_checked(argv: Sequence[str], timeout: Optional[float] = None) -> subprocess.CompletedProcess:
    """Run the binary, turning a non-zero exit status into ExternalToolError."""
    proc = _invoke(argv, timeout)
    if proc.returncode != 0:
        stderr = decode_output(proc.stderr)
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else 'no error output'
        raise ExternalToolError(
            f"{argv[0]} exited with status {proc.returncode}: {detail}",
            returncode=proc.returncode,
            stderr=stderr)
    return proc

def tool_version(binary: Optional[Union[str, Path]] = None, timeout: Optional[float] = None) -> str:
    """
    Return the version banner of the vorbiscomment binary, stderr included.

    Raises:
        ExternalToolError: if the binary cannot be run
    """
    proc = _invoke([str(binary or Config.BINARY), '--version'], timeout, merge_stderr=True)
    return decode_output(proc.stdout)


# ---------- Session ----------
class VorbisComment:
    """
    Edit the comments of one Ogg Vorbis file through the vorbiscomment binary.

    Construction never raises: an invalid target is recorded as the last
    result and every later call fails with the same error until the file
    becomes valid. has_error()/last_error() describe the most recent call.

    Examples:
        >>> vc = VorbisComment('/music/track.ogg')
        >>> vc.append(['title=Labyrinth', 'artist=Adam Rogers Quintet'])
        True
        >>> vc.list()
        {'title': ['Labyrinth'], 'artist': ['Adam Rogers Quintet']}
    """

    def __init__(self, audio_path: Union[str, Path], binary: Optional[Union[str, Path]] = None,
                 timeout: Optional[float] = None):
        self.audio_path = Path(audio_path)
        self.binary = str(binary or Config.BINARY)
        self.timeout = timeout if timeout is not None else Config.TIMEOUT
        self.last_result = OperationResult.success()
        try:
            self._check_target()
        except VorbisCommentError as e:
            self._record(OperationResult.failure(e))

    def __repr__(self) -> str:
        return f"VorbisComment({str(self.audio_path)!r}, binary={self.binary!r})"

    # ----- error state -----
    def has_error(self) -> bool:
        """Indicates whether the most recent call failed."""
        return not self.last_result.ok

    def last_error(self) -> Optional[str]:
        """Message of the most recent failure, or None."""
        return self.last_result.message if self.has_error() else None

    def _record(self, result: OperationResult) -> OperationResult:
        if not result.ok:
            logger.warning(f"{self.audio_path}: {result.kind}: {result.message}")
        self.last_result = result
        return result

    def _check_target(self) -> None:
        if not self.audio_path.is_file():
            raise FileNotFound(f"The supplied filename is not a file: {self.audio_path}")
        if not os.access(self.audio_path, os.R_OK):
            raise FileNotReadable(f"The file is not readable: {self.audio_path}")

    def _command(self, mode: str, escaping: bool = False) -> List[str]:
        argv = [self.binary]
        if escaping:
            argv.append('-e')
        argv.extend([MODE_FLAGS[mode], str(self.audio_path)])
        return argv

    # ----- operations -----
    def apply(self, comments: CommentsInput, mode: str = 'append', escaping: bool = False) -> OperationResult:
        """
        Append or write comments and return the full result.

        Args:
            comments: Path to a comment file, flat list of "name=value"
                strings, mapping of name -> value(s), or an explicit
                FromFile/FromPairs/FromGroups source
            mode: 'append' keeps existing comments, 'write' replaces them
            escaping: Pass -e so values may use \\n-style escapes
        """
        if mode not in ('append', 'write'):
            raise ValueError(f"mode must be 'append' or 'write', got {mode!r}")
        try:
            resolved = normalize(comments)
            self._check_target()
            _run_checked(self._command(mode, escaping) + resolved.arguments(), self.timeout)
        except VorbisCommentError as e:
            return self._record(OperationResult.failure(e))
        logger.info(f"{mode} comments on {self.audio_path}")
        return self._record(OperationResult.success())

    def append(self, comments: CommentsInput, escaping: bool = False) -> bool:
        """Append comments non-destructively. Returns True on success."""
        return self.apply(comments, 'append', escaping).ok

    def write(self, comments: CommentsInput, escaping: bool = False) -> bool:
        """Replace all existing comments. Returns True on success."""
        return self.apply(comments, 'write', escaping).ok

    def list(self, associative: bool = True, export_path: Optional[Union[str, Path]] = None,
             escaping: bool = False) -> Union[FieldValuesType, List[str]]:
        """
        List the comments of the audio file.

        Args:
            associative: Return a mapping of name -> values instead of raw lines
            export_path: Also export the comments to this file (-c)
            escaping: Pass -e; values are unescaped in associative mode

        Returns:
            Mapping of name -> values, or the raw "name=value" lines. Empty
            on failure. Lines without '=' are skipped and reported as a
            MalformedLine error while the rest is still returned.
        """
        argv = self._command('list', escaping)
        if export_path:
            argv.extend(['-c', str(export_path)])
        try:
            self._check_target()
            proc = _run_checked(argv, self.timeout)
            if export_path:
                # the listing goes to the export file instead of stdout
                lines = read_comment_file(export_path)
            else:
                lines = decode_output(proc.stdout).splitlines()
        except OSError as e:
            self._record(OperationResult.failure(
                FileNotReadable(f"Could not read exported comments {export_path}: {e}")))
            return {} if associative else []
        except VorbisCommentError as e:
            self._record(OperationResult.failure(e))
            return {} if associative else []

        if not associative:
            self._record(OperationResult.success())
            return lines

        comments, bad_lines = parse_listing(lines, unescape=escaping)
        if bad_lines:
            self._record(OperationResult.failure(MalformedLine(
                f"{len(bad_lines)} listing line(s) without '=', first: {bad_lines[0]!r}",
                line=bad_lines[0])))
        else:
            self._record(OperationResult.success())
        return comments

    def version(self) -> str:
        """Version banner of this session's binary, or '' if it cannot be run."""
        try:
            proc = _invoke([self.binary, '--version'], self.timeout, merge_stderr=True)
        except ExternalToolError as e:
            self._record(OperationResult.failure(e))
            return ''
        output = decode_output(proc.stdout)
        if proc.returncode != 0:
            self._record(OperationResult.failure(ExternalToolError(
                f"{self.binary} --version exited with status {proc.returncode}",
                returncode=proc.returncode,
                stderr=output)))
        else:
            self._record(OperationResult.success())
        return output
