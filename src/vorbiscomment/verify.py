"""
Read-back verification of comments written by the vorbiscomment binary.

Reads the Ogg Vorbis file independently with mutagen, so a write that the
binary reported as successful can be checked against what actually landed
in the file.
"""

import logging
from pathlib import Path
from typing import Dict, List, Union

from mutagen import MutagenError
from mutagen.oggvorbis import OggVorbis

from .comments import CommentsInput, FieldValuesType, FromFile, normalize, parse_listing, unescape_value

logger = logging.getLogger(__name__)


def read_tags(path: Union[str, Path]) -> FieldValuesType:
    """
    Read all comments of an Ogg Vorbis file with mutagen.

    Names are lower-cased since Vorbis comment names compare
    case-insensitively; value order within a name is preserved.

    Raises:
        mutagen.MutagenError: if the file is not a readable Ogg Vorbis stream
    """
    audio = OggVorbis(str(path))
    tags: FieldValuesType = {}
    if audio.tags is None:
        return tags
    for name, values in audio.tags.items():
        tags.setdefault(name.lower(), []).extend(values)
    return tags

def _contains_in_order(stored: List[str], expected: List[str]) -> bool:
    """True if expected is a subsequence of stored."""
    it = iter(stored)
    return all(any(v == s for s in it) for v in expected)

def verify_written(path: Union[str, Path], comments: CommentsInput, mode: str = 'append',
                   escaping: bool = False) -> Dict[str, bool]:
    """
    Verify that comments were stored in the file.

    Args:
        path: Ogg Vorbis file
        comments: The comments that were passed to append/write
        mode: 'write' requires an exact match per name, 'append' only
            requires the expected values to appear in order
        escaping: The comments were written with -e, so expected values
            are unescaped before comparing

    Returns:
        Mapping of lower-cased comment name -> whether it verified
    """
    resolved = normalize(comments)
    if isinstance(resolved, FromFile):
        grouped, _ = parse_listing(resolved.validate())
    else:
        grouped = resolved.as_dict()

    # names compare case-insensitively, like read_tags
    expected: FieldValuesType = {}
    for name, values in grouped.items():
        if escaping:
            values = [unescape_value(v) for v in values]
        expected.setdefault(name.lower(), []).extend(values)

    try:
        stored = read_tags(path)
    except (MutagenError, OSError) as e:
        logger.error(f"Verification failed for {path}: {e}")
        return {name: False for name in expected}

    results = {}
    for name, values in expected.items():
        got = stored.get(name, [])
        if mode == 'write':
            results[name] = (got == values)
        else:
            results[name] = _contains_in_order(got, values)
    return results
