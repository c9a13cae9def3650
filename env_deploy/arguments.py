"""Detection of the files referenced by the command line."""

import logging
import os
from collections.abc import Iterable, Iterator

_LOG = logging.getLogger(__name__)


def path_candidates(token: str) -> Iterator[str]:
    """
    Get the strings of a command line token that may be a path.

    A plain token is a candidate as a whole. For a flag (starting with ``-``) every suffix
    following a ``=`` is a candidate, e.g. ``--set=a=b/c`` gives ``a=b/c`` and ``b/c``.
    """
    if not token.startswith("-"):
        yield token
        return
    for index, char in enumerate(token):
        if char == "=":
            yield token[index + 1 :]


def find_candidate_files(tokens: Iterable[str]) -> list[str]:
    """Get the existing files referenced by the tokens, without duplicates, in encounter order."""
    result: list[str] = []
    seen: set[str] = set()
    for token in tokens:
        for candidate in path_candidates(token):
            if not candidate or not os.path.isfile(candidate):
                continue
            # The same file may be written differently, e.g. "x.yaml" and "./x.yaml"
            real_path = os.path.realpath(candidate)
            if real_path in seen:
                continue
            _LOG.debug("Found the file %s in the argument %s", candidate, token)
            seen.add(real_path)
            result.append(candidate)
    return result
