import logging
import re
from collections.abc import Mapping
from pathlib import Path

_LOG = logging.getLogger(__name__)
_OPEN = b"${"
_SENTINEL = b"\x1eENV_DEPLOY_OPEN\x1e"
_REFERENCE_RE = re.compile(rb"\$\{([a-zA-Z_][a-zA-Z0-9_]*)\}")
DOLLAR = "DOLLAR"
_ESCAPED_DOLLAR = b"${" + DOLLAR.encode("ascii") + b"}"


def escape(data: bytes) -> bytes:
    """
    Make every ``$`` that doesn't start a ``${`` token literal.

    The bare dollars are rewritten to ``${DOLLAR}``, which the engines resolve to ``$``.
    Works on bytes, the files are not necessarily text.
    """
    return data.replace(_OPEN, _SENTINEL).replace(b"$", _ESCAPED_DOLLAR).replace(_SENTINEL, _OPEN)


class BaseEngine:
    """Base class for the placeholder substitution engines."""

    def __init__(self, environment: Mapping[str, str]) -> None:
        self._data = dict(environment)
        self._data[DOLLAR] = "$"

    def substitute(self, text: str) -> str:
        """Replace the ``${NAME}`` tokens, the undefined ones are replaced by an empty string."""
        return self.substitute_bytes(text.encode("utf-8")).decode("utf-8")

    def substitute_bytes(self, data: bytes) -> bytes:
        if b"$" not in data:
            return data
        undefined = sorted(
            {name.decode("ascii") for name in _REFERENCE_RE.findall(data)} - set(self._data.keys())
        )
        if undefined:
            _LOG.debug("Undefined variables replaced by an empty string: %s", ", ".join(undefined))
        return self._evaluate(escape(data))

    def substitute_file(self, src_path: Path, dst_path: Path) -> bytes:
        content = self.substitute_bytes(src_path.read_bytes())
        dst_path.write_bytes(content)
        return content

    def _evaluate(self, data: bytes) -> bytes:
        raise NotImplementedError
