import logging
import re
from collections.abc import Iterator, Mapping
from pathlib import Path

from env_deploy.exceptions import ConfigNotFound
from env_deploy.sources.base import BaseSource, Environment, Layer

_LOG = logging.getLogger(__name__)
_ASSIGNMENT_RE = re.compile(r"(?:export\s+)?([a-zA-Z_][a-zA-Z0-9_]*)=(.*)")
_FUNCTION_RE = re.compile(r"(?:function\s+)?([a-zA-Z_][a-zA-Z0-9_-]*)\s*\(\s*\)")
_REFERENCE_RE = re.compile(r"\$\{([a-zA-Z0-9_]+)\}")
_TRAILER_RE = re.compile(r"\s*(?:#.*)?")
_COMMENT_RE = re.compile(r"\s+#.*$")


class EnvFileSource(BaseSource):
    """
    Variables read from a file of shell-like assignments.

    The file is parsed, never executed: only ``NAME=value`` lines (optionally prefixed by
    ``export``) are used, shell functions and other statements are skipped.
    """

    def __init__(self, path: str | Path, layer: Layer, required: bool = False) -> None:
        super().__init__(layer)
        self._path = Path(path)
        self._required = required

    def is_available(self) -> bool:
        if self._path.is_file():
            return True
        if self._required:
            raise ConfigNotFound(str(self._path))
        return False

    def describe(self) -> str:
        return str(self._path)

    def _do_load(self, environment: Environment) -> dict[str, str]:
        with self._path.open(encoding="utf-8") as env_file:
            return parse(env_file.read(), environment, source=str(self._path))


def parse(content: str, known: Mapping[str, str] | None = None, source: str = "<string>") -> dict[str, str]:
    """Parse the assignments of an env file, ``${NAME}`` references are resolved against ``known``."""
    result: dict[str, str] = {}
    lookup = dict(known or {})
    lines = iter(enumerate(content.splitlines(), 1))
    for number, line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        match = _ASSIGNMENT_RE.fullmatch(stripped)
        if match is None:
            function = _FUNCTION_RE.match(stripped)
            if function is not None:
                _LOG.warning("%s:%d: skipping the shell function %s", source, number, function.group(1))
                _skip_block(stripped, lines)
            else:
                _LOG.warning("%s:%d: ignoring a line that is not an assignment: %s", source, number, stripped)
            continue
        name, raw = match.groups()
        if raw[:1] in ('"', "'"):
            quote = raw[0]
            value = _read_quoted(raw, quote, lines, source, number)
            if quote == '"':
                value = _expand(value, lookup)
        else:
            value = _expand(_COMMENT_RE.sub("", raw).strip(), lookup)
        result[name] = value
        lookup[name] = value
    return result


def _closing_quote(line: str, quote: str, start: int) -> int:
    index = line.rfind(quote)
    if index >= start and _TRAILER_RE.fullmatch(line, index + 1):
        return index
    return -1


def _read_quoted(raw: str, quote: str, lines: Iterator[tuple[int, str]], source: str, number: int) -> str:
    # Only the first and the last quote are removed, the inner ones are part of the value
    index = _closing_quote(raw, quote, 1)
    if index >= 0:
        return raw[1:index]
    parts = [raw[1:]]
    for _, line in lines:
        index = _closing_quote(line, quote, 0)
        if index >= 0:
            parts.append(line[:index])
            break
        parts.append(line)
    else:
        _LOG.warning("%s:%d: unterminated quoted value", source, number)
    return "\n".join(parts)


def _skip_block(first_line: str, lines: Iterator[tuple[int, str]]) -> None:
    depth = first_line.count("{") - first_line.count("}")
    seen = "{" in first_line
    while depth > 0 or not seen:
        try:
            _, line = next(lines)
        except StopIteration:
            return
        depth += line.count("{") - line.count("}")
        seen = seen or "{" in line


def _expand(value: str, lookup: Mapping[str, str]) -> str:
    return _REFERENCE_RE.sub(lambda match: lookup.get(match.group(1), ""), value)
