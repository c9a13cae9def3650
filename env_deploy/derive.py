"""Generation of the ``<NAME>_BASE64`` variables."""

import base64
import logging
import re

from env_deploy.sources import Environment, Layer

_LOG = logging.getLogger(__name__)
_NAME_RE = re.compile(r"[a-zA-Z0-9_]+")
SUFFIX = "_BASE64"


def is_eligible(name: str, value: str) -> bool:
    """Whether a ``<name>_BASE64`` variable should be generated for this variable."""
    return _NAME_RE.fullmatch(name) is not None and not name.endswith(SUFFIX) and "\n" not in value


def encode(value: str) -> str:
    return base64.b64encode(value.replace("\n", "").encode("utf-8")).decode("ascii")


def derive_base64(environment: Environment) -> Environment:
    """
    Add a base64 encoded copy of every single line variable.

    All the variables are scanned before adding the derived ones, so a derived variable is never
    derived again. A derived variable replaces an existing one with the same name.
    """
    derived = {name + SUFFIX: encode(value) for name, value in environment.items() if is_eligible(name, value)}
    for name in derived:
        if name in environment and environment.origin(name) != Layer.DERIVED:
            _LOG.warning(
                "The derived variable %s replaces the one from the %s layer",
                name,
                environment.origin(name).value,
            )
    _LOG.debug("Derived %d base64 variables", len(derived))
    return environment.override(derived, Layer.DERIVED)
