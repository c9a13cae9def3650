import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional

from env_deploy.sources.base import BaseSource, Environment, Layer
from env_deploy.sources.env_file import EnvFileSource

__all__ = ["BaseSource", "EnvFileSource", "Environment", "Layer", "create_sources", "load_environment"]

_LOG = logging.getLogger(__name__)


def create_sources(
    env_file: Optional[str | Path], default_env_path: str | Path, functions_env_path: str | Path
) -> list[BaseSource]:
    """Get the layers in precedence order, the last one wins."""
    sources: list[BaseSource] = [EnvFileSource(default_env_path, Layer.DEFAULT)]
    if env_file:
        sources.append(EnvFileSource(env_file, Layer.ENV_FILE, required=True))
    sources.append(EnvFileSource(functions_env_path, Layer.FUNCTIONS))
    return sources


def load_environment(
    env_file: Optional[str | Path],
    default_env_path: str | Path = "default.env",
    functions_env_path: str | Path = "functions.env",
    base: Optional[Mapping[str, str]] = None,
) -> Environment:
    """
    Merge the process environment (or ``base``) with the env files.

    An empty ``env_file`` means no target environment; a given one that doesn't exist raises
    ``ConfigNotFound``.
    """
    environment = Environment(os.environ if base is None else base)
    for source in create_sources(env_file, default_env_path, functions_env_path):
        environment = source.apply(environment)
    _LOG.debug("Environment loaded with %d variables", len(environment))
    return environment
