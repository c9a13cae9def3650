from collections.abc import Mapping

from env_deploy.template_engines import base, shell

ENGINES = {"shell": shell.ShellEngine}


def create_engine(environment: Mapping[str, str], type_: str = "shell") -> base.BaseEngine:
    """Create a template engine."""
    return ENGINES[type_](environment)
