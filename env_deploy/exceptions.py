class EnvDeployError(Exception):
    """Base class of the errors reported by env-deploy."""


class MissingDependency(EnvDeployError):
    """A required external program is not installed."""

    def __init__(self, program: str) -> None:
        super().__init__(f"Missing required program: {program}")
        self.program = program


class ConfigNotFound(EnvDeployError):
    """An explicitly given env file doesn't exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Env file not found: {path}")
        self.path = path


class CommandAborted(EnvDeployError):
    """The user cancelled the run (signal or closed input)."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason
