"""Diff preview, confirmation and execution of the final command."""

import logging
import os
import shlex
import subprocess  # nosec
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Optional

import yaml

from env_deploy.exceptions import CommandAborted

_LOG = logging.getLogger(__name__)
PROMPT = "Press Enter to run the command, Ctrl+C to abort: "


def format_command(tokens: Iterable[str]) -> str:
    return shlex.join(tokens)


def diff_command(tokens: list[str]) -> Optional[list[str]]:
    """
    Get the command showing what the given command will change.

    ``kubectl apply ...`` gives ``kubectl diff ...`` and ``helm <sub command> ...`` gives
    ``helm diff <sub command> ...``, other commands have no diff.
    """
    if tokens[:2] == ["kubectl", "apply"]:
        return ["kubectl", "diff", *tokens[2:]]
    if tokens[:1] == ["helm"]:
        return ["helm", "diff", *tokens[1:]]
    return None


def preview_diff(tokens: list[str], environment: Mapping[str, str]) -> None:
    """Run the diff variant of the command, its exit status is ignored."""
    command = diff_command(tokens)
    if command is None:
        return
    _LOG.info("Diff: %s", format_command(command))
    try:
        completed = subprocess.run(command, env=dict(environment), check=False)  # nosec
    except OSError as exception:
        _LOG.warning("Cannot run the diff: %s", exception)
        return
    _LOG.debug("The diff exited with %d", completed.returncode)


def kubeconfig_path(environment: Mapping[str, str]) -> Path:
    kubeconfig = environment.get("KUBECONFIG", "")
    first = kubeconfig.split(os.pathsep)[0] if kubeconfig else ""
    if first:
        return Path(first)
    return Path(environment.get("HOME", str(Path.home()))) / ".kube" / "config"


def current_cluster(environment: Mapping[str, str]) -> Optional[str]:
    """Get the current Kubernetes context (and its cluster) from the kubeconfig."""
    path = kubeconfig_path(environment)
    if not path.is_file():
        _LOG.debug("No kubeconfig at %s", path)
        return None
    try:
        with path.open(encoding="utf-8") as config_file:
            config = yaml.load(config_file, Loader=yaml.SafeLoader) or {}
    except yaml.YAMLError:
        _LOG.warning("Cannot read the kubeconfig %s", path, exc_info=True)
        return None
    context_name = config.get("current-context")
    if not context_name:
        return None
    for context in config.get("contexts") or []:
        if context.get("name") == context_name:
            cluster = (context.get("context") or {}).get("cluster")
            if cluster and cluster != context_name:
                return f"{context_name} (cluster: {cluster})"
    return str(context_name)


def environment_info(
    env_file: str,
    default_env_path: str | Path,
    functions_env_path: str | Path,
    files: Iterable[str | Path],
    environment: Mapping[str, str],
    print_cluster: bool = False,
) -> list[str]:
    """Get the lines describing where the values used by the command come from."""
    lines = [
        f"Env file: {env_file or '(none)'}",
        f"Default env file: {_describe_optional(default_env_path)}",
        f"Functions env file: {_describe_optional(functions_env_path)}",
    ]
    names = [str(path) for path in files]
    if names:
        lines.append(f"Substituted files: {', '.join(names)}")
    if print_cluster:
        lines.append(f"Kubernetes cluster: {current_cluster(environment) or '(unknown)'}")
    return lines


def _describe_optional(path: str | Path) -> str:
    return str(path) if Path(path).is_file() else f"{path} (missing)"


def confirm(command: list[str], info: Iterable[str], ask: Optional[Callable[[str], str]] = None) -> None:
    """
    Show the command and wait for the user.

    Any answer continues, aborting is done with an interruption; a closed input aborts.
    """
    for line in info:
        print(line)
    print(f"Command: {format_command(command)}")
    try:
        (ask or input)(PROMPT)
    except EOFError as exception:
        raise CommandAborted("No confirmation") from exception


def run(command: list[str], environment: Mapping[str, str]) -> int:
    """Run the command with the inherited standard streams and return its exit status."""
    _LOG.info("Running: %s", format_command(command))
    completed = subprocess.run(command, env=dict(environment), check=False)  # nosec
    _LOG.debug("The command exited with %d", completed.returncode)
    if completed.returncode < 0:
        # Killed by a signal, same convention as the shells
        return 128 - completed.returncode
    return completed.returncode
