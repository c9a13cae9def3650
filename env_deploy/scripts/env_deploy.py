#!/usr/bin/env python3

import argparse
import logging
import shutil
import subprocess  # nosec
import sys
from typing import Optional

from env_deploy import __version__, runner
from env_deploy.arguments import find_candidate_files
from env_deploy.config import Settings
from env_deploy.derive import derive_base64
from env_deploy.exceptions import CommandAborted, EnvDeployError, MissingDependency
from env_deploy.sources import load_environment
from env_deploy.template_engines import create_engine, shell
from env_deploy.transaction import FileTransaction

_LOG = logging.getLogger("env_deploy")
_EPILOG = """\
environment variables (boolean options are enabled with "yes"):
  DEFAULT_ENV_PATH    env file loaded before the given one (default: default.env)
  FUNCTIONS_ENV_PATH  env file loaded after the given one (default: functions.env)
  AUTO_APPROVE        don't ask for a confirmation
  SILENT              no log output
  PRINT_K8S_CLUSTER   show the current Kubernetes cluster
  SUB_MODE            only substitute the files and print them, don't run the command
  LOG_LEVEL           level of the log output (default: INFO)
"""


def _get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="env-deploy",
        description="Substitute the ${VAR} placeholders of a command and of its files, then run it",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("env_file", help='env file to load, "" for none, "help" or "version"')
    parser.add_argument("command", nargs=argparse.REMAINDER, help="the command to run and its arguments")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run the command line tool and return the exit status."""
    argv = sys.argv[1:] if argv is None else argv
    parser = _get_parser()
    if argv[:1] == ["version"]:
        print(f"env-deploy {__version__}")
        return 0
    if len(argv) < 2 or argv[0] == "help":
        parser.print_help()
        return 0
    args = parser.parse_args(argv)

    try:
        return _deploy(args.env_file, args.command)
    except (CommandAborted, KeyboardInterrupt) as exception:
        _LOG.debug("Aborted: %s", exception)
        print("command aborted")
        return 0
    except (EnvDeployError, OSError, ValueError, subprocess.CalledProcessError) as exception:
        print(f"Error: {exception}", file=sys.stderr)
        return 1


def _deploy(env_file: str, command_template: list[str]) -> int:
    bootstrap = Settings()
    _configure_logging(bootstrap)
    _check_program(shell.PROGRAM)

    environment = load_environment(env_file, bootstrap.default_env_path, bootstrap.functions_env_path)
    settings = Settings.from_environment(environment)
    _configure_logging(settings)
    environment = derive_base64(environment)

    engine = create_engine(environment)
    command = [engine.substitute(token) for token in command_template]
    if not settings.sub_mode:
        _check_program(command[0])
    files = find_candidate_files(command)

    with FileTransaction(files, engine) as transaction:
        contents = transaction.substitute_all()
        for path, content in contents.items():
            _LOG.info("Content of %s:\n%s", path, _display(content))

        if settings.sub_mode:
            for content in contents.values():
                text = _display(content)
                print(text, end="" if text.endswith("\n") else "\n")
            print(runner.format_command(command))
            return 0

        runner.preview_diff(command, environment)
        if not settings.approve:
            info = runner.environment_info(
                env_file,
                bootstrap.default_env_path,
                bootstrap.functions_env_path,
                files,
                environment,
                print_cluster=settings.print_k8s_cluster,
            )
            runner.confirm(command, info)
        return runner.run(command, environment)


def _display(content: bytes) -> str:
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return f"<binary content, {len(content)} bytes>"


def _check_program(program: str) -> None:
    if shutil.which(program) is None:
        raise MissingDependency(program)


def _configure_logging(settings: Settings) -> None:
    if settings.quiet:
        logging.disable(logging.CRITICAL)
        return
    logging.disable(logging.NOTSET)
    logging.basicConfig(format="%(levelname)s %(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(settings.log_level)


if __name__ == "__main__":
    sys.exit(main())
