import shutil
import subprocess  # nosec

from env_deploy.template_engines.base import BaseEngine

PROGRAM = "envsubst"


class ShellEngine(BaseEngine):
    """Shell template engine (envsubst)."""

    def _evaluate(self, data: bytes) -> bytes:
        # The program is looked up in the process PATH since the variables may not have one
        return subprocess.run(  # nosec
            [shutil.which(PROGRAM) or PROGRAM],
            input=data,
            stdout=subprocess.PIPE,
            env=self._data,
            check=True,
        ).stdout
