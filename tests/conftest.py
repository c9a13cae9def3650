import logging
import re
import shutil
from pathlib import Path
from tempfile import mkdtemp

import pytest

from env_deploy.template_engines.base import BaseEngine


@pytest.fixture
def temp_dir():
    base_dir = Path(mkdtemp())
    try:
        yield base_dir
    finally:
        shutil.rmtree(base_dir)


@pytest.fixture(autouse=True)
def _enable_logging():
    # The silent mode disables the logging for the whole process
    yield
    logging.disable(logging.NOTSET)


class FakeEngine(BaseEngine):
    """Resolves the placeholders without envsubst."""

    def _evaluate(self, data: bytes) -> bytes:
        return re.sub(
            rb"\$\{([a-zA-Z_][a-zA-Z0-9_]*)\}",
            lambda match: self._data.get(match.group(1).decode(), "").encode(),
            data,
        )


@pytest.fixture
def fake_engine():
    return FakeEngine
