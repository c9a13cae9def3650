import enum
import logging
from collections.abc import Iterator, Mapping
from typing import Optional

_LOG = logging.getLogger(__name__)


class Layer(enum.Enum):
    """Where a variable comes from, in precedence order."""

    PROCESS = "process"
    DEFAULT = "default"
    ENV_FILE = "env_file"
    FUNCTIONS = "functions"
    DERIVED = "derived"


class Environment(Mapping[str, str]):
    """Immutable mapping of the variables, remembering the layer of each of them."""

    def __init__(
        self, values: Optional[Mapping[str, str]] = None, origins: Optional[Mapping[str, Layer]] = None
    ) -> None:
        self._values: dict[str, str] = dict(values or {})
        self._origins: dict[str, Layer] = {
            name: (origins or {}).get(name, Layer.PROCESS) for name in self._values
        }

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Environment({len(self)} variables)"

    def origin(self, name: str) -> Layer:
        return self._origins[name]

    def override(self, values: Mapping[str, str], layer: Layer) -> "Environment":
        """Get a new environment where the given values win over the current ones."""
        merged = dict(self._values)
        origins = dict(self._origins)
        for name, value in values.items():
            merged[name] = value
            origins[name] = layer
        return Environment(merged, origins)


class BaseSource:
    """Base class of the variable sources."""

    def __init__(self, layer: Layer) -> None:
        self._layer = layer

    def is_available(self) -> bool:
        return True

    def apply(self, environment: Environment) -> Environment:
        if not self.is_available():
            _LOG.debug("Skipping the %s layer: %s", self._layer.value, self.describe())
            return environment
        values = self._do_load(environment)
        _LOG.debug(
            "Loaded the %s layer (%s) with keys: %s",
            self._layer.value,
            self.describe(),
            ", ".join(values.keys()),
        )
        return environment.override(values, self._layer)

    def _do_load(self, environment: Environment) -> dict[str, str]:
        del environment
        return {}

    def describe(self) -> str:
        return self._layer.value
