"""Property source that serves random values for 'random.*' keys."""
import logging
import random
import re
import uuid
from typing import Any, Optional, Tuple

from src.config_resolver.config.property_source import PropertySource


logger = logging.getLogger(__name__)

RANDOM_PROPERTY_SOURCE_NAME = "random"
SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME = "systemEnvironment"

PREFIX = "random."

_INT_MAX = 2**31 - 1
_INT_MIN = -(2**31)
_LONG_MAX = 2**63 - 1
_LONG_MIN = -(2**63)

# random.int(10) or random.int[5,10]
_RANGE_PATTERN = re.compile(r"^[\(\[](?P<args>[^\)\]]*)[\)\]]$")


class RandomValuePropertySource(PropertySource):
    """Serves random values for keys starting with 'random.'.

    Supported keys:
    - random.int, random.long: any integer in range
    - random.int(max), random.long(max): 0 <= n < max
    - random.int[min,max], random.long[min,max]: min <= n < max
    - random.uuid: random UUID4 string
    - anything else under random.: 64 random hex characters
    """

    def __init__(self, name: str = RANDOM_PROPERTY_SOURCE_NAME, rng: Optional[random.Random] = None):
        super().__init__(name, {})
        self.rng = rng or random.Random()

    def contains_property(self, key: str) -> bool:
        return key.startswith(PREFIX)

    def get_property(self, key: str) -> Any:
        if not key.startswith(PREFIX):
            return None
        logger.debug(f"Generating random property for '{key}'", extra={"key": key})
        return self._get_random_value(key[len(PREFIX):])

    def _get_random_value(self, kind: str) -> Any:
        if kind == "int":
            return self.rng.randint(_INT_MIN, _INT_MAX)
        if kind == "long":
            return self.rng.randint(_LONG_MIN, _LONG_MAX)
        if kind.startswith("int"):
            bounds = self._parse_range(kind[len("int"):])
            if bounds is not None:
                return self.rng.randrange(*bounds)
        if kind.startswith("long"):
            bounds = self._parse_range(kind[len("long"):])
            if bounds is not None:
                return self.rng.randrange(*bounds)
        if kind == "uuid":
            return str(uuid.UUID(int=self.rng.getrandbits(128), version=4))
        return "%064x" % self.rng.getrandbits(256)

    def _parse_range(self, text: str) -> Optional[Tuple[int, int]]:
        match = _RANGE_PATTERN.match(text)
        if not match:
            return None
        parts = [p.strip() for p in match.group("args").split(",")]
        if len(parts) == 1:
            upper = int(parts[0])
            if upper <= 0:
                raise ValueError(f"Bound must be positive: {text}")
            return 0, upper
        lower, upper = int(parts[0]), int(parts[1])
        if lower >= upper:
            raise ValueError(f"Lower bound must be less than upper bound: {text}")
        return lower, upper

    @classmethod
    def add_to_environment(cls, environment: Any) -> "RandomValuePropertySource":
        """Insert a random source after the system environment source, or last."""
        sources = environment.property_sources
        existing = sources.get(RANDOM_PROPERTY_SOURCE_NAME)
        if isinstance(existing, cls):
            return existing
        source = cls()
        if sources.contains(SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME):
            sources.add_after(SYSTEM_ENVIRONMENT_PROPERTY_SOURCE_NAME, source)
        else:
            sources.add_last(source)
        logger.debug("RandomValuePropertySource added to environment")
        return source
