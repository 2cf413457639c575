# deploy_stager/transport/selection.py
"""Mirror server selection policies"""

import itertools
import random
from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, Tuple, Type

from ..api.exceptions import ConfigError
from ..constants import SelectionPolicy


class ServerSelector(ABC):
    """Pick the mirror a release is distributed to"""

    def __init__(self, servers: Sequence[Tuple[str, float]]):
        if not servers:
            raise ConfigError("rsync_server selection requires at least one server")
        self.servers = tuple(servers)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.servers)

    @abstractmethod
    def select(self) -> str:
        """Return the next server"""
        pass


class RoundRobinSelector(ServerSelector):
    """Cycle through servers in configuration order"""

    def __init__(self, servers: Sequence[Tuple[str, float]]):
        super().__init__(servers)
        self._cycle = itertools.cycle(self.names)

    def select(self) -> str:
        return next(self._cycle)


class WeightedSelector(ServerSelector):
    """Random choice proportional to the configured weights"""

    def __init__(self, servers: Sequence[Tuple[str, float]], seed: Optional[int] = None):
        super().__init__(servers)
        self.weights = [weight for _, weight in self.servers]
        if any(w < 0 for w in self.weights) or sum(self.weights) <= 0:
            raise ConfigError("rsync_server weights must be non-negative with a positive total")
        self._random = random.Random(seed)

    def select(self) -> str:
        return self._random.choices(self.names, weights=self.weights, k=1)[0]


SELECTORS: Dict[SelectionPolicy, Type[ServerSelector]] = {
    SelectionPolicy.ROUND_ROBIN: RoundRobinSelector,
    SelectionPolicy.WEIGHTED: WeightedSelector,
}


def create_selector(policy: SelectionPolicy,
                    servers: Sequence[Tuple[str, float]]) -> Optional[ServerSelector]:
    """
    Create the selector for a policy

    Returns:
        Selector, or None when no servers are configured
    """
    if not servers:
        return None
    return SELECTORS[policy](servers)
