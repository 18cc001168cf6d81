from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class QuantileMethod:
    """Container for a sample quantile definition.

    ``position`` maps ``(n, p)`` to the 1-based Hyndman-Fan position ``h``.
    ``interpolation`` selects how ``h`` is turned into a value: ``"linear"``
    interpolates between neighbouring order statistics, the others are the
    discontinuous rules used by R-1 to R-3.
    """

    name: str
    position: Callable[[float, float], float]
    interpolation: str = "linear"
    aliases: tuple[str, ...] = field(default_factory=tuple)

    def matches(self, key: str) -> bool:
        """Return whether ``key`` names this method, ignoring case."""
        key = key.strip().lower()
        return key == self.name.lower() or key in (alias.lower() for alias in self.aliases)
