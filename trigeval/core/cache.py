# trigeval/core/cache.py

"""
Bounded caches for validation results and compiled expressions.

The two maps share a capacity but evict differently:

- validation results: on overflow the whole map is cleared;
- compiled expressions: on overflow the oldest share of entries (by
  insertion order) is dropped. Hits do not refresh an entry's position,
  so this is FIFO, not LRU.

Not thread-safe. A multi-threaded host must serialize access or give each
thread its own evaluator.
"""

import logging
import math
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .compiler import CompiledExpression
    from .validator import ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_CACHE_SIZE = 1000
DEFAULT_EVICTION_FRACTION = 0.3
DEFAULT_MEMORY_PER_ENTRY = 1024


class CacheManager:
    """Owns the validation-result map and the compiled-callable map."""

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_CACHE_SIZE,
        eviction_fraction: float = DEFAULT_EVICTION_FRACTION,
        memory_per_entry: int = DEFAULT_MEMORY_PER_ENTRY,
    ):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        if not 0 < eviction_fraction <= 1:
            raise ValueError("eviction_fraction must be in (0, 1]")
        self.max_size = max_size
        self.eviction_fraction = eviction_fraction
        self.memory_per_entry = memory_per_entry
        self._validations: Dict[str, "ValidationResult"] = {}
        self._compiled: Dict[str, "CompiledExpression"] = {}

    @staticmethod
    def make_key(expression: str) -> str:
        """Compiled-cache key: only surrounding whitespace is ignored."""
        return expression.strip()

    # --- Validation results ---

    def get_validation(self, expression: str) -> Optional["ValidationResult"]:
        return self._validations.get(expression)

    def put_validation(self, expression: str, result: "ValidationResult") -> None:
        if expression not in self._validations and len(self._validations) >= self.max_size:
            logger.debug(f"Validation cache full ({len(self._validations)} entries); clearing it.")
            self._validations.clear()
        self._validations[expression] = result

    # --- Compiled expressions ---

    def get_compiled(self, key: str) -> Optional["CompiledExpression"]:
        return self._compiled.get(key)

    def put_compiled(self, key: str, compiled: "CompiledExpression") -> None:
        if key not in self._compiled and len(self._compiled) >= self.max_size:
            self._evict_oldest_compiled()
        self._compiled[key] = compiled

    def _evict_oldest_compiled(self) -> int:
        n_evict = max(1, math.floor(self.max_size * self.eviction_fraction))
        oldest = list(self._compiled)[:n_evict]
        for key in oldest:
            del self._compiled[key]
        logger.debug(f"Compiled cache full; evicted {len(oldest)} oldest entries.")
        return len(oldest)

    # --- Housekeeping ---

    @property
    def validation_size(self) -> int:
        return len(self._validations)

    @property
    def compiled_size(self) -> int:
        return len(self._compiled)

    def clear(self) -> None:
        """Wipes both maps."""
        self._validations.clear()
        self._compiled.clear()

    def stats(self) -> Dict[str, Any]:
        """Current sizes plus a crude memory estimate."""
        total_entries = len(self._compiled) + len(self._validations)
        total_memory = total_entries * self.memory_per_entry
        return {
            "expression_cache_size": len(self._compiled),
            "validation_cache_size": len(self._validations),
            "max_cache_size": self.max_size,
            "total_cache_memory_estimate": f"{total_memory / 1024:.2f} KB",
        }
