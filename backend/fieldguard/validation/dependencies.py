"""Cross-field `requires` post-pass."""
from __future__ import annotations

from typing import Callable, Iterable


class DependencyResolver:
    """Ordered field -> prerequisites edges, consumed once per pass.

    The pass is single: a field demoted late cannot demote a field whose
    edge was already processed earlier in record order.
    """

    __slots__ = ("_edges",)

    def __init__(self):
        self._edges: dict[str, tuple[str, ...]] = {}

    def record(self, field: str, prerequisites: Iterable[str]) -> None:
        merged = list(self._edges.get(field, ()))
        for name in prerequisites:
            if name not in merged:
                merged.append(name)
        if merged:
            self._edges[field] = tuple(merged)

    def discard(self, field: str | None = None) -> None:
        if field is None:
            self._edges.clear()
        else:
            self._edges.pop(field, None)

    def pending(self) -> dict[str, tuple[str, ...]]:
        return dict(self._edges)

    def resolve(
        self,
        is_valid: Callable[[str], bool],
        demote: Callable[[str, str], None],
    ) -> list[tuple[str, str]]:
        """Demote every field whose first absent prerequisite is not valid.

        Returns the (field, prerequisite) pairs that were demoted.
        """
        demoted = []
        edges, self._edges = self._edges, {}
        for field, prerequisites in edges.items():
            if not is_valid(field):
                continue
            for prerequisite in prerequisites:
                if not is_valid(prerequisite):
                    demote(field, prerequisite)
                    demoted.append((field, prerequisite))
                    break
        return demoted

    def __len__(self) -> int:
        return len(self._edges)
