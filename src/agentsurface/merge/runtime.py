"""The merged runtime configuration handed to the agent runtime."""
from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from typing import Any


class RuntimeConfig(Mapping[str, Any]):
    """Immutable mapping of field name to final value.

    Values are deep-copied on the way in and on :meth:`to_dict`, so neither
    the caller nor the runtime can mutate a config after it was built.
    Equality is mapping equality.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = copy.deepcopy(dict(values or {}))

    def __getitem__(self, key: str) -> Any:  # noqa: ANN401
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"RuntimeConfig({self._values!r})"

    def to_dict(self) -> dict[str, Any]:
        """A mutable deep copy of the values."""
        return copy.deepcopy(self._values)
