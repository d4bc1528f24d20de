from __future__ import annotations

from collections.abc import Iterable

from .models import RouteAlternative


class RouteAlternativeSelector:
    """Holds the alternatives of the last resolution and which one is active.

    Switching is purely local; the alternatives were all fetched together.
    """

    def __init__(self, alternatives: Iterable[RouteAlternative] = ()):
        self._alternatives: tuple[RouteAlternative, ...] = ()
        self._selected = 0
        self.load(alternatives)

    def load(self, alternatives: Iterable[RouteAlternative]) -> None:
        self._alternatives = tuple(alternatives)
        self._selected = 0

    def select(self, index: int) -> RouteAlternative:
        if not 0 <= index < len(self._alternatives):
            raise IndexError(
                f"Route alternative {index} out of range (have {len(self._alternatives)})"
            )
        self._selected = index
        return self._alternatives[index]

    @property
    def selected_index(self) -> int:
        return self._selected

    @property
    def active(self) -> RouteAlternative | None:
        if not self._alternatives:
            return None
        return self._alternatives[self._selected]

    @property
    def alternatives(self) -> tuple[RouteAlternative, ...]:
        return self._alternatives

    def __len__(self) -> int:
        return len(self._alternatives)


__all__ = ["RouteAlternativeSelector"]
