"""Error taxonomy for compiler registration and selection."""

from __future__ import annotations


class LivestubError(RuntimeError):
    """Base error for livestub configuration failures."""


class CompilerDefinitionError(LivestubError, TypeError):
    """A compiler class is missing its name or constant type, or is abstract."""


class CompilerNotFoundError(LivestubError, LookupError):
    """A requested or excluded compiler name is not registered."""

    def __init__(self, names: tuple[str, ...], *, available: tuple[str, ...]) -> None:
        self.names = names
        self.available = available
        msg = (
            f"Cannot find compiler(s) {', '.join(names)}; "
            f"available: {', '.join(available) or '<none>'}"
        )
        super().__init__(msg)


__all__ = ["CompilerDefinitionError", "CompilerNotFoundError", "LivestubError"]
