from __future__ import annotations

from typing import Any


class InjectionError(RuntimeError):
    pass


class KeyResolutionError(InjectionError):
    """Raised when no lookup key can be derived from an injectable."""


class InvalidBindingError(InjectionError):
    """Raised by `bind` for a malformed binding. The binding table is left untouched."""


class UnresolvedBindingError(InjectionError):
    """Raised when neither the container nor any sub-module has a binding for a key."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f'No binding for injectable "{key}"')
