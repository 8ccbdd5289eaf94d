from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar


if TYPE_CHECKING:
    from collections.abc import Callable

    from ._container import Container

T = TypeVar("T")


@dataclass(frozen=True)
class Literal(Generic[T]):
    """Dependency passed to the constructor as-is, never resolved."""

    value: T


@dataclass(frozen=True)
class Factory(Generic[T]):
    """Dependency computed on every resolution of the binding that declares it.

    `fn` receives the requesting container when it accepts a positional
    argument, and is called without arguments otherwise, including when its
    signature cannot be inspected.
    """

    fn: Callable[..., T]
    takes_container: bool = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "takes_container", _accepts_positional(self.fn))

    def get(self, container: Container) -> T:
        if self.takes_container:
            return self.fn(container)
        return self.fn()


def _accepts_positional(fn: Callable[..., Any]) -> bool:
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        # No introspectable signature (builtin types such as dict): call with no arguments
        return False

    return any(
        p.kind
        in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        )
        for p in sig.parameters.values()
    )
