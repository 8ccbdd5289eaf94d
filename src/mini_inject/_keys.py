from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar, Union

from ._errors import KeyResolutionError


if TYPE_CHECKING:
    from collections.abc import Hashable

T = TypeVar("T")


class Symbol:
    """A unique atom usable as an injectable.

    Two symbols are equal only if they are the same object. `Symbol.intern`
    returns the process-wide symbol for a description instead of a new one.
    """

    __slots__ = ("description",)

    _registry: ClassVar[dict[str, Symbol]] = {}
    _registry_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, description: str = "") -> None:
        self.description = description

    @classmethod
    def intern(cls, description: str) -> Symbol:
        with cls._registry_lock:
            symbol = cls._registry.get(description)
            if symbol is None:
                symbol = cls._registry[description] = cls(description)
            return symbol

    def __str__(self) -> str:
        return f"Symbol({self.description})"

    def __repr__(self) -> str:
        return f"Symbol({self.description!r})"


@dataclass(frozen=True)
class Token(Generic[T]):
    """Collision-safe identity for an injectable.

    A token never resolves by the wrapped injectable's name. Its key is the
    interned symbol for `description`, or for the wrapped injectable's key when
    no description is given, so tokens sharing a description share a binding:

        Token(A, "storage") and Token(B, "storage") -> same binding slot
    """

    value: Any
    description: str | None = None

    def __post_init__(self) -> None:
        # Fail at construction rather than at first lookup
        self.to_symbol()

    def to_symbol(self) -> Symbol:
        description = self.description
        if description is None:
            description = str(resolve_key(self.value))
        return Symbol.intern(description)


Injectable = Union[type, str, Symbol, Token, Any]


def resolve_key(injectable: Injectable) -> Hashable:
    """Derive the canonical lookup key for an injectable.

    Precedence (first match wins):
    1. strings and symbols are keys already
    2. tokens use their interned symbol
    3. a declared `__name__` (classes, functions)
    4. a custom string conversion
    5. the runtime type name.
    """
    if not injectable:
        msg = f'Could not resolve injectable name from "{injectable}"'
        raise KeyResolutionError(msg)

    if isinstance(injectable, (str, Symbol)):
        return injectable

    if isinstance(injectable, Token):
        return injectable.to_symbol()

    name = getattr(injectable, "__name__", None)
    if isinstance(name, str) and name:
        return name

    cls = type(injectable)
    if cls.__str__ is not object.__str__ or cls.__repr__ is not object.__repr__:
        return str(injectable)

    return cls.__name__
