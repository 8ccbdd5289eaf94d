from __future__ import annotations

import logging
import operator
import threading
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Callable


logger = logging.getLogger(__name__)


def _forward(func: Callable[..., Any]) -> Callable[..., Any]:
    def inner(self: LazyReference, *args: Any) -> Any:
        return func(self._force(), *args)

    inner.__name__ = getattr(func, "__name__", "forwarded")
    return inner


class LazyReference:
    """Stand-in for an instance that is built on first use.

    Nothing is constructed when the reference is created. The first attribute
    access, call or forwarded operator runs `getter` once and every later
    access goes to that instance. A getter that raises leaves the reference
    unforced, so the next access tries again.

    `lock` guards forcing. A container passes its own lock so that forcing and
    resolution never wait on each other in opposite orders.

    Only use after construction: touching the reference inside the constructor
    of the object it stands for recurses without end.
    """

    __slots__ = ("__getter", "__instance", "__forced", "__lock", "__label")

    def __init__(
        self, getter: Callable[[], Any], label: str = "", lock: threading.RLock | None = None
    ) -> None:
        object.__setattr__(self, "_LazyReference__getter", getter)
        object.__setattr__(self, "_LazyReference__instance", None)
        object.__setattr__(self, "_LazyReference__forced", False)
        object.__setattr__(self, "_LazyReference__lock", lock if lock is not None else threading.RLock())
        object.__setattr__(self, "_LazyReference__label", label)

    def _force(self) -> Any:
        if self.__forced:
            return self.__instance

        with self.__lock:
            if not self.__forced:
                logger.debug("Forcing lazy reference %s", self.__label)
                instance = self.__getter()
                object.__setattr__(self, "_LazyReference__instance", instance)
                object.__setattr__(self, "_LazyReference__forced", True)
                # Release the recipe and anything it closes over
                object.__setattr__(self, "_LazyReference__getter", None)
        return self.__instance

    def __getattr__(self, name: str) -> Any:
        return getattr(self._force(), name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._force(), name, value)

    def __delattr__(self, name: str) -> None:
        delattr(self._force(), name)

    def __repr__(self) -> str:
        if not self.__forced:
            return f"<LazyReference {self.__label} (unforced)>"
        return repr(self.__instance)

    def __dir__(self) -> list[str]:
        return dir(self._force())

    # isinstance() checks see the target's class
    __class__ = property(_forward(operator.attrgetter("__class__")))  # type: ignore[assignment]

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self._force()(*args, **kwargs)

    __str__ = _forward(str)
    __bool__ = _forward(bool)
    __hash__ = _forward(hash)
    __eq__ = _forward(operator.eq)
    __ne__ = _forward(operator.ne)
    __lt__ = _forward(operator.lt)
    __le__ = _forward(operator.le)
    __gt__ = _forward(operator.gt)
    __ge__ = _forward(operator.ge)
    __len__ = _forward(len)
    __iter__ = _forward(iter)
    __contains__ = _forward(operator.contains)
    __getitem__ = _forward(operator.getitem)
    __setitem__ = _forward(operator.setitem)
    __delitem__ = _forward(operator.delitem)


def is_lazy_reference(value: object) -> bool:
    # type() rather than isinstance(): __class__ is forwarded and would force
    return type(value) is LazyReference
