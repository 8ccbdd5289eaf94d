from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Generic,
    TypeVar,
    overload,
)

from ._dependencies import Factory, Literal
from ._errors import InvalidBindingError, UnresolvedBindingError
from ._keys import Token, resolve_key
from ._proxy import LazyReference


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Sequence

    from ._keys import Injectable

    F = TypeVar("F")

T = TypeVar("T")


class _Missing(Enum):
    MISSING = "MISSING"


# Distinguishes "no fallback given" from an explicit `None` fallback
MISSING = _Missing.MISSING


class Lifetime(Enum):
    SINGLETON = "singleton"
    TRANSIENT = "transient"


class BindingKind(Enum):
    FUNCTION = "function"
    DEPENDENCIES = "dependencies"


@dataclass(frozen=True)
class Binding:
    factory: Callable[[Container], Any]
    lifetime: Lifetime
    late_resolve: bool
    kind: BindingKind

    @property
    def is_singleton(self) -> bool:
        return self.lifetime is Lifetime.SINGLETON


@dataclass(frozen=True)
class BindingInfo:
    """Read-only view of a binding, as returned by `Container.get_binding`."""

    is_singleton: bool
    late_resolve: bool
    resolve_function: Callable[[Container], Any]
    kind: BindingKind


class Resolver(Generic[T]):
    """Deferred `get` for one injectable on one container."""

    def __init__(self, container: Container, injectable: Injectable) -> None:
        self._container = container
        self._injectable = injectable

    @overload
    def get(self) -> T: ...

    @overload
    def get(self, fallback: F) -> T | F: ...

    def get(self, fallback: Any = MISSING) -> Any:
        return self._container.get(self._injectable, fallback)

    def __repr__(self) -> str:
        return f"Resolver({self._injectable!r})"


class Container:
    """Minimal DI container.

    - bind construction functions or dependency lists to injectables
    - lifetimes: singleton / transient
    - late resolution through lazy references to break cycles
    - sub-modules consulted on a local miss.
    """

    def __init__(self, *, key_resolver: Callable[[Injectable], Hashable] = resolve_key) -> None:
        self._key_of = key_resolver
        self._bindings: dict[Hashable, Binding] = {}
        self._instances: dict[Hashable, Any] = {}
        self._sub_modules: list[Container] = []
        self._lock = threading.RLock()

    @staticmethod
    def literal(value: T) -> Literal[T]:
        """Wrap a value that a dependency list passes through unresolved."""
        return Literal(value)

    @staticmethod
    def factory(fn: Callable[..., T]) -> Factory[T]:
        """Wrap a function that a dependency list calls on every resolution."""
        return Factory(fn)

    @staticmethod
    def token(injectable: Injectable, description: str | None = None) -> Token[Any]:
        """Create a collision-safe token for an injectable."""
        return Token(injectable, description)

    def bind(
        self,
        injectable: Injectable,
        spec: Callable[[Container], Any] | Sequence[Any] | None = None,
        *,
        lifetime: Lifetime = Lifetime.SINGLETON,
        late_resolve: bool = False,
    ) -> Container:
        """Bind a construction function or a dependency list to an injectable.

        Example:
          container.bind(Config, lambda c: Config.from_env())
          container.bind(Service, [Repo, Container.literal(3)], lifetime=Lifetime.TRANSIENT)
          container.bind(Handler)  # no dependencies

        A dependency list requires a class or function target; an empty list
        never resolves late since there is no cycle to break.
        """
        if spec is None or isinstance(spec, (list, tuple)):
            dependencies = tuple(spec or ())
            factory = self._dependencies_factory(injectable, dependencies)
            kind = BindingKind.DEPENDENCIES
            if not dependencies:
                late_resolve = False
        elif callable(spec):
            factory = spec
            kind = BindingKind.FUNCTION
        else:
            msg = f"Binding must be a construction function or a list of dependencies, got {type(spec).__name__}"
            raise InvalidBindingError(msg)

        key = self._key_of(injectable)
        binding = Binding(factory=factory, lifetime=lifetime, late_resolve=late_resolve, kind=kind)

        with self._lock:
            replaced = key in self._bindings
            self._instances.pop(key, None)
            self._bindings[key] = binding
        logger.debug("%s %s (%s, %s)", "Rebound" if replaced else "Bound", key, lifetime.value, kind.value)
        return self

    def _dependencies_factory(
        self, injectable: Injectable, dependencies: tuple[Any, ...]
    ) -> Callable[[Container], Any]:
        target = injectable.value if isinstance(injectable, Token) else injectable
        if not _is_constructable(target):
            msg = "Array of dependencies requires a constructable injectable"
            raise InvalidBindingError(msg)

        def construct(container: Container) -> Any:
            args = [_resolve_dependency(container, dependency) for dependency in dependencies]
            # Classes and functions share a calling convention
            return target(*args)

        construct.__qualname__ = f"construct[{getattr(target, '__qualname__', target)}]"
        return construct

    def _lookup(self, injectable: Injectable, key: Hashable) -> tuple[Container, Hashable, Binding] | None:
        """Find the container that owns the binding, walking sub-modules once each."""
        with self._lock:
            binding = self._bindings.get(key)
            sub_modules = list(self._sub_modules)

        if binding is not None:
            return self, key, binding

        for sub in sub_modules:
            found = sub._lookup(injectable, sub._key_of(injectable))
            if found is not None:
                return found
        return None

    def get_binding(self, injectable: Injectable) -> BindingInfo | None:
        """Describe the binding for an injectable, looking into sub-modules on a local miss."""
        found = self._lookup(injectable, self._key_of(injectable))
        if found is None:
            return None

        _, _, binding = found
        return BindingInfo(
            is_singleton=binding.is_singleton,
            late_resolve=binding.late_resolve,
            resolve_function=binding.factory,
            kind=binding.kind,
        )

    def has(self, injectable: Injectable) -> bool:
        return self.get_binding(injectable) is not None

    def __contains__(self, injectable: Injectable) -> bool:
        return self.has(injectable)

    @overload
    def get(self, injectable: type[T]) -> T: ...

    @overload
    def get(self, injectable: type[T], fallback: F) -> T | F: ...

    @overload
    def get(self, injectable: Injectable) -> Any: ...

    @overload
    def get(self, injectable: Injectable, fallback: Any) -> Any: ...

    def get(self, injectable: Injectable, fallback: Any = MISSING) -> Any:
        """Resolve an injectable to an instance.

        - local binding: singletons are cached, transients built on every call
        - otherwise the first sub-module that has a binding resolves it in its own scope
        - otherwise `fallback` if one was passed, else UnresolvedBindingError.

        The fallback only covers the requested injectable; a missing nested
        dependency raises regardless.
        """
        key = self._key_of(injectable)
        found = self._lookup(injectable, key)

        instance: Any = MISSING
        if found is not None:
            owner, owner_key, _ = found
            instance = owner._instantiate(owner_key)

        if instance is not MISSING:
            return instance
        if fallback is not MISSING:
            return fallback
        raise UnresolvedBindingError(key)

    def _instantiate(self, key: Hashable) -> Any:
        with self._lock:
            # Re-read under the lock: the binding may have been replaced or cleared since lookup
            binding = self._bindings.get(key)
            if binding is None:
                return MISSING

            if not binding.is_singleton:
                return binding.factory(self)

            if key in self._instances:
                return self._instances[key]

            if binding.late_resolve:
                logger.debug("Deferring construction of %s", key)
                instance = LazyReference(lambda: binding.factory(self), label=str(key), lock=self._lock)
            else:
                instance = binding.factory(self)

            self._instances[key] = instance
            return instance

    def get_all(self, *injectables: Injectable) -> tuple[Any, ...]:
        """Resolve several injectables in order. No fallback applies."""
        return tuple(self.get(injectable) for injectable in injectables)

    def get_resolver(self, injectable: Injectable) -> Resolver[Any]:
        """Return a handle that resolves the injectable on demand."""
        return Resolver(self, injectable)

    def sub_module(self, *containers: Container) -> Container:
        """Attach containers consulted, in order, when a lookup misses locally.

        Sub-modules never see this container's bindings. Cycles are not detected.
        """
        with self._lock:
            self._sub_modules.extend(containers)
        logger.debug("Attached %d sub-module(s)", len(containers))
        return self

    def clear(self) -> None:
        """Drop every binding and cached instance here and in all attached sub-modules.

        The sub-modules stay attached.
        """
        with self._lock:
            self._bindings.clear()
            self._instances.clear()
            sub_modules = list(self._sub_modules)

        for sub in sub_modules:
            sub.clear()
        logger.debug("Cleared container and %d sub-module(s)", len(sub_modules))


def _resolve_dependency(container: Container, dependency: Any) -> Any:
    if isinstance(dependency, Literal):
        return dependency.value
    if isinstance(dependency, Factory):
        return dependency.get(container)
    return container.get(dependency)


def _is_constructable(target: Any) -> bool:
    return inspect.isclass(target) or inspect.isfunction(target)
