"""Minimalistic dependency injection container.

Bind injectables (classes, functions, strings, symbols or tokens) to
construction functions or dependency lists, then resolve object graphs on demand.

Exports:
- `Container`: registry with singleton/transient lifetimes, late resolution and sub-modules.
- `Lifetime`: Enum controlling whether instances are cached (singleton) or rebuilt (transient).
- `Literal`, `Factory`: dependency-list entries passed as-is or computed per resolution.
- `Token`, `Symbol`: explicit identities for injectables whose names would collide.
- `LazyReference`: stand-in returned for late-resolved singletons until first use.
- `resolve_key`: the default injectable-to-key strategy.
"""

from ._container import MISSING, BindingInfo, BindingKind, Container, Lifetime, Resolver
from ._dependencies import Factory, Literal
from ._errors import InjectionError, InvalidBindingError, KeyResolutionError, UnresolvedBindingError
from ._keys import Symbol, Token, resolve_key
from ._proxy import LazyReference, is_lazy_reference


__all__ = [
    "MISSING",
    "BindingInfo",
    "BindingKind",
    "Container",
    "Factory",
    "InjectionError",
    "InvalidBindingError",
    "KeyResolutionError",
    "LazyReference",
    "Lifetime",
    "Literal",
    "Resolver",
    "Symbol",
    "Token",
    "UnresolvedBindingError",
    "is_lazy_reference",
    "resolve_key",
]
