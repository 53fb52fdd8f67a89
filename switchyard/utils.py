"""
Switchyard utilities shared by descriptors, inputs and commands.

Overview
- Unset: "not provided" marker, distinct from None (None is a legitimate
  default and a legitimate map-style value meaning "no value").
- coalesce(value, default=None): Unset -> default, anything else unchanged.
- rename("name"): decorator giving generated callables a stable name.
- mirror("attr"): read-only property over self._attr handing out snapshots
  of container values.

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(0, "fallback")
    0
"""
import functools
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    - falsey, printed as "Unset".
    - one instance per process, preserved by copy, deepcopy and pickle.
    - sealed: subclassing raises TypeError.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return `object`, or `default` when `object` is Unset.
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator setting __name__ and __qualname__ of the decorated callable.

        >>> @rename("__repr__")
        ... def generated(self): ...
        >>> generated.__name__
        '__repr__'
    """
    if not isinstance(name, str):
        raise TypeError("@rename() argument must be a string")

    def decorator(function):
        if not callable(function):
            raise TypeError("@rename() must be applied to a callable")
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _snapshot(value):
    # strings are sequences too, keep them whole
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return {key: _snapshot(item) for key, item in value.items()}
    if isinstance(value, Sequence):
        return [_snapshot(item) for item in value]
    if isinstance(value, Set):
        return {_snapshot(item) for item in value}
    return value


def mirror(name, /):
    """
    Read-only property exposing self._<name>.

    Container values are returned as fresh copies so that descriptor state
    (an array default, an alias list) cannot be altered from outside.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _snapshot(getattr(self, "_" + name))

    return property(getter)


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
)
