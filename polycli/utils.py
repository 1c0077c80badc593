"""
Shared value-type helpers for polycli.

Every public record of the package (switches, schemas, sections, layouts,
commands, invocations) is an immutable value with read-only fields and a
stable repr. This module holds the pieces they are built from:

- Unset: "argument not given" marker, kept apart from None so that None can
  stay a meaningful value (e.g. "no description").
- coalesce(value, default): Unset -> default, everything else unchanged.
- rename(callable, name) / @rename(name): give generated functions a readable
  __name__ and __qualname__ (tracebacks, rich.pretty output).
- mirror(name): property returning a frozen copy of self._<name>.
- IntrospectableType: metaclass wiring the above together for a class that
  lists its fields in __introspectable__.

    >>> coalesce(Unset, 4)
    4
    >>> coalesce(None, 4) is None
    True
    >>> class Margin(metaclass=IntrospectableType):
    ...     __introspectable__ = ("left", "right")
    ...     def __init__(self, left, right):
    ...         self._left, self._right = left, right
    >>> Margin(2, 4)
    margin(left=2, right=4)
"""
import builtins
import functools
import re
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker; there is exactly one instance.

    Unset is falsy, prints as "Unset", survives copy/pickle as the same
    object and can take part in PEP 604 unions, so that
    isinstance(value, str | Unset) reads naturally in argument checks.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Return 'default' when 'object' is Unset, otherwise 'object' itself.

    Only Unset is replaced; None, 0, "" and () are legitimate values.
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(callable, name) renames in place and returns the callable;
    rename(name) returns a decorator doing the same.
    """
    if len(parameters) == 1:
        name, = parameters
        if not isinstance(name, str):
            raise TypeError("@rename() argument must be a string")
        return functools.partial(_rename, name=name)
    if len(parameters) == 2:
        callable, name = parameters
        return _rename(callable, name=name)
    raise TypeError("rename() takes 1 or 2 arguments (%d given)" % len(parameters))


def _rename(callable, *, name):
    if not builtins.callable(callable):
        raise TypeError("rename() target must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    try:
        callable.__name__ = callable.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() target does not accept a new name") from None
    return callable


def _freeze(object):
    """
    Read-only snapshot of a field value.

    lists and other non-string sequences become tuples, mappings become
    MappingProxyType views over a copy, sets become frozensets, Unset becomes
    None; anything else is returned untouched.
    """
    match object:
        case str() | bytes() | bytearray():
            return object
        case Sequence():
            return tuple(object)
        case Mapping():
            return MappingProxyType(dict(object))
        case Set():
            return frozenset(object)
    return coalesce(object)


def mirror(name, /):
    """
    Read-only property publishing a frozen copy of self._<name>.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    return property(rename(lambda self: _freeze(getattr(self, "_" + name)), name))


class IntrospectableType(type):
    """
    Metaclass for polycli value types.

    For a class declaring __introspectable__ = ("a", "b") it
    - adds read-only properties a and b (see mirror()),
    - sets __typename__ to the hyphenated lowercase class name
      (HelpLayout -> "help-layout"), used in error messages,
    - adds __rich_repr__ yielding the __displayable__ fields (defaulting to
      __introspectable__) and a matching __repr__, unless the class body
      defines its own.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        fields = namespace.get("__introspectable__", ())
        namespace = {
            **namespace,
            "__typename__": re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower(),
            **{field: mirror(field) for field in fields},
        }
        self = super().__new__(cls, name, bases, namespace, **options)

        if "__rich_repr__" not in namespace:
            @rename("__rich_repr__")
            def __rich_repr__(self):
                for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                    yield field, getattr(self, field)

            self.__rich_repr__ = __rich_repr__

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                fields = ("%s=%r" % pair for pair in self.__rich_repr__())
                return "%s(%s)" % (type(self).__typename__, ", ".join(fields))

            self.__repr__ = __repr__

        return self


__all__ = (
    "Unset",
    "UnsetType",
    "IntrospectableType",
    "coalesce",
    "rename",
    "mirror",
)
