r"""
Polycli option specifications and schemas.

Overview
- Specs
  • Option: named, value-bearing switch with a short and/or long spelling (e.g., -s/--source).
  • Flag: named, presence-only switch (no payload), e.g., -h/--help.
  Both derive from Switch, which owns the naming rules.

- Schemas
  • OptionSchema: immutable, ordered set of switches accepted by one command.
    No two switches may share a short or long spelling.
  • merge(): combine a command schema with the universal one; command switches take
    precedence and a universal switch is added only if none of its spellings is taken.

Metadata (sanitized on construction)
- names: one or two spellings, at most one short ("-x") and at most one long ("--name").
- descr: Unset | str (short help), non-empty when provided.
- Option only
  • metavar: Unset | str (label in help, defaults to "<key>").
  • required: bool (missing required options fail the parse).
  • multiple: bool (every occurrence is collected into a list).

Validation highlights
- Short names must match r"-[^\W_]" and long names r"--[^\W_][\w-]*".
- descr/metavar strings are trimmed; empty strings are rejected.

Quick example:
    >>> schema = OptionSchema(
    ...     Option("-s", "--source", descr="Source path"),
    ...     Flag("-v", "--verbose", descr="Verbose output"),
    ... )
    >>> [switch.key for switch in schema | OptionSchema(Flag("-h", "--help"))]
    ['source', 'verbose', 'help']

Public API
- Classes: Switch, Option, Flag, OptionSchema
"""
import logging
import re

from rich.text import Text

from .faults import DuplicateFlagSpellingError
from .parsing import parse
from .utils import *

logger = logging.getLogger(__name__)


def _sanitize_names(cls, names, /):
    """
    Internal: validate spellings and split them into (short, long).

    Raises
    - TypeError: when no names are given or an entry is not a string.
    - ValueError: when a name is malformed, or two shorts/two longs are given.
    """
    if not names:
        raise TypeError(f"{cls.__typename__} must specify at least one name")
    if len(names) > 2:
        raise TypeError(f"{cls.__typename__} takes at most one short and one long name")

    short = long = Unset
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif re.fullmatch(r"-[^\W_]", name):
            if short:
                raise ValueError(f"{cls.__typename__} cannot have two short names")
            short = name
        elif re.fullmatch(r"--[^\W_][\w-]*", name):
            if long:
                raise ValueError(f"{cls.__typename__} cannot have two long names")
            long = name
        else:
            raise ValueError(f"{cls.__typename__} name {name!r} must look like '-x' or '--name'")
    return short, long


def _sanitize_string(cls, field, value, /):
    """
    Internal: validate an optional string field (Unset, or a non-empty string once trimmed).
    """
    if not isinstance(value, str | Text | Unset):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    elif isinstance(value, str) and not (value := value.strip()):
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty")
    return value


class Switch(metaclass=IntrospectableType):
    """
    Base specification for named switches (Option and Flag).

    Properties
    - names: spellings in (short, long) order.
    - short / long: the individual spellings (None when absent).
    - key: long spelling without dashes, or the short one when there is no long spelling.
    - descr: help text or None.
    """

    __introspectable__ = (
        "names",
        "short",
        "long",
        "descr",
    )
    __displayable__ = (
        "names",
        "descr",
    )

    takes_value = False
    required = False
    multiple = False
    metavar = None

    def __new__(cls, *names, descr=Unset):
        if cls is Switch:
            raise TypeError("type 'Switch' cannot be instantiated directly, use Option or Flag")
        self = super().__new__(cls)
        self._short, self._long = _sanitize_names(cls, names)
        self._descr = _sanitize_string(cls, "descr", descr)
        self._names = tuple(name for name in (self._short, self._long) if name)
        return self

    @property
    def key(self):
        return (self.long or self.short).lstrip("-")

    def spells(self, name, /):
        """
        Return True when 'name' is one of this switch's spellings or its key.
        """
        return name in self.names or name == self.key


class Option(Switch):
    """
    Named, value-bearing switch.

    Highlights
    - Takes exactly one value per occurrence, either spaced (-s path, --source path),
      inline (--source=path) or attached to a short name (-spath).
    - required: the parse fails when the option is absent.
    - multiple: repeated occurrences are collected (list value); otherwise a repeat is an error.
    """

    __introspectable__ = (
        "names",
        "short",
        "long",
        "metavar",
        "descr",
        "required",
        "multiple",
    )
    __displayable__ = (
        "names",
        "metavar",
        "descr",
        "required",
        "multiple",
    )

    takes_value = True

    def __new__(cls, *names, metavar=Unset, descr=Unset, required=False, multiple=False):
        """
        Construct an Option spec.

        Parameters
        - names: "-x" and/or "--name" (at least one).
        - metavar: Unset | str
          Display name for the value in help; defaults to "<key>".
        - descr: Unset | str
          Short description for help. If Unset, becomes None.
        - required: bool
        - multiple: bool
        """
        self = super().__new__(cls, *names, descr=descr)
        metavar = _sanitize_string(cls, "metavar", metavar)
        self._metavar = coalesce(metavar, "<%s>" % self.key)
        self._required = bool(required)
        self._multiple = bool(multiple)
        return self


class Flag(Switch):
    """
    Named, presence-only switch (e.g., -v/--verbose, --help).

    A flag never carries a value and is never required; its parsed value is True.
    """

    def __new__(cls, *names, descr=Unset):
        return super().__new__(cls, *names, descr=descr)


class OptionSchema(metaclass=IntrospectableType):
    """
    Immutable, ordered collection of switches accepted by one command.

    Lookup
    - iteration yields switches in declaration order.
    - `name in schema` and `schema[name]` accept any spelling ("-s", "--source")
      or the key ("source"); a Switch instance is also accepted by `in`.

    Building
    - OptionSchema(*switches) validates that no two switches share a spelling
      or a key (DuplicateFlagSpellingError otherwise).
    - extend(*switches) returns a new, validated schema.
    - merge(other) / `self | other` returns a new schema where self wins conflicts.
    """

    __introspectable__ = ("switches",)

    def __new__(cls, *switches):
        self = super().__new__(cls)
        self._switches = []
        self._index = {}
        keys = set()
        for switch in switches:
            if not isinstance(switch, Switch):
                raise TypeError(f"{cls.__typename__} entries must be options or flags")
            if clashes := [name for name in switch.names if name in self._index]:
                raise DuplicateFlagSpellingError(
                    "spelling %s is already in use" % " and ".join(map(repr, clashes)),
                    input=clashes[0],
                    hint="give each switch of a command its own short and long names",
                )
            if switch.key in keys:
                raise DuplicateFlagSpellingError(
                    "key %r of %s is already in use" % (switch.key, "/".join(switch.names)),
                    input=switch.key,
                    hint="parsed values are stored by key; rename one of the switches",
                )
            keys.add(switch.key)
            self._switches.append(switch)
            self._index.update(dict.fromkeys(switch.names, switch))
        return self

    @property
    def spellings(self):
        return frozenset(self._index)

    def __iter__(self):
        return iter(self._switches)

    def __len__(self):
        return len(self._switches)

    def __bool__(self):
        return bool(self._switches)

    def __contains__(self, object):
        if isinstance(object, Switch):
            return object in self._switches
        return self.get(object) is not None

    def __getitem__(self, name):
        if (switch := self.get(name)) is None:
            raise KeyError(name)
        return switch

    def __eq__(self, other):
        if not isinstance(other, OptionSchema):
            return NotImplemented
        return self._switches == other._switches

    def __hash__(self):
        return hash(tuple(self._switches))

    def get(self, name, default=None, /):
        """
        Resolve a spelling ("-s"/"--source") or a key ("source") to its switch.
        """
        try:
            return self._index[name]
        except (KeyError, TypeError):
            pass
        for switch in self._switches:
            if switch.key == name:
                return switch
        return default

    def extend(self, *switches):
        return type(self)(*self._switches, *switches)

    def merge(self, other, /):
        """
        Return a new schema with every switch of self plus the switches of 'other'
        whose spellings and key are all still free. The switches of self always win.
        """
        if other is None or other is Unset:
            return self
        if not isinstance(other, OptionSchema):
            raise TypeError(f"{type(self).__typename__} can only be merged with another schema")

        merged = list(self._switches)
        taken = set(self._index)
        keys = {switch.key for switch in self._switches}
        for switch in other:
            if taken.intersection(switch.names) or switch.key in keys:
                logger.debug("switch %s shadowed by %s", "/".join(switch.names), "/".join(
                    name for name in (*switch.names, switch.key) if name in taken or name in keys
                ))
                continue
            merged.append(switch)
            taken.update(switch.names)
            keys.add(switch.key)
        return type(self)(*merged)

    def __or__(self, other):
        if not isinstance(other, OptionSchema):
            return NotImplemented
        return self.merge(other)

    def parse(self, tokens, /):
        """
        Parse an argument tail against this schema (see polycli.parsing.parse).
        """
        return parse(self, tokens)


__all__ = (
    "Switch",
    "Option",
    "Flag",
    "OptionSchema",
)
