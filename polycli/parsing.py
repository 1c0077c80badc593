"""
Polycli argument-tail parser.

What this module provides
- parse(schema, tokens): read the tokens that follow a command name against an
  OptionSchema and return a Namespace, or raise a ParseError subclass.
- Namespace: read-only mapping from switch key to its parsed value
  (str for options, list[str] for multiple options, True for flags) plus the
  positional operands.

Grammar (conventional, nothing more)
- long switches: --name, --name value, --name=value
- short switches: -x, -x value, -xvalue, -x=value; clustered flags: -abc
- "--" ends switch parsing; every following token is an operand.
- "-" alone and negative numbers (-1, -2.5) are operands/values, unless a switch
  is spelled that way.

Faults
- MalformedTokenError, UnknownSwitchError, FlagAssignmentError,
  DuplicatedSwitchError, OptionValueRequiredError, MissingOptionsError.
  Messages lead with the ordinal position of the offending token in the tail.
"""
import functools
import re
from collections import deque
from collections.abc import Mapping

from .faults import *


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _is_switch(token, schema):
    """
    Decide whether a token must be read as a switch rather than a value/operand.
    """
    if token in schema.spellings:
        return True
    if not token.startswith("-") or token == "-":
        return False
    return not re.fullmatch(r"-\d+(\.\d+)?", token)


class Namespace(Mapping):
    """
    Parsed option values of one invocation.

    Lookup accepts any spelling of a switch ("-s", "--source") or its key
    ("source"); iteration yields keys in the order they were first seen.

    Values
    - Flag → True
    - Option → str
    - Option(multiple=True) → list[str] (a fresh list per lookup)
    """

    def __init__(self, schema, values=(), operands=()):
        self._schema = schema
        self._values = dict(values)
        self._operands = tuple(operands)

    @property
    def operands(self):
        """
        positional tokens (including everything after "--"), in order.
        """
        return self._operands

    def _resolve(self, name):
        if (switch := self._schema.get(name)) is not None:
            return switch.key
        return name.lstrip("-") if isinstance(name, str) else name

    def __getitem__(self, name):
        value = self._values[self._resolve(name)]
        return list(value) if isinstance(value, list) else value

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __contains__(self, name):
        return self._resolve(name) in self._values

    def has(self, name, /):
        return name in self

    def getall(self, name, /):
        """
        Always return a list: every value of an option, [True] for a present flag,
        [] when absent.
        """
        try:
            value = self[name]
        except KeyError:
            return []
        return value if isinstance(value, list) else [value]

    def __eq__(self, other):
        if isinstance(other, Namespace):
            return self._values == other._values and self._operands == other._operands
        return super().__eq__(other)

    __hash__ = None

    def __rich_repr__(self):
        for key in self:
            yield key, self[key]
        yield "operands", self._operands

    def __repr__(self):
        return "namespace(%s)" % ", ".join("%s=%r" % item for item in self.__rich_repr__())


def _store(values, switch, input, value, index):
    """
    Record one occurrence of a switch, enforcing the repetition rules.
    """
    key = switch.key
    if switch.multiple:
        values.setdefault(key, []).append(value)
        return
    if key in values:
        type = "option" if switch.takes_value else "flag"
        raise DuplicatedSwitchError(
            "%s %r at %s position was already provided" % (type, input, _ordinal(index)),
            input=input,
            index=index,
            hint="keep a single %s; each %s can be specified only once" % (type, type),
        )
    values[key] = value


def parse(schema, tokens, /):
    """
    Parse an argument tail (the tokens after the command name) against a schema.

    phases
    - loop: classify each token as operand, "--" terminator, long or short switch;
      options consume an inline, attached or following value.
    - post-parse: every required option must have been seen.

    Returns
    - Namespace with the parsed values and the operands.

    Raises
    - ParseError subclasses (see module docstring); the registry is never touched.
    """
    tokens = deque(tokens)
    values = {}
    operands = []
    index = 0

    def take(switch, input, start):
        # the next token is the value unless it is itself a switch
        nonlocal index
        if tokens and not _is_switch(tokens[0], schema):
            index += 1
            return tokens.popleft()
        raise OptionValueRequiredError(
            "option %r at %s position requires a value" % (input, _ordinal(start)),
            input=input,
            index=start,
            hint="pass a value: %s %s" % (input, switch.metavar),
        )

    while tokens:
        token = tokens.popleft()
        index += 1
        start = index

        if token == "--":
            operands.extend(tokens)
            tokens.clear()
            break

        if not _is_switch(token, schema):
            operands.append(token)
            continue

        if token.startswith("--"):
            input, assigned, value = token.partition("=")
            if not re.fullmatch(r"--[^\W_][\w-]*", input):
                raise MalformedTokenError(
                    "malformed switch %r at %s position" % (token, _ordinal(start)),
                    input=token,
                    index=start,
                    hint="long switches look like --name or --name=value",
                )
            if (switch := schema.get(input)) is None or switch.long != input:
                raise UnknownSwitchError(
                    "unknown switch %r at %s position" % (input, _ordinal(start)),
                    input=input,
                    index=start,
                    hint="remove it or check the spelling of the option",
                )
            if not switch.takes_value:
                if assigned:
                    raise FlagAssignmentError(
                        "flag %r at %s position does not take a value" % (input, _ordinal(start)),
                        input=input,
                        index=start,
                        hint="use %s alone, without '=%s'" % (input, value),
                    )
                _store(values, switch, input, True, start)
            elif assigned:
                if not value:
                    raise OptionValueRequiredError(
                        "option %r at %s position has an empty inline value" % (input, _ordinal(start)),
                        input=input,
                        index=start,
                        hint="pass a value: %s=%s" % (input, switch.metavar),
                    )
                _store(values, switch, input, value, start)
            else:
                _store(values, switch, input, take(switch, input, start), start)
            continue

        input, rest = token[:2], token[2:]
        if not re.fullmatch(r"-[^\W_]", input):
            raise MalformedTokenError(
                "malformed switch %r at %s position" % (token, _ordinal(start)),
                input=token,
                index=start,
                hint="short switches look like -x or -x value",
            )
        if (switch := schema.get(input)) is None or switch.short != input:
            raise UnknownSwitchError(
                "unknown switch %r at %s position" % (input, _ordinal(start)),
                input=input,
                index=start,
                hint="remove it or check the spelling of the option",
            )

        if switch.takes_value:
            if rest.startswith("="):
                rest = rest[1:]
            _store(values, switch, input, rest or take(switch, input, start), start)
            continue

        if rest.startswith("="):
            raise FlagAssignmentError(
                "flag %r at %s position does not take a value" % (input, _ordinal(start)),
                input=input,
                index=start,
                hint="use %s alone, without '%s'" % (input, rest),
            )
        _store(values, switch, input, True, start)

        # clustered flags: -abc == -a -b -c
        for char in rest:
            input = "-" + char
            if (switch := schema.get(input)) is None or switch.short != input:
                raise UnknownSwitchError(
                    "unknown switch %r in %r at %s position" % (input, token, _ordinal(start)),
                    input=input,
                    index=start,
                    hint="only flags can be clustered; pass options separately",
                )
            if switch.takes_value:
                raise OptionValueRequiredError(
                    "option %r cannot be clustered in %r at %s position" % (input, token, _ordinal(start)),
                    input=input,
                    index=start,
                    hint="pass a value: %s %s" % (input, switch.metavar),
                )
            _store(values, switch, input, True, start)

    if missing := [switch for switch in schema if switch.required and switch.key not in values]:
        names = ", ".join("/".join(switch.names) for switch in missing)
        raise MissingOptionsError(
            "missing required option%s: %s" % ("s" * (len(missing) > 1), names),
            input=names,
            hint="add the missing option%s to the command line" % ("s" * (len(missing) > 1)),
        )

    return Namespace(schema, values, operands)


__all__ = (
    "Namespace",
    "parse",
)
