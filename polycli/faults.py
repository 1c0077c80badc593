"""
Faults raised and reported by polycli.

Every user-facing problem is a CommandException subclass with a stable
FaultCode, a lowercase title and a one-line message; optional context travels
in the read-only 'options' mapping (hint, command, input, index, prog ...).

    10101        unknown command           (reported by the dispatcher)
    10201-10206  parse errors              (raised by parse / CommandRepository.parse)
    10301        invalid value             (raised by the utility commands)
    10401-10402  registry errors           (raised while registering commands/switches)

Faults render themselves through rich (__rich__):

    [ polycli — 10202 | Unknown Switch ]
    unknown switch '--bogus' at first position
     → run 'polycli deploy --help' to list the accepted switches

trigger(fault, shell=True) prints that block to stderr (or options["file"]);
without shell it raises the fault. Parsing code always raises, and the
dispatcher decides how to surface the fault.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce


class FaultCode(IntEnum):
    """
    stable numeric identifiers, grouped by hundreds.

    normalize() returns the label shown to users: the entry of a __codes__
    mapping in __main__ when the host defines one, otherwise the number.
    """
    # dispatch
    UNKNOWN_COMMAND = 10101

    # argument tail
    MALFORMED_TOKEN = 10201
    UNKNOWN_SWITCH = 10202
    FLAG_ASSIGNMENT = 10203
    DUPLICATED_SWITCH = 10204
    OPTION_VALUE_REQUIRED = 10205
    MISSING_OPTIONS = 10206

    # command values
    INVALID_VALUE = 10301

    # registry
    DUPLICATE_REGISTRATION = 10401
    DUPLICATE_SPELLING = 10402

    def normalize(self):
        labels = getattr(__import__("__main__"), "__codes__", {})
        return str(labels.get(self, self.value))


class CommandException(Exception):
    """
    base of every polycli fault.

    options (all optional)
    - code / title: default to the class' __code__ / __title__.
    - hint: one sentence telling the user what to try next.
    - command: name of the command being parsed or run.
    - input / index: offending token and its position in the tail.
    - prog, colorful, fancy, shell, file: presentation, see __rich__ and trigger().
    """
    __code__ = Unset
    __title__ = "command error"

    def __init__(self, message="", /, **options):
        if not isinstance(message, str):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"code": self.__code__, "title": self.__title__, **options})

    def __str__(self):
        return self.message

    @property
    def code(self):
        return coalesce(self.options["code"])

    @property
    def command(self):
        return self.options.get("command")

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        palette = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "dim #9CE19C",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        def piece(fragment, style):
            if isinstance(fragment, Text):
                return fragment.copy() if colorful else Text(fragment.plain)
            return Text(str(fragment or ""), palette[style] if colorful else "")

        prog = self.options.get("prog", getattr(main, "__prog__", "polycli"))
        header = Text.assemble(
            "[ ",
            piece(prog, "prog-name"),
            " — ",
            piece(self.code.normalize() if self.code else "-", "code"),
            " | ",
            piece(self.options["title"].title(), "error-title"),
            " ]",
        )
        body = [piece(self.message, "error-message")]
        if self.hint:
            body.append(Text.assemble(piece(" → ", "hint-arrow"), piece(self.hint, "hint")))

        if self.options.get("fancy"):
            return Panel(Group(*body), title=header, title_align="left")
        return Group(header, *body)

    def __trigger__(self):
        if not self.options.get("shell"):
            raise self from None
        Console(file=self.options.get("file", sys.stderr)).print(self)

    def replace(self, /, **overrides):
        """
        copy of the fault with 'overrides' merged into its options.
        """
        return type(self)(self.message, **(dict(self.options) | overrides))

    __replace__ = replace


class ParseError(CommandException):
    """
    the argument tail does not fit the command's option schema.
    """
    __title__ = "parse error"


class MalformedTokenError(ParseError):
    __code__ = FaultCode.MALFORMED_TOKEN
    __title__ = "malformed token"


class UnknownSwitchError(ParseError):
    __code__ = FaultCode.UNKNOWN_SWITCH
    __title__ = "unknown switch"


class FlagAssignmentError(ParseError):
    __code__ = FaultCode.FLAG_ASSIGNMENT
    __title__ = "flag assignment"


class DuplicatedSwitchError(ParseError):
    __code__ = FaultCode.DUPLICATED_SWITCH
    __title__ = "duplicated switch"


class OptionValueRequiredError(ParseError):
    __code__ = FaultCode.OPTION_VALUE_REQUIRED
    __title__ = "option value required"


class MissingOptionsError(ParseError):
    __code__ = FaultCode.MISSING_OPTIONS
    __title__ = "missing options"


class InvalidValueError(CommandException):
    """
    a parsed value that a command cannot use (bad column list, bad pattern, ...).
    """
    __code__ = FaultCode.INVALID_VALUE
    __title__ = "invalid value"


class UnknownCommandError(CommandException):
    __code__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


class DuplicateRegistrationError(CommandException):
    __code__ = FaultCode.DUPLICATE_REGISTRATION
    __title__ = "duplicate registration"


class DuplicateFlagSpellingError(CommandException):
    __code__ = FaultCode.DUPLICATE_SPELLING
    __title__ = "duplicate flag spelling"


def trigger(fault, /, **options):
    """
    merge 'options' into the fault, then print it (shell=True) or raise it.

    Raises
    - TypeError: 'fault' lacks the __trigger__/replace protocol of CommandException.
    """
    if not callable(getattr(fault, "__trigger__", None)) or not callable(getattr(fault, "replace", None)):
        raise TypeError("trigger() argument must have a __trigger__ and replace methods")
    fault.replace(**options).__trigger__()


def getdoc(code, /):
    """
    documentation of a fault code from the host's __main__.__docs__ mapping (None when absent).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "FaultCode",
    "CommandException",
    "ParseError",
    "MalformedTokenError",
    "UnknownSwitchError",
    "FlagAssignmentError",
    "DuplicatedSwitchError",
    "OptionValueRequiredError",
    "MissingOptionsError",
    "InvalidValueError",
    "UnknownCommandError",
    "DuplicateRegistrationError",
    "DuplicateFlagSpellingError",
    "trigger",
    "getdoc",
)
