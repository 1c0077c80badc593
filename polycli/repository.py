"""
Polycli command repository.

Scope
- Command: immutable registration record (name, category, schema, description,
  examples, action).
- Invocation: result of parsing one argument vector (command token, help request,
  parsed values) with a derived InvocationState.
- CommandRepository: the registry. It owns the commands, the universal options
  (initially -h/--help), the default and per-command help layouts and the category
  descriptions, and provides parse, dispatch, help and command-list rendering.

Lifecycle
- Register every command at startup, then parse/dispatch/render as often as needed.
  A failed parse never mutates the registry, so one instance can serve many
  invocations (tests, REPL-style hosts).

Parse contract
1. empty argv → InvocationState.EMPTY, nothing parsed.
2. first token = command name, remaining tokens = tail.
3. a literal -h/--help anywhere in the tail → HELP_REQUESTED; the schema is not
   consulted, so unmet required options never mask a help request.
4. otherwise the tail is parsed against schema_for(name): the command schema merged
   with the universal options (command switches win), or the universal options
   alone for unknown names.
5. schema violations raise ParseError subclasses carrying the command name.

Command list
- "## Usage" block, then one "## <category>" block per named category
  (alphabetical), then the default category, headed "## Commands" when it is the
  only group and "## Other Commands" otherwise.
- Each row: name padded to 16 columns (or the next multiple of 4 past name + 4
  when longer) followed by the first line of the description.
"""
import inspect
import logging
from collections import defaultdict
from enum import Enum
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .faults import *
from .layouts import HelpLayout
from .options import Flag, OptionSchema, Switch
from .renderers import HelpRenderer
from .utils import *

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "other"
DEFAULT_OPTIONS_HEADING = "Command Line Options"
HELP_TOKENS = frozenset({"-h", "--help"})


class Command(metaclass=IntrospectableType):
    """
    Registered command (immutable).

    Properties
    - name: command token.
    - category: grouping label for the command list (DEFAULT_CATEGORY when omitted).
    - schema: OptionSchema of the command (without the universal options).
    - descr: description (None when absent); the first line is the summary.
    - examples: tuple of example lines.
    - action: callable receiving the parsed Namespace, or None.
    """

    __introspectable__ = (
        "name",
        "category",
        "schema",
        "descr",
        "examples",
        "action",
    )
    __displayable__ = (
        "name",
        "category",
        "schema",
        "descr",
    )

    def __new__(cls, name, schema=Unset, /, descr=Unset, action=Unset, examples=(), *, category=Unset):
        if not isinstance(name, str):
            raise TypeError("command name must be a string")
        elif not (name := name.strip()) or any(char.isspace() for char in name):
            raise ValueError("command name must be a non-empty word")
        if not isinstance(category, str | Unset):
            raise TypeError("command category must be a string")
        if not isinstance(schema, OptionSchema | Unset) and schema is not None:
            raise TypeError("command schema must be an option-schema")
        if not isinstance(descr, str | Text | Unset) and descr is not None:
            raise TypeError("command description must be a string")
        if not callable(action) and action is not Unset and action is not None:
            raise TypeError("command action must be callable")
        if isinstance(examples, str):
            examples = (examples,)

        self = super().__new__(cls)
        self._name = name
        self._category = coalesce(category, DEFAULT_CATEGORY).strip() or DEFAULT_CATEGORY
        self._schema = schema or OptionSchema()
        self._descr = descr or Unset
        self._examples = tuple(map(str, examples or ()))
        self._action = action or Unset
        return self

    @property
    def summary(self):
        """
        first line of the description ("" when there is none).
        """
        if not self.descr:
            return ""
        descr = self.descr.plain if isinstance(self.descr, Text) else self.descr
        return descr.strip().split("\n", 1)[0].strip()


class InvocationState(Enum):
    EMPTY = "empty"
    HELP_REQUESTED = "help-requested"
    PARSED = "parsed"
    PARSE_FAILED = "parse-failed"


class Invocation(metaclass=IntrospectableType):
    """
    Outcome of CommandRepository.parse().

    - command: the command token (None for an empty argv).
    - help: True when -h/--help appeared in the tail.
    - values: Namespace of parsed values (None for EMPTY and HELP_REQUESTED).

    PARSE_FAILED never appears here: a failed parse raises instead, and the
    dispatcher reports that state.
    """

    __introspectable__ = (
        "command",
        "help",
    )

    def __new__(cls, command=None, *, help=False, values=None):
        self = super().__new__(cls)
        self._command = command
        self._help = bool(help)
        self._values = values
        return self

    @property
    def values(self):
        return self._values

    @property
    def state(self):
        if self.command is None:
            return InvocationState.EMPTY
        if self.help:
            return InvocationState.HELP_REQUESTED
        return InvocationState.PARSED

    def __rich_repr__(self):
        yield "command", self.command
        yield "state", self.state
        yield "values", self.values


class CommandRepository:
    """
    Registry and front door of a multi-command CLI.

    Options
    - strict: reject re-registration of a name (DuplicateRegistrationError);
      by default the last registration wins.
    - colorful: style the console output of print_command_help/print_command_list.

    Example:
        >>> repository = CommandRepository()
        >>> _ = repository.register("deploy", OptionSchema(Option("-s", "--source")), descr="Deploy a site.")
        >>> repository.parse(["deploy", "-s", "./docs"]).values["source"]
        './docs'
    """

    def __init__(self, *, strict=False, colorful=False):
        self.strict = strict
        self.colorful = colorful
        self._commands = {}
        self._layouts = {}
        self._default_layout = Unset
        self._category_descrs = {}
        self._universal = OptionSchema(Flag("-h", "--help", descr="Print help message"))

    # --- registration ---

    def register(self, name, schema=Unset, /, descr=Unset, action=Unset, examples=(), *, category=Unset):
        """
        Add (or overwrite) a command and return its record.

        Raises
        - DuplicateRegistrationError: strict repository and 'name' already registered.
        - TypeError/ValueError: malformed registration data.
        """
        command = Command(name, schema, descr=descr, action=action, examples=examples, category=category)
        if command.name in self._commands:
            if self.strict:
                raise DuplicateRegistrationError(
                    "command %r is already registered" % command.name,
                    command=command.name,
                    hint="pick another name or build the repository with strict=False",
                )
            logger.debug("command %r overwritten", command.name)

        # surfaces shadowed universal switches in the debug log
        command.schema.merge(self._universal)

        self._commands[command.name] = command
        logger.debug("registered command %r in category %r", command.name, command.category)
        return command

    def command(self, name=Unset, schema=Unset, /, descr=Unset, examples=(), *, category=Unset):
        """
        Decorator form of register(): the decorated callable becomes the action.

        The name defaults to the function name (underscores become hyphens) and
        the description to its docstring.
        """
        def wrapper(action, /):
            if not callable(action):
                raise TypeError("@command() must be applied to a callable")
            self.register(
                coalesce(name, action.__name__.strip("_").replace("_", "-")),
                schema,
                descr=coalesce(descr, inspect.getdoc(action) or Unset),
                action=action,
                examples=examples,
                category=category,
            )
            return action

        return rename(wrapper, "command")

    def describe_category(self, category, descr, /):
        """
        Attach a description printed under the category heading of the command list.
        """
        if not isinstance(category, str) or not isinstance(descr, str | None):
            raise TypeError("describe_category() arguments must be strings")
        if descr is None or not descr.strip():
            self._category_descrs.pop(category, None)
        else:
            self._category_descrs[category] = descr.strip()

    def configure_default_help_layout(self, layout=None, /):
        """
        Replace the default help layout; None or an empty layout restores the built-in one.
        """
        if layout is not None and not isinstance(layout, HelpLayout):
            raise TypeError("configure_default_help_layout() argument must be a help-layout")
        self._default_layout = Unset if layout is None or layout.is_empty() else layout

    def configure_command_help_layout(self, name, layout=None, /):
        """
        Set (or clear with None) the help layout override of one command.

        The command does not need to be registered yet.
        """
        if name is None:
            return
        if layout is not None and not isinstance(layout, HelpLayout):
            raise TypeError("configure_command_help_layout() argument must be a help-layout")
        if layout is None:
            self._layouts.pop(name, None)
        else:
            self._layouts[name] = layout

    def add_universal_option(self, switch, /):
        """
        Make a switch available to every command (merged under command switches).

        Raises
        - DuplicateFlagSpellingError: a universal switch already uses one of its spellings.
        """
        if not isinstance(switch, Switch):
            raise TypeError("add_universal_option() argument must be an option or a flag")
        self._universal = self._universal.extend(switch)
        logger.debug("universal switch %s added", "/".join(switch.names))

    @property
    def universal_options(self):
        return self._universal

    # --- lookup ---

    def has_command(self, name, /):
        return name in self._commands

    def __contains__(self, name):
        return self.has_command(name)

    def __iter__(self):
        return iter(sorted(self._commands))

    def __len__(self):
        return len(self._commands)

    def __getitem__(self, name):
        return self._commands[name]

    @property
    def commands(self):
        return MappingProxyType(self._commands)

    @property
    def categories(self):
        """
        category → sorted command names; named categories alphabetically, the
        default category last.
        """
        groups = defaultdict(list)
        for command in self._commands.values():
            groups[command.category].append(command.name)
        return MappingProxyType({
            category: sorted(groups[category])
            for category in sorted(groups, key=lambda category: (category == DEFAULT_CATEGORY, category))
        })

    def schema_for(self, name, /):
        """
        Effective schema of a command: its own switches merged with the universal
        ones, or the universal options alone when 'name' is unknown.
        """
        if (command := self._commands.get(name)) is None:
            return self._universal
        return command.schema.merge(self._universal)

    def help_layout_for(self, name, /):
        """
        Effective help layout: built-in defaults, overlaid with the default layout,
        overlaid with the command override; the options heading defaults to
        DEFAULT_OPTIONS_HEADING.
        """
        layout = HelpLayout().merge(self._default_layout).merge(self._layouts.get(name))
        if layout.options_heading is None:
            layout = layout.replace(options_heading=DEFAULT_OPTIONS_HEADING)
        return layout

    # --- invocation ---

    def parse(self, argv, /):
        """
        Resolve the command token and parse its tail (see module docstring).
        """
        if isinstance(argv, str):
            raise TypeError("parse() argument must be a sequence of strings, not a string")
        argv = list(argv)
        if not argv:
            logger.debug("empty argument vector")
            return Invocation()

        name, *tail = argv
        if HELP_TOKENS.intersection(tail):
            logger.debug("help requested for %r", name)
            return Invocation(name, help=True)

        try:
            values = self.schema_for(name).parse(tail)
        except ParseError as fault:
            logger.debug("parse of %r failed: %s", name, fault)
            raise fault.replace(command=name) from None

        logger.debug("parsed %r: %r", name, values)
        return Invocation(name, values=values)

    def dispatch(self, name, values=None, /):
        """
        Run the action of 'name' once with the parsed values.

        Unknown names and commands without an action are a no-op.
        """
        if (command := self._commands.get(name)) is None or command.action is None:
            logger.debug("nothing to dispatch for %r", name)
            return
        logger.debug("dispatching %r", name)
        command.action(values)

    # --- help ---

    def _command_help(self, name):
        command = self._commands.get(name)
        renderer = HelpRenderer(self.help_layout_for(name), colorful=self.colorful)
        if command is None:
            return renderer, (name, OptionSchema(), None, ())
        return renderer, (name, self.schema_for(name), command.descr, command.examples)

    def render_command_help(self, name, /):
        """
        Return the help page of a command as plain text ("" for None).

        Unknown names render with an empty schema and no description.
        """
        if name is None:
            return ""
        renderer, arguments = self._command_help(name)
        return renderer.render(*arguments)

    def print_command_help(self, name, /, *, console=None):
        if name is None:
            return
        renderer, arguments = self._command_help(name)
        renderer.print(*arguments, console=console)

    def _command_list(self, usage):
        styles = defaultdict(str, {
            "list-heading": "bold #FFFFFF",
            "usage-section": "bold #36C5F0",
            "category-description": "italic #A3A3A3",
            "children": "bold #36C5F0",  # command names
            "children-description": "#9CA3AF",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        output = Text()

        def line(fragment="", style=""):
            output.append(fragment, styler(style)).append("\n")

        line("## Usage", "list-heading")
        line()
        line(str(usage or ""), "usage-section")
        line()

        categories = self.categories
        for category, names in categories.items():
            if category != DEFAULT_CATEGORY:
                heading = category
            else:
                heading = "Commands" if len(categories) == 1 else "Other Commands"
            line("## " + heading, "list-heading")
            line()
            if descr := self._category_descrs.get(category):
                line(descr, "category-description")
            for name in names:
                width = 16 if len(name) < 16 else ((len(name) + 4) // 4) * 4
                row = Text(name.ljust(width), styler("children"))
                if summary := self._commands[name].summary:
                    row.append(summary, styler("children-description"))
                row.rstrip()
                output.append(row).append("\n")
            line()
        return output

    def render_command_list(self, usage="", /):
        """
        Return the categorized command list as plain text.
        """
        return self._command_list(usage).plain

    def print_command_list(self, usage="", /, *, console=None):
        page = self._command_list(usage)
        page.rstrip()
        (console or Console()).print(page, highlight=False, soft_wrap=True)


__all__ = (
    "DEFAULT_CATEGORY",
    "DEFAULT_OPTIONS_HEADING",
    "Command",
    "InvocationState",
    "Invocation",
    "CommandRepository",
)
