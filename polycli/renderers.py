"""
Polycli help rendering.

HelpRenderer turns a HelpLayout plus a command's metadata (name, schema,
description, examples) into help text. Rendering is deterministic and never
raises on missing data: an absent name drops the usage section, an empty
description or example list drops its section, an empty schema drops the
options section.

Output shape (per section)
    Heading:
    <body lines>
    <blank line>

Body formats
- usage: "  usage: <name> [-h] -s <source> [-v]" (required switches bare), wrapped
  with a hanging indent under the first switch.
- description: the trimmed description, first line indented by two columns.
- options: one row per switch ("-s,--source <source>") after the left padding,
  descriptions aligned on a common column and wrapped with a hanging indent.
- examples: each example line indented by two columns, verbatim.
- custom: the caller's lines indented by two columns.

Styling
- colorful=True styles headings, names and metavars; the palette can be
  overridden through a __styles__ mapping in __main__.
- render() always returns plain text; text() returns the styled rich Text.
"""
from collections import defaultdict, deque

from rich.console import Console
from rich.containers import Lines
from rich.text import Text

from .layouts import *
from .options import Option, OptionSchema


class HelpRenderer:
    """
    Render command help pages according to a layout.

    Parameters
    - layout: HelpLayout | None (None behaves as HelpLayout()).
    - colorful: bool, style the rich Text produced by text().
    """

    def __init__(self, layout=None, *, colorful=False):
        if layout is not None and not isinstance(layout, HelpLayout):
            raise TypeError("help-renderer layout must be a help-layout")
        self.layout = layout if layout is not None else HelpLayout()
        self.colorful = colorful

    def render(self, name, schema=None, descr=None, examples=()):
        """
        Return the help page as plain text.
        """
        return self.text(name, schema, descr, examples).plain

    def text(self, name, schema=None, descr=None, examples=()):
        """
        Return the help page as rich Text (styled when colorful).

        The layout's descr/examples fields, when set, replace the given ones.
        """
        sections, width, padding, gap = self.layout.resolve()
        schema = schema if isinstance(schema, OptionSchema) else OptionSchema()
        if self.layout.descr is not None:
            descr = self.layout.descr
        if self.layout.examples is not None:
            examples = self.layout.examples
        if isinstance(examples, str):
            examples = (examples,)

        console = Console(width=width)
        styles = defaultdict(str, {
            "section-heading": "bold #FFFFFF",
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "option-name": "bold #00E6FF",  # value-taking switches
            "flag-name": "bold #22C55E",  # presence-only switches
            "metavar": "bold #FFD600",
            "description-section": "italic #A3A3A3",
            "argument-description": "#9CA3AF",
            "example": "#E5E7EB",
            "custom": "#D1D5DB",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            # Normalize to Rich Text; plain mode never carries styles.
            if not self.colorful:
                return Text(str(fragment.plain if isinstance(fragment, Text) else fragment))
            if isinstance(fragment, Text):
                return fragment.copy()
            return Text(str(fragment), styler(style))

        def names(switch, *, usage=False):
            style = "option-name" if isinstance(switch, Option) else "flag-name"
            if usage:
                return text(switch.short or switch.long, style)
            if not switch.short:
                return Text("   ").append(text(switch.long, style))
            return Text(",").join(text(name, style) for name in switch.names)

        def heading(section):
            if section.heading:
                label = section.heading
            elif section.kind is SectionKind.OPTIONS:
                label = self.layout.options_heading or section.kind.heading
            else:
                label = section.kind.heading
            return text(label, "section-heading").append(":")

        def wrap(fragment, available):
            lines = fragment.wrap(console, max(available, 1))
            for line in lines:
                line.rstrip()
            return lines

        def usage_body():
            if not name:
                return Lines()
            usage = Text("  ")
            usage.append(text("usage", "usage-label")).append(": ")
            usage.append(text(name, "program-name"))

            inputs = deque()
            for switch in schema:
                item = names(switch, usage=True)
                if switch.takes_value:
                    item.append(" ").append(text(switch.metavar, "metavar"))
                inputs.append(item if switch.required else Text.assemble("[", item, "]"))

            if not inputs:
                return Lines([usage])

            usage.append(" ")
            offset = len(usage)  # Hanging-indent column for wrapped usage items
            lines = Lines([inputs.popleft()])
            while inputs:
                if len(lines[-1]) + 1 + len(input := inputs.popleft()) > width - offset:
                    lines.append(input)
                else:
                    lines[-1].append(Text(" ") + input)

            usage.append(lines.pop(0))
            return Lines([usage, *(Text(" " * offset) + line for line in lines)])

        def description_body():
            if isinstance(descr, Text):
                body = text(descr[len(descr.plain) - len(descr.plain.lstrip()):])
            elif isinstance(descr, str):
                body = text(descr.lstrip(), "description-section")
            else:
                return Lines()
            body.rstrip()
            if not body.plain:
                return Lines()
            return wrap(Text("  ") + body, width)

        def options_body():
            rows = []
            for switch in schema:
                row = Text(" " * padding) + names(switch)
                if switch.takes_value:
                    row.append(" ").append(text(switch.metavar, "metavar"))
                rows.append((row, switch.descr))

            if not rows:
                return Lines()

            column = max(len(row) for row, _ in rows) + gap
            lines = Lines()
            for row, help in rows:
                if not help:
                    lines.append(row)
                    continue
                wrapped = wrap(text(help, "argument-description"), width - column)
                lines.append(row + Text(" " * (column - len(row))) + wrapped.pop(0))
                lines.extend(Text(" " * column) + line for line in wrapped)
            return lines

        def examples_body():
            lines = Lines()
            for example in examples or ():
                for line in str(example).splitlines() or [""]:
                    lines.append(Text("  ") + text(line, "example"))
            return lines

        def custom_body(section):
            return Lines(Text("  ") + text(line, "custom") for line in section.lines)

        bodies = {
            SectionKind.USAGE: usage_body,
            SectionKind.DESCRIPTION: description_body,
            SectionKind.OPTIONS: options_body,
            SectionKind.EXAMPLES: examples_body,
        }

        output = Text()
        for section in sections:
            if section.kind is SectionKind.CUSTOM:
                body = custom_body(section)
            else:
                body = bodies[section.kind]()
                if not body:
                    continue
            output.append(heading(section)).append("\n")
            for line in body:
                output.append(line).append("\n")
            output.append("\n")
        return output

    def print(self, name, schema=None, descr=None, examples=(), *, console=None):
        """
        Print the help page to a rich console (stdout by default).
        """
        page = self.text(name, schema, descr, examples)
        page.rstrip()
        (console or Console()).print(page, highlight=False, soft_wrap=True)


__all__ = (
    "HelpRenderer",
)
