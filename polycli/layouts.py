"""
Polycli help layouts.

Overview
- Section: one renderable block of a command help page.
  • kinds: usage, description, options, examples, custom (heading + caller lines).
  • heading: optional; falls back to the kind's default heading at render time.
- HelpLayout: immutable value describing which sections to render, in which order,
  and how wide/indented the output is.

Unset vs. empty
- Every HelpLayout field is unset by default (published as None).
- Unset sections fall back to the default ordering: usage, description, options, examples.
- An explicitly empty section tuple renders nothing at all.

Building
- Fluent: every builder method returns a new layout.
    >>> layout = HelpLayout(width=80).add_usage().add_options("Flags")
    >>> [section.kind.name for section in layout.sections]
    ['USAGE', 'OPTIONS']

Merging
- base.merge(override): every field set on the override replaces the base's;
  a non-empty override section list fully replaces the base's list (no appending);
  an explicitly empty override list only replaces an unset base list.
"""
from enum import Enum

from .utils import *

DEFAULT_WIDTH = 100
DEFAULT_LEFT_PADDING = 4
DEFAULT_DESCR_PADDING = 2


class SectionKind(Enum):
    USAGE = "usage"
    DESCRIPTION = "description"
    OPTIONS = "options"
    EXAMPLES = "examples"
    CUSTOM = "custom"

    @property
    def heading(self):
        """
        default heading for sections of this kind (None for custom sections).
        """
        return DEFAULT_HEADINGS.get(self)


DEFAULT_HEADINGS = {
    SectionKind.USAGE: "Usage",
    SectionKind.DESCRIPTION: "Description",
    SectionKind.OPTIONS: "Options",
    SectionKind.EXAMPLES: "Examples",
}


def _sanitize_heading(heading):
    if not isinstance(heading, str | Unset | None):
        raise TypeError("section heading must be a string")
    if isinstance(heading, str) and not (heading := heading.strip()):
        raise ValueError("section heading cannot be empty")
    return Unset if heading is None else heading


class Section(metaclass=IntrospectableType):
    """
    One help section. Build with the kind-named constructors:

    - Section.usage(heading=Unset)
    - Section.description(heading=Unset)
    - Section.options(heading=Unset)
    - Section.examples(heading=Unset)
    - Section.custom(heading, lines)
    """

    __introspectable__ = (
        "kind",
        "heading",
        "lines",
    )

    def __new__(cls, kind, heading=Unset, lines=()):
        if not isinstance(kind, SectionKind):
            raise TypeError("section kind must be a section-kind")
        if isinstance(lines, str):
            lines = (lines,)
        self = super().__new__(cls)
        self._kind = kind
        self._heading = _sanitize_heading(heading)
        self._lines = tuple(line for entry in lines for line in str(entry).splitlines() or [""])
        if kind is SectionKind.CUSTOM and not self._heading:
            raise ValueError("custom sections must have a heading")
        return self

    @classmethod
    def usage(cls, heading=Unset):
        return cls(SectionKind.USAGE, heading)

    @classmethod
    def description(cls, heading=Unset):
        return cls(SectionKind.DESCRIPTION, heading)

    @classmethod
    def options(cls, heading=Unset):
        return cls(SectionKind.OPTIONS, heading)

    @classmethod
    def examples(cls, heading=Unset):
        return cls(SectionKind.EXAMPLES, heading)

    @classmethod
    def custom(cls, heading, lines=()):
        """
        Free-form section; each entry of 'lines' may embed newlines.
        """
        return cls(SectionKind.CUSTOM, heading, lines)

    def __eq__(self, other):
        if not isinstance(other, Section):
            return NotImplemented
        return (self._kind, self._heading, self._lines) == (other._kind, other._heading, other._lines)

    def __hash__(self):
        return hash((self._kind, self._heading, self._lines))


DEFAULT_SECTIONS = (
    Section.usage(),
    Section.description(),
    Section.options(),
    Section.examples(),
)


def _sanitize_int(field, value):
    if value is Unset or value is None:
        return Unset
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"help-layout {field!r} must be an integer")
    if value < 0 or (field == "width" and value < 1):
        raise ValueError(f"help-layout {field!r} is out of range")
    return value


class HelpLayout(metaclass=IntrospectableType):
    """
    Immutable help layout (sections + formatting parameters).

    Fields (all unset by default)
    - sections: ordered Section tuple; unset means DEFAULT_SECTIONS, () means nothing.
    - width: wrap column (DEFAULT_WIDTH).
    - left_padding: indent of option rows (DEFAULT_LEFT_PADDING).
    - descr_padding: gap between the option names and their description (DEFAULT_DESCR_PADDING).
    - options_heading: heading used by option sections without an explicit heading.
    - descr: description text, replacing the one stored with the command.
    - examples: example lines, replacing the ones stored with the command.
    """

    __introspectable__ = (
        "sections",
        "width",
        "left_padding",
        "descr_padding",
        "options_heading",
        "descr",
        "examples",
    )

    def __new__(
            cls,
            *,
            sections=Unset,
            width=Unset,
            left_padding=Unset,
            descr_padding=Unset,
            options_heading=Unset,
            descr=Unset,
            examples=Unset,
    ):
        self = super().__new__(cls)
        if sections is not Unset and sections is not None:
            sections = tuple(sections)
            if not all(isinstance(section, Section) for section in sections):
                raise TypeError("help-layout sections must be sections")
        else:
            sections = Unset
        if examples is not Unset and examples is not None:
            examples = (examples,) if isinstance(examples, str) else tuple(map(str, examples))
        else:
            examples = Unset
        if descr is not Unset and descr is not None and not isinstance(descr, str):
            raise TypeError("help-layout 'descr' must be a string")

        self._sections = sections
        self._width = _sanitize_int("width", width)
        self._left_padding = _sanitize_int("left_padding", left_padding)
        self._descr_padding = _sanitize_int("descr_padding", descr_padding)
        self._options_heading = _sanitize_heading(options_heading)
        self._descr = Unset if descr is None else descr
        self._examples = examples
        return self

    def _fields(self):
        return {name: getattr(self, "_" + name) for name in type(self).__introspectable__}

    def replace(self, /, **fields):
        """
        Return a copy with the given fields replaced (None unsets a field).
        """
        if unknown := set(fields).difference(type(self).__introspectable__):
            raise TypeError("replace() got unexpected field(s): %s" % ", ".join(sorted(unknown)))
        return type(self)(**self._fields() | fields)

    __replace__ = replace

    def _add(self, section):
        return self.replace(sections=(*coalesce(self._sections, ()), section))

    def add_usage(self, heading=Unset):
        return self._add(Section.usage(heading))

    def add_description(self, heading=Unset):
        return self._add(Section.description(heading))

    def add_options(self, heading=Unset):
        return self._add(Section.options(heading))

    def add_examples(self, heading=Unset):
        return self._add(Section.examples(heading))

    def add_custom(self, heading, lines=()):
        return self._add(Section.custom(heading, lines))

    def clear(self):
        """
        Return a copy with an explicitly empty section list (renders nothing).
        """
        return self.replace(sections=())

    def has_sections(self):
        return bool(self._sections)

    def is_empty(self):
        """
        True when no field at all is set (equivalent to HelpLayout()).
        """
        return all(value is Unset for value in self._fields().values())

    def merge(self, other, /):
        """
        Overlay 'other' on top of this layout and return the result.
        """
        if other is None or other is Unset:
            return self
        if not isinstance(other, HelpLayout):
            raise TypeError("help-layout can only be merged with another help-layout")

        fields = self._fields()
        for name, value in other._fields().items():
            if name == "sections":
                if value or (value == () and self._sections is Unset):
                    fields[name] = value
            elif value is not Unset:
                fields[name] = value
        return type(self)(**fields)

    def resolve(self):
        """
        Return (sections, width, left_padding, descr_padding) with defaults applied.
        """
        return (
            coalesce(self._sections, DEFAULT_SECTIONS),
            coalesce(self._width, DEFAULT_WIDTH),
            coalesce(self._left_padding, DEFAULT_LEFT_PADDING),
            coalesce(self._descr_padding, DEFAULT_DESCR_PADDING),
        )

    def __eq__(self, other):
        if not isinstance(other, HelpLayout):
            return NotImplemented
        return self._fields() == other._fields()

    def __hash__(self):
        return hash(tuple(self._fields().values()))


__all__ = (
    "DEFAULT_WIDTH",
    "DEFAULT_LEFT_PADDING",
    "DEFAULT_DESCR_PADDING",
    "DEFAULT_HEADINGS",
    "DEFAULT_SECTIONS",
    "SectionKind",
    "Section",
    "HelpLayout",
)
