"""
Polycli text utilities.

Pure line transforms plus the commands exposing them through a CommandRepository:

- line:get_columns   select columns of whitespace/regex separated lines (stdin → stdout)
- tsv:get_columns    select columns of tab separated lines (stdin → stdout)
- line:split         re-split lines on a regex and join the fields with tabs
- line:filter        keep lines containing a substring or matching a regex,
                     optionally looking at a single TSV column only
- set:difference     sorted lines of one file that do not appear in another

Column lists accept indices and inclusive ranges: "0", "0,2", "1-3", "0,2-4".
Out-of-range columns are skipped.

Actions read sys.stdin and write sys.stdout at call time; invalid values are
reported as InvalidValueError on stderr followed by SystemExit(2).
"""
import logging
import re
import sys

from .faults import *
from .options import *
from .repository import CommandRepository

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = r"\s+"


def parse_columns(*specs):
    """
    Expand column specifications ("0,2-4") into a list of indices, in order.

    Raises
    - ValueError: malformed index or reversed range.
    """
    columns = []
    for spec in specs:
        for part in str(spec).split(","):
            if match := re.fullmatch(r"\s*(\d+)\s*-\s*(\d+)\s*", part, re.ASCII):
                start, end = map(int, match.groups())
                if start > end:
                    raise ValueError(f"column range {part.strip()!r} is reversed")
                columns.extend(range(start, end + 1))
            elif re.fullmatch(r"\s*\d+\s*", part, re.ASCII):
                columns.append(int(part))
            else:
                raise ValueError(f"invalid column {part.strip()!r}")
    return columns


def split_fields(line, delimiter=DEFAULT_DELIMITER):
    """
    Split a line on a regex; trailing empty fields are dropped, and so is the
    leading one when the delimiter matches the empty string at the start
    ("abc" split on "" gives a, b, c).
    """
    pattern = re.compile(delimiter)
    fields = pattern.split(line)
    if fields and not fields[0] and (match := pattern.match(line)) and not match.group():
        fields.pop(0)
    while fields and not fields[-1]:
        fields.pop()
    return fields


def select_columns(fields, columns):
    return [fields[column] for column in columns if column < len(fields)]


def get_columns(lines, columns, delimiter=DEFAULT_DELIMITER):
    """
    Yield the selected columns of every line, joined with tabs.
    """
    pattern = re.compile(delimiter)
    for line in lines:
        yield "\t".join(select_columns(split_fields(line, pattern), columns))


def get_tsv_columns(lines, columns):
    for line in lines:
        yield "\t".join(select_columns(line.split("\t"), columns))


def split_lines(lines, delimiter=DEFAULT_DELIMITER):
    pattern = re.compile(delimiter)
    for line in lines:
        yield "\t".join(split_fields(line, pattern))


def filter_lines(lines, pattern, *, regex=False, column=None):
    """
    Yield the lines whose text (or TSV column 'column') contains 'pattern'.

    With regex=True, 'pattern' is searched as a regular expression instead.
    """
    if regex:
        matches = re.compile(pattern).search
    else:
        def matches(text):
            return pattern in text

    for line in lines:
        if column is None:
            if matches(line):
                yield line
            continue
        fields = line.split("\t")
        if column < len(fields) and matches(fields[column]):
            yield line


def difference(first, second):
    """
    Sorted unique lines of 'first' that are not in 'second'.
    """
    return sorted(set(first).difference(second))


def _read(stream):
    for line in stream:
        yield line.rstrip("\r\n")


def _write(lines):
    for line in lines:
        sys.stdout.write(line + "\n")


def _abort(message, **options):
    trigger(InvalidValueError(message, **options), shell=True)
    raise SystemExit(2)


def _columns(values):
    try:
        return parse_columns(*values.getall("column"))
    except ValueError as error:
        _abort(str(error), input=", ".join(values.getall("column")), hint="use indices and ranges such as 0,2-4")


def _pattern(values, key):
    pattern = values.get(key, DEFAULT_DELIMITER)
    try:
        return re.compile(pattern)
    except re.error as error:
        _abort("invalid regular expression %r: %s" % (pattern, error), input=pattern)


def line_get_columns(values):
    columns = _columns(values)
    _write(get_columns(_read(sys.stdin), columns, _pattern(values, "delimiter")))


def tsv_get_columns(values):
    _write(get_tsv_columns(_read(sys.stdin), _columns(values)))


def line_split(values):
    _write(split_lines(_read(sys.stdin), _pattern(values, "delimiter")))


def line_filter(values):
    pattern = values["pattern"]
    column = values.get("column")
    if column is not None:
        if not re.fullmatch(r"\d+", column, re.ASCII):
            _abort("invalid column %r" % column, input=column, hint="use a single column index such as 0")
        column = int(column)
    if values.get("regex"):
        try:
            re.compile(pattern)
        except re.error as error:
            _abort("invalid regular expression %r: %s" % (pattern, error), input=pattern)
    _write(filter_lines(_read(sys.stdin), pattern, regex=bool(values.get("regex")), column=column))


def set_difference(values):
    contents = []
    for key in ("first", "second"):
        try:
            with open(values[key], encoding="utf-8") as stream:
                contents.append(list(_read(stream)))
        except OSError as error:
            _abort("cannot read %r: %s" % (values[key], error.strerror or error), input=values[key])
    _write(difference(*contents))


def build_repository(*, strict=True, colorful=False):
    """
    Return a CommandRepository with every utility command registered.
    """
    repository = CommandRepository(strict=strict, colorful=colorful)
    column = Option(
        "-c", "--column",
        metavar="<columns>",
        descr="Column numbers (0, 1, 2, ...); ranges and comma separated lists are accepted",
        required=True,
        multiple=True,
    )
    delimiter = Option(
        "-d", "--delimiter",
        metavar="<regex>",
        descr='Delimiter of the columns (default: "\\s+")',
    )

    repository.describe_category("line", "Line oriented filters reading standard input.")
    repository.describe_category("set", "Set operations on line files.")

    repository.register(
        "line:get_columns",
        OptionSchema(column, delimiter),
        descr="Get columns from each line.",
        action=line_get_columns,
        examples=("$ cat access.log | polycli line:get_columns -c 0,3-5",),
        category="line",
    )
    repository.register(
        "line:split",
        OptionSchema(delimiter),
        descr="Split each line on a delimiter and print the fields tab separated.",
        action=line_split,
        examples=("$ cat data.csv | polycli line:split -d ,",),
        category="line",
    )
    repository.register(
        "line:filter",
        OptionSchema(
            Option("-p", "--pattern", metavar="<pattern>", descr="Text to look for", required=True),
            Flag("-r", "--regex", descr="Interpret the pattern as a regular expression"),
            Option("-c", "--column", metavar="<column>", descr="Only look at this TSV column"),
        ),
        descr="Print the lines containing a pattern.\n\nWith --column only one tab separated column is searched.",
        action=line_filter,
        examples=(
            "$ cat app.log | polycli line:filter -p ERROR",
            "$ cat table.tsv | polycli line:filter -r -p '^a.*z$' -c 2",
        ),
        category="line",
    )
    repository.register(
        "tsv:get_columns",
        OptionSchema(column),
        descr="Get columns from TSV file.",
        action=tsv_get_columns,
        examples=("$ cat table.tsv | polycli tsv:get_columns -c 1 -c 3",),
        category="tsv",
    )
    repository.register(
        "set:difference",
        OptionSchema(
            Option("-a", "--first", metavar="<file>", descr="Lines to keep", required=True),
            Option("-b", "--second", metavar="<file>", descr="Lines to remove", required=True),
        ),
        descr="Print the sorted lines of the first file that do not appear in the second one.",
        action=set_difference,
        examples=("$ polycli set:difference -a all.txt -b seen.txt",),
        category="set",
    )
    logger.debug("%d utility commands registered", len(repository))
    return repository


__all__ = (
    "DEFAULT_DELIMITER",
    "parse_columns",
    "split_fields",
    "select_columns",
    "get_columns",
    "get_tsv_columns",
    "split_lines",
    "filter_lines",
    "difference",
    "build_repository",
)
