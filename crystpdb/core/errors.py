"""Graded, located diagnostics for PDB parsing and validation.

Every deviation from the file format found while reading or validating a
structure is reported as a PDBError value. Only a BREAKING_ERROR stops a
parse; it travels as a PDBErrorException carrying the error.

Hierarchy:
    PDBError
    ├── level: ErrorLevel
    ├── short_description / long_description
    └── context: Context (file, full line or column range)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class ErrorLevel(IntEnum):
    """Severity of a diagnostic, ordered from least to most severe."""

    GENERAL_WARNING = 0
    LOOSE_WARNING = 1
    STRICT_WARNING = 2
    BREAKING_ERROR = 3

    @property
    def is_fatal(self) -> bool:
        return self is ErrorLevel.BREAKING_ERROR

    @property
    def descriptor(self) -> str:
        return _DESCRIPTORS[self]

    def fails(self, strictness: "ErrorLevel") -> bool:
        """True if a diagnostic at this level fails a run at `strictness`."""
        return self >= strictness

    @classmethod
    def from_name(cls, name: str) -> "ErrorLevel":
        """Resolve 'strict', 'loose', 'general', 'breaking' (or the full enum name)."""
        key = name.strip().lower().replace("-", "_")
        aliases = {
            "general": cls.GENERAL_WARNING,
            "loose": cls.LOOSE_WARNING,
            "strict": cls.STRICT_WARNING,
            "breaking": cls.BREAKING_ERROR,
            "fatal": cls.BREAKING_ERROR,
        }
        if key in aliases:
            return aliases[key]
        try:
            return cls[key.upper()]
        except KeyError:
            raise ValueError(f"Unknown error level: {name!r}") from None


_DESCRIPTORS = {
    ErrorLevel.GENERAL_WARNING: "GeneralWarning",
    ErrorLevel.LOOSE_WARNING: "LooseWarning",
    ErrorLevel.STRICT_WARNING: "StrictWarning",
    ErrorLevel.BREAKING_ERROR: "BreakingError",
}


@dataclass(frozen=True)
class Context:
    """Where a diagnostic applies.

    Use the constructors instead of building one directly:
      - Context.none()                         no location
      - Context.show(text)                     a file name or free text
      - Context.full_line(linenumber, line)    a whole numbered line
      - Context.line(linenumber, line, offset, length)
                                               a column range (0-based offset)
    """

    kind: str = "none"
    text: str = ""
    linenumber: int = 0
    offset: int = 0
    length: int = 0

    @classmethod
    def none(cls) -> "Context":
        return cls()

    @classmethod
    def show(cls, text: str) -> "Context":
        return cls(kind="show", text=str(text))

    @classmethod
    def full_line(cls, linenumber: int, line: str) -> "Context":
        return cls(kind="full_line", text=line, linenumber=linenumber)

    @classmethod
    def line(cls, linenumber: int, line: str, offset: int, length: int) -> "Context":
        return cls(kind="line", text=line, linenumber=linenumber, offset=offset, length=length)

    @property
    def columns(self) -> tuple[int, int] | None:
        """Half-open 0-based column range for a `line` context."""
        if self.kind != "line":
            return None
        return (self.offset, self.offset + self.length)

    def __str__(self) -> str:
        if self.kind == "none":
            return ""
        if self.kind == "show":
            return f"\n     | {self.text}\n"
        gutter = len(str(self.linenumber))
        pad = " " * gutter
        out = f"\n{pad} |\n{self.linenumber} | {self.text}\n{pad} |"
        if self.kind == "line":
            out += " " + " " * self.offset + "^" * max(self.length, 1)
        return out + "\n"


@dataclass(frozen=True)
class PDBError:
    """A single diagnostic."""

    level: ErrorLevel
    short_description: str
    long_description: str
    context: Context = Context()

    @property
    def is_fatal(self) -> bool:
        return self.level.is_fatal

    def fails(self, strictness: ErrorLevel) -> bool:
        return self.level.fails(strictness)

    def __str__(self) -> str:
        return (
            f"{self.level.descriptor}: {self.short_description}"
            f"{self.context}{self.long_description}"
        )


class PDBErrorException(Exception):
    """Raised to carry a PDBError out of a decoder or an aborted parse."""

    def __init__(self, error: PDBError):
        super().__init__(str(error))
        self.error = error

    @property
    def level(self) -> ErrorLevel:
        return self.error.level
