from enum import Enum
import inspect
import typing as tp
import dataclasses as dt
import logging

from typing import Any, Optional
from shargs import args as _args, const, vt100

_logger = logging.getLogger(__name__)

T = tp.TypeVar("T")

# --- Scan -------------------------------------------------------------- #


class Scan:
    """
    A cursor over a list of command-line tokens.
    """

    _toks: list[str]
    _off: int

    def __init__(self, toks: list[str], off: int = 0):
        """
        Initializes a new `Scan` object.

        Args:
            toks: The tokens to scan, excluding the program name.
            off: The starting offset within the tokens.
        """
        self._toks = toks
        self._off = off

    def curr(self) -> Optional[str]:
        """
        Returns the current token, or None if at the end of the tokens.
        """
        if self.eof():
            return None
        return self._toks[self._off]

    def next(self, n: int = 1) -> Optional[str]:
        """
        Advances the cursor by `n` tokens and returns the new current token.
        """
        self._off = min(self._off + n, len(self._toks))
        return self.curr()

    def peek(self, off: int = 1) -> Optional[str]:
        """
        Peeks at the token `off` positions ahead without advancing.

        Returns:
            The token, or None if it lies past the end.
        """
        if self._off + off >= len(self._toks):
            return None

        return self._toks[self._off + off]

    def eof(self) -> bool:
        return self._off >= len(self._toks)


# --- Schema ----------------------------------------------------------------- #


class FieldKind(Enum):
    """
    Enum representing the kind of command-line flag.
    """

    FLAG = 0
    PARAM = 1


@dt.dataclass
class Field:
    """
    A recognized flag: a boolean switch or a flag that takes exactly one value.
    """

    kind: FieldKind
    shortName: Optional[str]
    longName: str
    description: str = ""
    default: Optional[str] = None

    _fieldName: str | None = dt.field(init=False, default=None)

    def bind(self, name: str):
        """Binds the field to the attribute it was declared as."""
        self._fieldName = name
        if not self.longName:
            self.longName = name.replace("_", "-")

    def isBool(self) -> bool:
        return self.kind == FieldKind.FLAG

    def spellings(self) -> list[str]:
        """Every token spelling that selects this field, short first."""
        res = []
        if self.shortName:
            res.append(f"-{self.shortName}")
        res.append(f"--{self.longName}")
        return res

    def synopsis(self) -> str:
        flag = ", ".join(self.spellings())
        if not self.isBool():
            flag += " <value>"
        return flag

    def defaultValue(self) -> Any:
        if self.isBool():
            return False
        return self.default


def flag(shortName: str | None = None, longName: str = "", description: str = "") -> Any:
    """
    Declares a boolean flag.

    Args:
        shortName: The short name of the flag (e.g., "a" for "-a").
        longName: The long name of the flag (e.g., "a-opt" for "--a-opt").
        description: A description of the flag.
    """
    return Field(FieldKind.FLAG, shortName, longName, description)


def param(
    shortName: str | None = None,
    longName: str = "",
    description: str = "",
    default: Optional[str] = None,
) -> Any:
    """
    Declares a value-bearing flag.

    Args:
        shortName: The short name of the flag (e.g., "b" for "-b VALUE").
        longName: The long name of the flag (e.g., "b-param" for "--b-param=VALUE").
        description: A description of the flag.
        default: The value used when the flag is absent.
    """
    return Field(FieldKind.PARAM, shortName, longName, description, default)


# --- Errors ----------------------------------------------------------------- #


class HelpRequested(Exception):
    pass


class ParseError(Exception):
    kind: _args.FailureKind

    def __init__(self, token: str, message: str):
        super().__init__(message)
        self.token = token
        self.message = message


class MissingValue(ParseError):
    kind = _args.FailureKind.MISSING_VALUE

    def __init__(self, token: str):
        super().__init__(token, f"Expected value for argument '{token}'")


class UnknownFlag(ParseError):
    kind = _args.FailureKind.UNKNOWN_FLAG

    def __init__(self, token: str):
        super().__init__(token, f"Unknown argument '{token}'")


# --- Parser ----------------------------------------------------------------- #


class State(Enum):
    SCANNING = 0
    POSITIONAL_ONLY = 1


def _isFlagLike(tok: str) -> bool:
    return tok.startswith("-")


@dt.dataclass
class Schema:
    """
    The set of flags a program recognizes.
    """

    fields: list[Field] = dt.field(default_factory=list)
    typ: Optional[type] = None
    helpShort: tuple[str, ...] = const.HELP_SHORT
    helpLong: tuple[str, ...] = const.HELP_LONG

    _lookup: dict[str, Field] = dt.field(init=False, default_factory=dict)

    def __post_init__(self):
        reserved = {f"-{s}" for s in self.helpShort} | {
            f"--{s}" for s in self.helpLong
        }
        reserved.add(const.SEPARATOR)

        for field in self.fields:
            if not field.longName:
                raise ValueError("Field has no long name")

            for name in (field.shortName, field.longName):
                if name is not None and (
                    not name or name.startswith("-") or "=" in name
                ):
                    raise ValueError(f"Invalid flag name '{name}'")

            if field.shortName is not None and len(field.shortName) != 1:
                raise ValueError(
                    f"Short name '{field.shortName}' must be a single character"
                )

            for spelling in field.spellings():
                if spelling in reserved:
                    raise ValueError(f"Flag '{spelling}' is reserved")
                if spelling in self._lookup:
                    raise ValueError(f"Flag '{spelling}' is already defined")
                self._lookup[spelling] = field

    @staticmethod
    def _collect(typ: type) -> list[Field]:
        res: list[Field] = []
        seen: set[str] = set()

        # most derived class first, so overrides shadow their bases
        for cls in typ.__mro__:
            if cls is object:
                continue

            for f in inspect.get_annotations(cls).keys():
                if f in seen:
                    continue
                seen.add(f)

                field = getattr(typ, f, None)

                if field is None:
                    raise ValueError(f"Field '{f}' is not defined")

                if not isinstance(field, Field):
                    raise ValueError(f"Field '{f}' is not a Field")

                field.bind(f)
                res.append(field)

        return res

    @staticmethod
    def extract(typ: type) -> "Schema":
        """Extracts a schema from a class whose attributes are `flag()`s and `param()`s."""
        fields = sorted(Schema._collect(typ), key=lambda f: f.longName)
        return Schema(fields, typ)

    def helpSynopsis(self) -> str:
        helpFlags = [f"-{s}" for s in self.helpShort] + [
            f"--{s}" for s in self.helpLong
        ]
        return ", ".join(helpFlags)

    def usage(self) -> str:
        """Returns a one-line synopsis of the schema."""
        res = f"[{self.helpSynopsis()}] "
        for field in self.fields:
            res += f"[{field.synopsis()}] "
        res += f"[{const.SEPARATOR}] <args...>"
        return res

    def _isHelp(self, tok: str) -> bool:
        if tok.startswith("--"):
            return tok[2:] in self.helpLong
        return tok.startswith("-") and tok[1:] in self.helpShort

    def _scan(
        self, s: Scan, flags: set[str], values: dict[str, str], operands: list[str]
    ):
        state = State.SCANNING

        while not s.eof():
            tok = s.curr()
            assert tok is not None

            if state == State.POSITIONAL_ONLY:
                operands.append(tok)
                s.next()
                continue

            if self._isHelp(tok):
                raise HelpRequested()

            field = self._lookup.get(tok)
            if field and field.isBool():
                _logger.debug(f"Flag '{field.longName}' set by '{tok}'")
                flags.add(field.longName)
                s.next()
            elif field:
                value = s.peek()
                if value is None or _isFlagLike(value):
                    raise MissingValue(tok)
                _logger.debug(f"Param '{field.longName}' = '{value}'")
                values[field.longName] = value
                s.next(2)
            elif tok.startswith("--") and "=" in tok:
                key, value = tok.split("=", 1)
                field = self._lookup.get(key)
                if field is None or field.isBool():
                    raise UnknownFlag(tok)
                _logger.debug(f"Param '{field.longName}' = '{value}'")
                values[field.longName] = value
                s.next()
            elif tok == const.SEPARATOR:
                _logger.debug("Separator reached, remaining tokens are positional")
                state = State.POSITIONAL_ONLY
                s.next()
            elif _isFlagLike(tok):
                raise UnknownFlag(tok)
            else:
                operands.append(tok)
                s.next()

    def parseOrRaise(self, args: list[str]) -> _args.Parsed:
        """
        Parses the arguments, raising on help or malformed input.

        Raises:
            HelpRequested: A help spelling was encountered.
            MissingValue: A value-bearing flag had no usable value.
            UnknownFlag: A flag-like token matched no known spelling.
        """
        flags: set[str] = set()
        values: dict[str, str] = {}
        operands: list[str] = []

        self._scan(Scan(list(args)), flags, values, operands)
        return _args.freeze(flags, values, operands)

    def parse(self, args: list[str]) -> _args.Result:
        """Parses a list of arguments according to the schema."""
        try:
            return self.parseOrRaise(args)
        except HelpRequested:
            return _args.Help(self.usage())
        except ParseError as e:
            _logger.debug(f"Parse failed: {e.message}")
            return _args.Failure(e.kind, e.token, e.message)

    def instantiate(self, parsed: _args.Parsed) -> Any:
        """Builds an object of the schema's class from a parse result."""
        if self.typ is None:
            raise ValueError("Schema was not extracted from a class")

        res = self.typ()
        for field in self.fields:
            assert field._fieldName
            if field.isBool():
                value = parsed.isSet(field.longName)
            else:
                value = parsed.value(field.longName, field.defaultValue())
            setattr(res, field._fieldName, value)
        return res


def defaults(typ: type[T]) -> T:
    """Returns an object of the given type with every flag at its default."""
    schema = Schema.extract(typ)
    return tp.cast(T, schema.instantiate(_args.Parsed()))


# --- Help ------------------------------------------------------------------- #


def printHelp(schema: Schema, prog: str = const.ARGV0, description: str = ""):
    """Prints the help message for a schema."""
    vt100.title(prog)
    print()

    vt100.subtitle("Usage")
    print(vt100.indent(f"{prog} {schema.usage()}"))
    print()

    if description:
        vt100.subtitle("Description")
        print(vt100.p(description))
        print()

    vt100.subtitle("Options")
    print(vt100.indent(f"{schema.helpSynopsis()} Show this help"))
    for field in schema.fields:
        line = field.synopsis()
        if field.description:
            line += f" {field.description}"
        print(vt100.indent(line))
    print()


def printUsage(schema: Schema, prog: str = const.ARGV0, file: Any = None):
    print(f"Usage: {prog} {schema.usage()}", file=file)
