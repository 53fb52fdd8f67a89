"""
Switchyard faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  (errors and warnings), one numeric block per domain.
- CommandException / CommandWarning: base types that carry a plain message +
  options and know how to render themselves with rich when an application
  decides to show them.
- trigger(): central entry point to surface any fault (raise, warn or print).

Taxonomy
- SchemaError: an InputDefinition or a descriptor was built wrongly.
- NotFoundError: a definition lookup (argument, option, shortcut) failed.
- ParseError and its kinds: binding raw input against a definition failed.
- ResolutionError and its kinds: a command name could not be resolved.

Plain text first
- messages never contain markup; styling only happens in __rich__, and only
  when the "colorful" option is set by the caller.
- resolution errors carry their ranked "did you mean" list both in the message
  and in options["suggestions"].

Integration
- the core raises faults directly; Application.run() catches CommandException
  and calls trigger(fault, shell=True, ...) to render it on the error console.
"""
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the toolkit (stable identifiers).

    blocks
    - schema (100xx)
      • DUPLICATE_ARGUMENT, ARGUMENT_AFTER_ARRAY, REQUIRED_AFTER_OPTIONAL,
        DUPLICATE_OPTION, DUPLICATE_SHORTCUT, INVALID_DEFAULT, INVALID_NAME,
        INVALID_MODE
    - lookups (101xx)
      • UNDEFINED_ARGUMENT, UNDEFINED_OPTION, UNDEFINED_SHORTCUT
    - parsing (111xx)
      • MALFORMED_INPUT, UNKNOWN_OPTION, UNKNOWN_ARGUMENT, OPTION_VALUE_REQUIRED,
        FLAG_ASSIGNMENT, TOO_MANY_ARGUMENTS, MISSING_ARGUMENTS
    - routing (121xx)
      • UNKNOWN_NAMESPACE, AMBIGUOUS_NAMESPACE, UNKNOWN_COMMAND, AMBIGUOUS_COMMAND
    - warnings (131xx)
      • COMMAND_OVERRIDE

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- schema errors (100xx) ---
    DUPLICATE_ARGUMENT      = 10001
    ARGUMENT_AFTER_ARRAY    = 10002
    REQUIRED_AFTER_OPTIONAL = 10003
    DUPLICATE_OPTION        = 10004
    DUPLICATE_SHORTCUT      = 10005
    INVALID_DEFAULT         = 10006
    INVALID_NAME            = 10007
    INVALID_MODE            = 10008

    # --- lookup errors (101xx) ---
    UNDEFINED_ARGUMENT      = 10101
    UNDEFINED_OPTION        = 10102
    UNDEFINED_SHORTCUT      = 10103

    # --- parsing errors (111xx) ---
    MALFORMED_INPUT         = 11101
    UNKNOWN_OPTION          = 11102
    UNKNOWN_ARGUMENT        = 11103
    OPTION_VALUE_REQUIRED   = 11104
    FLAG_ASSIGNMENT         = 11105
    TOO_MANY_ARGUMENTS      = 11106
    MISSING_ARGUMENTS       = 11107

    # --- routing errors (121xx) ---
    UNKNOWN_NAMESPACE       = 12101
    AMBIGUOUS_NAMESPACE     = 12102
    UNKNOWN_COMMAND         = 12103
    AMBIGUOUS_COMMAND       = 12104

    # --- warnings (131xx) ---
    COMMAND_OVERRIDE        = 13101

    def normalize(self):
        """
        label of this code as shown in fault headers.

        a __codes__ mapping defined in __main__ relabels codes; otherwise
        the numeric value is used.
        """
        return str(getattr(sys.modules["__main__"], "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    shared rich renderer for exceptions and warnings.

    layout
    - header: "[ prog — code | title ]"
    - body: the plain message, then " → hint" when a hint is present.
    - fancy: the body is wrapped in a Panel titled with the header.
    """
    main = sys.modules["__main__"]
    options = fault.options
    colorful = options.get("colorful", False)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style] if colorful else "")

    prog = getattr(main, "__prog__", options.get("prog", "switchyard"))

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " — ",
        text(fault.code.normalize() if isinstance(fault.code, FaultCode) else "-", "code"),
        " | ",
        text(fault.title.title(), "title"),
        " ]"
    )
    message = text(fault.message, "message")
    parts = [message]
    if hint := options.get("hint"):
        parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if fancy:
        return Panel(Group(*parts), title=header, title_align="left")
    return Group(header, *parts)


class CommandException(Exception):
    """
    base type of every error raised by the toolkit.

    contract
    - message: plain text, also returned by str(exception).
    - options: read-only mapping with rendering and context entries
      (title, code, hint, suggestions, input, name, ...).
    - subclasses set __code__ and __title__ defaults; options may override them.
    """
    __code__ = Unset
    __title__ = "command error"

    def __init__(self, message="", /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def suggestions(self):
        return tuple(self.options.get("suggestions", ()))

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title

            # body
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        coalesce(self.options.get("console", Unset), console).print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        replica = type(self)(self.message, **{**self.options, **overrides})
        replica.__cause__ = self.__cause__
        replica.__traceback__ = self.__traceback__
        return replica


class SchemaError(CommandException):
    __title__ = "invalid definition"


class NotFoundError(CommandException, LookupError):
    __title__ = "not found"


class ParseError(CommandException):
    __title__ = "invalid input"


class MalformedInputError(ParseError):
    __code__ = FaultCode.MALFORMED_INPUT
    __title__ = "malformed input"


class UnknownOptionError(ParseError):
    __code__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"


class UnknownArgumentError(ParseError):
    __code__ = FaultCode.UNKNOWN_ARGUMENT
    __title__ = "unknown argument"


class RequiredValueError(ParseError):
    __code__ = FaultCode.OPTION_VALUE_REQUIRED
    __title__ = "option value required"


class FlagValueError(ParseError):
    __code__ = FaultCode.FLAG_ASSIGNMENT
    __title__ = "option cannot take a value"


class TooManyArgumentsError(ParseError):
    __code__ = FaultCode.TOO_MANY_ARGUMENTS
    __title__ = "too many arguments"


class MissingArgumentsError(ParseError):
    __code__ = FaultCode.MISSING_ARGUMENTS
    __title__ = "missing arguments"


class ResolutionError(CommandException):
    __title__ = "unresolved command"


class UnknownNamespaceError(ResolutionError):
    __code__ = FaultCode.UNKNOWN_NAMESPACE
    __title__ = "unknown namespace"


class AmbiguousNamespaceError(ResolutionError):
    __code__ = FaultCode.AMBIGUOUS_NAMESPACE
    __title__ = "ambiguous namespace"


class UnknownCommandError(ResolutionError):
    __code__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


class AmbiguousCommandError(ResolutionError):
    __code__ = FaultCode.AMBIGUOUS_COMMAND
    __title__ = "ambiguous command"


class CommandWarning(Warning):
    """
    base type of non-fatal conditions.

    outside shell mode the warning goes through warnings.warn so hosts keep
    full control (filters, -W flags); in shell mode it is printed.
    """
    __code__ = Unset
    __title__ = "command warning"

    def __init__(self, message="", /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    code = CommandException.code
    title = CommandException.title
    hint = CommandException.hint

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", 3))
        coalesce(self.options.get("console", Unset), console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class CommandOverrideWarning(CommandWarning):
    __code__ = FaultCode.COMMAND_OVERRIDE
    __title__ = "command overridden"


def trigger(fault, /, **options):
    """
    raise, warn or print a fault.

    contract
    - fault implements __trigger__ and __replace__ (CommandException, CommandWarning).
    - options are merged into a copy of the fault via __replace__(**options)
      before triggering; the original fault is left untouched.

    typical options
    - shell: print instead of raising/warning.
    - console: the rich console to print on (defaults to stderr).
    - deferred: in shell mode, return instead of exiting the process.
    - fancy, colorful, prog: rendering knobs used by __rich__.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "SchemaError",
    "NotFoundError",
    "ParseError",
    "MalformedInputError",
    "UnknownOptionError",
    "UnknownArgumentError",
    "RequiredValueError",
    "FlagValueError",
    "TooManyArgumentsError",
    "MissingArgumentsError",
    "ResolutionError",
    "UnknownNamespaceError",
    "AmbiguousNamespaceError",
    "UnknownCommandError",
    "AmbiguousCommandError",
    "CommandWarning",
    "CommandOverrideWarning",
    "trigger",
)
