r"""
Switchyard argument and option descriptors.

Overview
- Descriptors
  • InputArgument: positional parameter (required, optional, or array-valued).
  • InputOption: named parameter with an optional single-letter shortcut
    (--name / -x), taking no value, a required value, or an optional value,
    possibly accumulated into a list.

- Modes
  • ArgumentMode: REQUIRED, OPTIONAL, IS_ARRAY.
  • OptionMode: VALUE_NONE, VALUE_REQUIRED, VALUE_OPTIONAL, VALUE_IS_ARRAY.
  Both are IntFlag so callers can combine them with "|", plain integers are
  accepted as well and validated on construction.

- Introspection & representation
  • DescriptorType metaclass provides stable __repr__/__rich_repr__ and exposes
    selected fields via read-only properties declared in __introspectable__.

Defaults (sanitized on construction and in set_default)
- InputArgument
  • REQUIRED arguments cannot have a default.
  • array arguments default to [] and only accept sequences (not strings).
  • other arguments default to None.
- InputOption
  • VALUE_NONE options cannot have a default; their default is False.
  • array options default to [] and only accept sequences (not strings).
  • other options default to None.

Quick example:
    >>> from switchyard.arguments import InputArgument, InputOption, ArgumentMode, OptionMode
    >>> InputArgument("files", ArgumentMode.OPTIONAL | ArgumentMode.IS_ARRAY).default
    []
    >>> InputOption("--output", "-o", OptionMode.VALUE_REQUIRED).shortcut
    'o'

Public API
- Classes: InputArgument, InputOption
- Modes: ArgumentMode, OptionMode
"""
import functools
import operator
import re
from collections.abc import Sequence
from enum import IntFlag

from .faults import FaultCode, SchemaError
from .utils import *


class ArgumentMode(IntFlag):
    """
    positional argument modes.

    REQUIRED and OPTIONAL are mutually exclusive; IS_ARRAY may be added to
    either. IS_ARRAY on its own describes an optional array.
    """
    REQUIRED = 1
    OPTIONAL = 2
    IS_ARRAY = 4


class OptionMode(IntFlag):
    """
    named option modes.

    exactly one of VALUE_NONE, VALUE_REQUIRED, VALUE_OPTIONAL; VALUE_IS_ARRAY
    may be added to the two value-accepting modes.
    """
    VALUE_NONE = 1
    VALUE_REQUIRED = 2
    VALUE_OPTIONAL = 4
    VALUE_IS_ARRAY = 8


class DescriptorType(type):
    """
    Metaclass that turns descriptors into introspectable, read-only records.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and help output.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - input-option(name='verbose', shortcut='v', mode=<OptionMode.VALUE_NONE: 1>, ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} name must be a string")
    if not name:
        raise SchemaError(
            f"An {cls.__typename__.replace('-', ' ')} name cannot be empty.",
            code=FaultCode.INVALID_NAME
        )
    return name


def _sanitize_descr(cls, descr, /):
    if not isinstance(descr, str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    return descr


def _sanitize_array_default(default, message, /):
    if default is Unset:
        return []
    if not isinstance(default, Sequence) or isinstance(default, str):
        raise SchemaError(message, code=FaultCode.INVALID_DEFAULT)
    return list(default)


class InputArgument(metaclass=DescriptorType):
    """
    Positional argument descriptor.

    Properties
    - name, mode, descr, default: read-only mirrors of the sanitized values.
    - required, array: mode tests.
    """

    __introspectable__ = (
        "name",
        "mode",
        "descr",
        "default",
    )

    def __init__(self, name, mode=ArgumentMode.OPTIONAL, descr="", default=Unset):
        """
        Construct an argument descriptor.

        Parameters
        - name: str
          Non-empty argument name, used as the key of the bound value.
        - mode: ArgumentMode | int
          REQUIRED or OPTIONAL, optionally combined with IS_ARRAY.
        - descr: str
          Free text shown by the help command.
        - default: Any
          Value used when the argument is not given (OPTIONAL only).

        Raises
        - TypeError: non-string name/descr or non-integer mode.
        - ValueError: invalid mode combination.
        - SchemaError: empty name or invalid default.
        """
        if isinstance(mode, bool) or not isinstance(mode, int):
            raise TypeError(f"{type(self).__typename__} 'mode' must be an integer")
        if not 1 <= mode <= 7 or mode & 3 == 3:
            raise ValueError(f'Argument mode "{int(mode)}" is not valid.')

        self._name = _sanitize_name(type(self), name)
        self._mode = ArgumentMode(mode)
        self._descr = _sanitize_descr(type(self), descr)
        self.set_default(default)

    @property
    def required(self):
        return ArgumentMode.REQUIRED in self._mode

    @property
    def array(self):
        return ArgumentMode.IS_ARRAY in self._mode

    def set_default(self, default=Unset):
        """
        Replace the default value, applying the same rules as the constructor.
        """
        if self.required and default is not Unset:
            raise SchemaError(
                "Cannot set a default value except for InputArgument.OPTIONAL mode.",
                code=FaultCode.INVALID_DEFAULT
            )
        if self.array:
            default = _sanitize_array_default(default, "A default value for an array argument must be an array.")
        self._default = coalesce(default)

    def __eq__(self, other):
        if not isinstance(other, InputArgument):
            return NotImplemented
        return (
            self._name == other._name and
            self._mode == other._mode and
            self._default == other._default
        )

    def __hash__(self):
        return hash((self._name, self._mode))


class InputOption(metaclass=DescriptorType):
    """
    Named option descriptor.

    Properties
    - name, shortcut, mode, descr, default: read-only mirrors of the sanitized values.
      shortcut is None when the option has none.
    - accepts_value, value_required, value_optional, array: mode tests.

    Equality
    - two options are equal when name, shortcut, default, array-ness and value
      mode all match; the description is ignored.
    """

    __introspectable__ = (
        "name",
        "shortcut",
        "mode",
        "descr",
        "default",
    )

    def __init__(self, name, shortcut=Unset, mode=OptionMode.VALUE_NONE, descr="", default=Unset):
        """
        Construct an option descriptor.

        Parameters
        - name: str
          Option name; a leading "--" is stripped.
        - shortcut: Unset | None | str
          Single-letter alias; a leading "-" is stripped, empty means none.
        - mode: OptionMode | int
          One of VALUE_NONE, VALUE_REQUIRED, VALUE_OPTIONAL, optionally
          combined with VALUE_IS_ARRAY (value-accepting modes only).
        - descr: str
          Free text shown by the help command.
        - default: Any
          Value used when the option is absent (value-accepting modes only).

        Raises
        - TypeError: non-string name/shortcut/descr or non-integer mode.
        - ValueError: invalid mode combination.
        - SchemaError: empty name, array without value, or invalid default.
        """
        if isinstance(name, str) and name.startswith("--"):
            name = name[2:]
        self._name = _sanitize_name(type(self), name)

        if not isinstance(shortcut, str | None | UnsetType):
            raise TypeError(f"{type(self).__typename__} 'shortcut' must be a string")
        if isinstance(shortcut, str) and shortcut.startswith("-"):
            shortcut = shortcut[1:]
        self._shortcut = coalesce(shortcut) or None

        if isinstance(mode, bool) or not isinstance(mode, int):
            raise TypeError(f"{type(self).__typename__} 'mode' must be an integer")
        if not 1 <= mode <= 15 or (mode & 7).bit_count() > 1:
            raise ValueError(f'Option mode "{int(mode)}" is not valid.')
        self._mode = OptionMode(mode)
        if self.array and not self.accepts_value:
            raise SchemaError(
                "Impossible to have an option mode VALUE_IS_ARRAY if the option does not accept a value.",
                code=FaultCode.INVALID_MODE
            )

        self._descr = _sanitize_descr(type(self), descr)
        self.set_default(default)

    @property
    def value_required(self):
        return OptionMode.VALUE_REQUIRED in self._mode

    @property
    def value_optional(self):
        return OptionMode.VALUE_OPTIONAL in self._mode

    @property
    def accepts_value(self):
        return self.value_required or self.value_optional

    @property
    def array(self):
        return OptionMode.VALUE_IS_ARRAY in self._mode

    def set_default(self, default=Unset):
        """
        Replace the default value, applying the same rules as the constructor.
        """
        if not self.accepts_value:
            if default is not Unset:
                raise SchemaError(
                    "Cannot set a default value when using InputOption.VALUE_NONE mode.",
                    code=FaultCode.INVALID_DEFAULT
                )
            self._default = False
            return
        if self.array:
            default = _sanitize_array_default(default, "A default value for an array option must be an array.")
        self._default = coalesce(default)

    def __eq__(self, other):
        if not isinstance(other, InputOption):
            return NotImplemented
        return (
            self._name == other._name and
            self._shortcut == other._shortcut and
            self._default == other._default and
            self.array == other.array and
            self.value_required == other.value_required and
            self.value_optional == other.value_optional
        )

    def __hash__(self):
        return hash((self._name, self._shortcut))


__all__ = (
    "ArgumentMode",
    "OptionMode",
    "InputArgument",
    "InputOption",
)
