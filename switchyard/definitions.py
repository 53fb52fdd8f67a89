"""
Switchyard input definitions.

An InputDefinition is the schema a raw input is bound against: an ordered set
of positional arguments and an ordered set of named options (with a shortcut
index).

Invariants (checked on every insertion)
- argument names are unique.
- no argument can follow an array argument.
- no required argument can follow an optional one.
- no two different options share a name or a shortcut; re-adding an equal
  option is a no-op.

Derived data
- argument_count: number of positional slots, sys.maxsize once an array
  argument exists.
- argument_required_count: number of required arguments.
- argument_defaults / option_defaults: name -> default maps.
- synopsis(): one-line usage string (options first, then arguments).
"""
import sys
from types import MappingProxyType

from .arguments import InputArgument, InputOption
from .faults import FaultCode, NotFoundError, SchemaError

__all__ = (
    "InputDefinition",
)


class InputDefinition:
    """
    Ordered schema of arguments and options.

    Parameters
    - items: iterable mixing InputArgument and InputOption instances, added in
      order (see set_definition).
    """

    def __init__(self, items=()):
        self.set_definition(items)

    def set_definition(self, items):
        """
        Replace the whole schema with the given descriptors.

        Raises
        - TypeError: when an item is neither an InputArgument nor an InputOption.
        """
        arguments = []
        options = []
        for item in items:
            if isinstance(item, InputArgument):
                arguments.append(item)
            elif isinstance(item, InputOption):
                options.append(item)
            else:
                raise TypeError("The definition list must contain only InputArgument or InputOption instances.")
        self.set_arguments(arguments)
        self.set_options(options)

    # --- arguments ---

    @property
    def arguments(self):
        return MappingProxyType(self._arguments)

    def set_arguments(self, arguments=()):
        self._arguments = {}
        self._required_count = 0
        self._has_optional = False
        self._has_array = False
        self.add_arguments(arguments)

    def add_arguments(self, arguments=()):
        for argument in arguments:
            self.add_argument(argument)

    def add_argument(self, argument):
        """
        Append a positional argument.

        Raises
        - SchemaError: duplicate name, argument after an array argument, or
          required argument after an optional one.
        """
        if not isinstance(argument, InputArgument):
            raise TypeError("add_argument() argument must be an InputArgument")
        if argument.name in self._arguments:
            raise SchemaError(
                f'An argument with name "{argument.name}" already exists.',
                code=FaultCode.DUPLICATE_ARGUMENT
            )
        if self._has_array:
            raise SchemaError(
                "Cannot add an argument after an array argument.",
                code=FaultCode.ARGUMENT_AFTER_ARRAY
            )
        if argument.required and self._has_optional:
            raise SchemaError(
                "Cannot add a required argument after an optional one.",
                code=FaultCode.REQUIRED_AFTER_OPTIONAL
            )

        if argument.array:
            self._has_array = True
        if argument.required:
            self._required_count += 1
        else:
            self._has_optional = True

        self._arguments[argument.name] = argument

    def argument_by_position(self, position):
        if isinstance(position, bool) or not isinstance(position, int):
            raise TypeError("argument_by_position() argument must be an integer")
        if not 0 <= position < len(self._arguments):
            raise NotFoundError(
                f'The "{position}" argument does not exist.',
                code=FaultCode.UNDEFINED_ARGUMENT
            )
        return list(self._arguments.values())[position]

    def argument_by_name(self, name):
        if name not in self._arguments:
            raise NotFoundError(
                f'The "{name}" argument does not exist.',
                code=FaultCode.UNDEFINED_ARGUMENT
            )
        return self._arguments[name]

    def has_argument(self, name):
        """
        Whether an argument exists, by name (str) or by position (int).
        """
        if isinstance(name, int) and not isinstance(name, bool):
            return 0 <= name < len(self._arguments)
        return name in self._arguments

    @property
    def argument_count(self):
        return sys.maxsize if self._has_array else len(self._arguments)

    @property
    def argument_required_count(self):
        return self._required_count

    @property
    def argument_defaults(self):
        return {name: argument.default for name, argument in self._arguments.items()}

    # --- options ---

    @property
    def options(self):
        return MappingProxyType(self._options)

    def set_options(self, options=()):
        self._options = {}
        self._shortcuts = {}
        self.add_options(options)

    def add_options(self, options=()):
        for option in options:
            self.add_option(option)

    def add_option(self, option):
        """
        Append a named option.

        Raises
        - SchemaError: a different option already uses the same name or shortcut.
        """
        if not isinstance(option, InputOption):
            raise TypeError("add_option() argument must be an InputOption")
        if option.name in self._options:
            if option != self._options[option.name]:
                raise SchemaError(
                    f'An option named "{option.name}" already exists.',
                    code=FaultCode.DUPLICATE_OPTION
                )
            return
        if option.shortcut is not None and option.shortcut in self._shortcuts:
            raise SchemaError(
                f'An option with shortcut "{option.shortcut}" already exists.',
                code=FaultCode.DUPLICATE_SHORTCUT
            )

        self._options[option.name] = option
        if option.shortcut is not None:
            self._shortcuts[option.shortcut] = option.name

    def option_by_name(self, name):
        if name not in self._options:
            raise NotFoundError(
                f'The "--{name}" option does not exist.',
                code=FaultCode.UNDEFINED_OPTION
            )
        return self._options[name]

    def has_option(self, name):
        return name in self._options

    def has_shortcut(self, shortcut):
        return shortcut in self._shortcuts

    def option_for_shortcut(self, shortcut):
        if shortcut not in self._shortcuts:
            raise NotFoundError(
                f'The "-{shortcut}" option does not exist.',
                code=FaultCode.UNDEFINED_SHORTCUT
            )
        return self._options[self._shortcuts[shortcut]]

    @property
    def option_defaults(self):
        return {name: option.default for name, option in self._options.items()}

    # --- rendering ---

    def synopsis(self):
        """
        Build the one-line usage string.

        Example
        - [-f|--foo] [--bar="..."] [-b|--baz[="..."]] name [files1] ... [filesN]
        """
        items = []
        for option in self._options.values():
            shortcut = f"-{option.shortcut}|" if option.shortcut is not None else ""
            if option.value_required:
                items.append(f'[{shortcut}--{option.name}="..."]')
            elif option.value_optional:
                items.append(f'[{shortcut}--{option.name}[="..."]]')
            else:
                items.append(f"[{shortcut}--{option.name}]")

        for argument in self._arguments.values():
            label = argument.name + ("1" if argument.array else "")
            items.append(label if argument.required else f"[{label}]")
            if argument.array:
                items.append(f"... [{argument.name}N]")

        return " ".join(items).strip()

    def __eq__(self, other):
        if not isinstance(other, InputDefinition):
            return NotImplemented
        return (
            list(self._arguments.values()) == list(other._arguments.values()) and
            self._options == other._options
        )

    __hash__ = None

    def __repr__(self):
        return f"input-definition({self.synopsis()!r})"
