"""
Switchyard inputs: raw invocations and their binding against a definition.

Raw inputs
- ArgvInput: a list of process-style tokens (sys.argv[1:] by default).
- StringInput: a shell-like string, split with shlex then handled as argv.
- ArrayInput: an ordered mapping; "--name" keys are long options, "-x" keys
  are shortcuts, anything else is an argument name.

Binding
- raw.bind(definition) -> BoundInput, or a ParseError subclass.
- raw inputs are never mutated by binding: every call creates a fresh binder
  that holds the parse state, so binding twice yields equal results.

Raw introspection (no definition needed, never raises)
- has_parameter_option(values): is any of the given option spellings present?
- get_parameter_option(values, default=False): value following the first
  matching spelling ("--name value", "--name=value", "-x value").
- get_first_argument(): first token that is not an option.
"""
import copy
import shlex
import sys
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterable, Mapping, Sequence

from .faults import *
from .utils import *

__all__ = (
    "Input",
    "ArgvInput",
    "StringInput",
    "ArrayInput",
    "BoundInput",
    "make_input",
)


def _spellings(values, /):
    if isinstance(values, str):
        return (values,)
    if isinstance(values, Iterable):
        return tuple(value for value in values if isinstance(value, str))
    return ()


class BoundInput:
    """
    Result of binding a raw input against an InputDefinition.

    Values fall back to the definition defaults; only names the definition
    knows can be read or written.

    Equality
    - two bound inputs are equal when their definitions, argument values,
      option values and interactive flags are equal.
    """

    def __init__(self, definition, arguments=(), options=(), *, interactive=True):
        self._definition = definition
        self._arguments = dict(arguments)
        self._options = dict(options)
        self.interactive = bool(interactive)

    @property
    def definition(self):
        return self._definition

    @property
    def arguments(self):
        return self._definition.argument_defaults | copy.deepcopy(self._arguments)

    @property
    def options(self):
        return self._definition.option_defaults | copy.deepcopy(self._options)

    def argument(self, name):
        if not self._definition.has_argument(name) or not isinstance(name, str):
            raise NotFoundError(
                f'The "{name}" argument does not exist.',
                code=FaultCode.UNDEFINED_ARGUMENT
            )
        return self.arguments[name]

    def has_argument(self, name):
        return isinstance(name, str) and self._definition.has_argument(name)

    def set_argument(self, name, value):
        self.argument(name)
        self._arguments[name] = value

    def option(self, name):
        if not self._definition.has_option(name):
            raise NotFoundError(
                f'The "{name}" option does not exist.',
                code=FaultCode.UNDEFINED_OPTION
            )
        return self.options[name]

    def has_option(self, name):
        return self._definition.has_option(name)

    def set_option(self, name, value):
        self.option(name)
        self._options[name] = value

    def validate(self):
        """
        Check that every required argument received a value.

        Raises
        - MissingArgumentsError: fewer arguments than required were bound.
        """
        if len(self._arguments) < self._definition.argument_required_count:
            missing = [
                name
                for name, argument in self._definition.arguments.items()
                if argument.required and name not in self._arguments
            ]
            raise MissingArgumentsError(
                "Not enough arguments.",
                hint="missing: %s" % ", ".join(missing),
                missing=tuple(missing),
            )

    def __eq__(self, other):
        if not isinstance(other, BoundInput):
            return NotImplemented
        return (
            self._definition == other._definition and
            self.arguments == other.arguments and
            self.options == other.options and
            self.interactive == other.interactive
        )

    __hash__ = None

    def __repr__(self):
        return f"bound-input(arguments={self.arguments!r}, options={self.options!r}, interactive={self.interactive!r})"

    def __rich_repr__(self):
        yield "arguments", self.arguments
        yield "options", self.options
        yield "interactive", self.interactive


class _Binder:
    """
    Per-call parse state shared by the raw input flavours.
    """

    def __init__(self, definition, /):
        self.definition = definition
        self.arguments = {}
        self.options = {}

    def add_argument(self, token):
        """
        Bind a positional token to the next free slot (or the trailing array).
        """
        definition = self.definition
        position = len(self.arguments)
        if definition.has_argument(position):
            argument = definition.argument_by_position(position)
            self.arguments[argument.name] = [token] if argument.array else token
        elif definition.has_argument(position - 1) and definition.argument_by_position(position - 1).array:
            self.arguments[definition.argument_by_position(position - 1).name].append(token)
        else:
            raise TooManyArgumentsError("Too many arguments.", input=token)

    def add_named_argument(self, name, value):
        if not isinstance(name, str) or not self.definition.has_argument(name):
            raise UnknownArgumentError(f'The "{name}" argument does not exist.', input=name)
        argument = self.definition.argument_by_name(name)
        if argument.array and (isinstance(value, str) or not isinstance(value, Sequence)):
            value = [value]
        elif argument.array:
            value = list(value)
        self.arguments[name] = value

    def resolve_shortcut(self, shortcut):
        if not self.definition.has_shortcut(shortcut):
            raise UnknownOptionError(f'The "-{shortcut}" option does not exist.', input="-" + shortcut)
        return self.definition.option_for_shortcut(shortcut)

    def resolve_option(self, name):
        if not self.definition.has_option(name):
            raise UnknownOptionError(f'The "--{name}" option does not exist.', input="--" + name)
        return self.definition.option_by_name(name)

    def missing_value(self, option):
        """
        Value of an option given without one: its default, or True for flags.
        """
        if option.value_required:
            raise RequiredValueError(
                f'The "--{option.name}" option requires a value.',
                input="--" + option.name
            )
        return option.default if option.value_optional else True

    def store_option(self, option, value):
        """
        Store an option value, None meaning "no value given".
        """
        if value is None:
            parsed = self.missing_value(option)
        elif not option.accepts_value:
            raise FlagValueError(
                f'The "--{option.name}" option does not accept a value.',
                input="--" + option.name
            )
        else:
            parsed = value

        if option.array:
            self.options.setdefault(option.name, []).append(value)
        else:
            self.options[option.name] = parsed

    def result(self, interactive):
        return BoundInput(self.definition, self.arguments, self.options, interactive=interactive)


class Input(ABC):
    """
    Base class of raw inputs.

    Attributes
    - interactive: copied into every BoundInput produced by bind().
    """

    def __init__(self, *, interactive=True):
        self.interactive = bool(interactive)

    @abstractmethod
    def _parse(self, binder, /):
        """
        Feed the raw parameters into the binder.
        """

    def bind(self, definition):
        """
        Bind this raw input against a definition.

        Raises
        - ParseError: unknown option/argument, missing option value, too many
          arguments, or a value given to a flag.
        """
        binder = _Binder(definition)
        self._parse(binder)
        return binder.result(self.interactive)

    @abstractmethod
    def get_first_argument(self):
        """
        Return the first raw argument (usually the command name) or None.
        """

    @abstractmethod
    def has_parameter_option(self, values):
        """
        Whether one of the given raw option spellings ("--name", "-x") is present.
        """

    @abstractmethod
    def get_parameter_option(self, values, default=False):
        """
        Return the raw value of the first matching option spelling, or default.
        """


class ArgvInput(Input):
    """
    Process-style token list.

    Parameters
    - argv: Unset | Iterable[str]; sys.argv[1:] when omitted.
    """

    def __init__(self, argv=Unset, *, interactive=True):
        super().__init__(interactive=interactive)
        if argv is Unset:
            argv = sys.argv[1:]
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError(f"{type(self).__name__}() argument must be an iterable of strings")
        tokens = tuple(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError(f"{type(self).__name__}() argument must be an iterable of strings")
        self._tokens = tokens

    @property
    def tokens(self):
        return self._tokens

    def _parse(self, binder, /):
        pending = deque(self._tokens)
        options = True
        while pending:
            token = pending.popleft()
            if options and token == "":
                binder.add_argument(token)
            elif options and token == "--":
                options = False
            elif options and token.startswith("--"):
                self._parse_long_option(binder, pending, token[2:])
            elif options and token.startswith("-"):
                self._parse_short_option(binder, pending, token[1:])
            else:
                binder.add_argument(token)

    def _parse_short_option(self, binder, pending, name):
        if len(name) > 1:
            if binder.definition.has_shortcut(name[0]) and binder.definition.option_for_shortcut(name[0]).accepts_value:
                # value glued to the shortcut ("-ofile")
                self._add_option(binder, pending, binder.resolve_shortcut(name[0]), name[1:])
            else:
                self._parse_short_option_set(binder, pending, name)
        else:
            self._add_option(binder, pending, binder.resolve_shortcut(name), None)

    def _parse_short_option_set(self, binder, pending, name):
        for index, shortcut in enumerate(name):
            option = binder.resolve_shortcut(shortcut)
            if option.accepts_value:
                self._add_option(binder, pending, option, None if index == len(name) - 1 else name[index + 1:])
                break
            self._add_option(binder, pending, option, None)

    def _parse_long_option(self, binder, pending, name):
        name, separator, value = name.partition("=")
        self._add_option(binder, pending, binder.resolve_option(name), value if separator else None)

    def _add_option(self, binder, pending, option, value):
        if value is None and option.accepts_value and pending and not pending[0].startswith("-"):
            value = pending.popleft()
        binder.store_option(option, value)

    def get_first_argument(self):
        for token in self._tokens:
            if token.startswith("-"):
                continue
            return token
        return None

    def has_parameter_option(self, values):
        values = _spellings(values)
        return any(token in values for token in self._tokens)

    def get_parameter_option(self, values, default=False):
        values = _spellings(values)
        pending = deque(self._tokens)
        while pending:
            token = pending.popleft()
            for value in values:
                if token == value or token.startswith(value + "="):
                    if "=" in token:
                        return token.partition("=")[2]
                    return pending.popleft() if pending else default
        return default

    def __repr__(self):
        return f"{type(self).__name__}({list(self._tokens)!r})"


class StringInput(ArgvInput):
    """
    Shell-like command line, tokenized with shlex (POSIX rules).

    Raises
    - MalformedInputError: unbalanced quotes or a dangling escape.
    """

    def __init__(self, string, *, interactive=True):
        if not isinstance(string, str):
            raise TypeError(f"{type(self).__name__}() argument must be a string")
        try:
            tokens = shlex.split(string)
        except ValueError as error:
            raise MalformedInputError(
                f'Unable to parse input "{string}": {error}.',
                input=string
            ) from error
        super().__init__(tokens, interactive=interactive)
        self._string = string

    def __repr__(self):
        return f"{type(self).__name__}({self._string!r})"


class ArrayInput(Input):
    """
    Ordered mapping of parameters.

    Keys
    - "--name": long option; "-x": shortcut; anything else: argument name.

    Values
    - None means "no value"; array targets receive lists (scalars are wrapped).
    """

    def __init__(self, parameters=(), *, interactive=True):
        super().__init__(interactive=interactive)
        parameters = dict(parameters)
        if not all(isinstance(key, str) for key in parameters):
            raise TypeError(f"{type(self).__name__}() keys must be strings")
        self._parameters = parameters

    @property
    def parameters(self):
        return dict(self._parameters)

    def _parse(self, binder, /):
        for key, value in self._parameters.items():
            if key.startswith("--"):
                self._add_option(binder, binder.resolve_option(key[2:]), value)
            elif key.startswith("-"):
                self._add_option(binder, binder.resolve_shortcut(key[1:]), value)
            else:
                binder.add_named_argument(key, value)

    @staticmethod
    def _add_option(binder, option, value):
        if option.array and value is None:
            binder.options[option.name] = binder.missing_value(option)
        elif option.array:
            if isinstance(value, str) or not isinstance(value, Sequence):
                value = [value]
            binder.options[option.name] = list(value)
        elif not option.accepts_value and isinstance(value, bool):
            binder.options[option.name] = value
        else:
            binder.store_option(option, value)

    def get_first_argument(self):
        for key, value in self._parameters.items():
            if key.startswith("-"):
                continue
            return value
        return None

    def has_parameter_option(self, values):
        values = _spellings(values)
        return any(key in values for key in self._parameters)

    def get_parameter_option(self, values, default=False):
        for value in _spellings(values):
            if value in self._parameters:
                return self._parameters[value]
        return default

    def __repr__(self):
        return f"{type(self).__name__}({self._parameters!r})"


def make_input(prompt=Unset, /):
    """
    Normalize a prompt into a raw input.

    Parameters
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • Input: returned as is.
      • str: shell-like string (StringInput).
      • Mapping: parameters map (ArrayInput).
      • Iterable[str]: pre-tokenized sequence (ArgvInput).

    Raises
    - TypeError: when prompt is none of the above.
    """
    if prompt is Unset:
        return ArgvInput()
    if isinstance(prompt, Input):
        return prompt
    if isinstance(prompt, str):
        return StringInput(prompt)
    if isinstance(prompt, Mapping):
        return ArrayInput(prompt)
    if isinstance(prompt, Iterable):
        return ArgvInput(prompt)
    raise TypeError("prompt must be a string, a mapping or an iterable of strings")
