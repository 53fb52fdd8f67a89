r"""
Switchyard commands: executable units resolved and run by an Application.

Overview
- Executable: the abstract capability shared by every command
  (configure -> initialize -> interact -> execute).
- Command: named, aliased, self-describing executable owning an
  InputDefinition. Code can be provided by subclassing (execute) or by
  attaching a callable (set_code / @command).
- HelpCommand: "help [--raw] [command_name]", renders a command's usage,
  aliases, arguments, options and help text with rich.
- ListCommand: "list [--raw] [namespace]", renders the application's
  commands grouped by namespace.

Lifecycle of Command.run(input, console)
1. the synopsis is computed (before the global definition is merged).
2. the application definition is merged: global arguments first, then the
   command's own; global options appended.
3. the raw input is bound against the merged definition.
4. initialize(), then interact() when the bound input is interactive.
5. the bound input is validated (missing required arguments).
6. the attached code (or execute) runs; its return value is the status.

Names
- "segment(:segment)*": every segment is non-empty and colon-free; the
  namespace of a command is every segment but the last.

Quick example:
    >>> from switchyard import Application, command
    >>> @command("greet", descr="Say hello")
    ... def greet(input, console):
    ...     console.print("hello", input.argument("who"))
    >>> greet.add_argument("who", descr="Who to greet", default="world")
    command(name='greet', aliases=[], descr='Say hello', help='')
"""
import inspect
import json
import os
import re
import sys
import weakref
from abc import ABCMeta, abstractmethod
from collections import defaultdict

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .arguments import ArgumentMode, DescriptorType, InputArgument, InputOption, OptionMode
from .definitions import InputDefinition
from .faults import FaultCode, ParseError, SchemaError
from .inputs import BoundInput, make_input
from .registry import extract_namespace
from .utils import *

__all__ = (
    "Executable",
    "Command",
    "HelpCommand",
    "ListCommand",
    "command",
)


class CommandType(DescriptorType, ABCMeta):
    """
    Metaclass of executables: read-only introspectable fields (see
    DescriptorType) on top of abstract-method enforcement.
    """


class Executable(metaclass=CommandType):
    """
    Abstract executable capability.

    Hooks
    - configure(): called once at construction, before the name is checked.
    - initialize(input, console): called after binding, before interaction.
    - interact(input, console): called only for interactive inputs.
    - execute(input, console): the command body; returns a status or None.
    """

    def configure(self):
        pass

    def initialize(self, input, console):
        pass

    def interact(self, input, console):
        pass

    @abstractmethod
    def execute(self, input, console):
        """
        Run the command body and return an integer status (None means 0).
        """


def _validate_name(name, /):
    if not isinstance(name, str):
        raise TypeError("command names must be strings")
    if not re.fullmatch(r"[^:]+(:[^:]+)*", name):
        raise SchemaError(f'Command name "{name}" is invalid.', code=FaultCode.INVALID_NAME)
    return name


class Command(Executable):
    """
    Named executable owning an InputDefinition.

    Properties
    - name, aliases, descr, help: read-only mirrors (use the set_* methods).
    - definition: the InputDefinition (merged with the application's once run).
    - native_definition: the command's own definition, without global entries.
    - synopsis: "name [options] arguments", computed once and cached.
    - processed_help: help with %command.name% and %command.full_name% replaced.
    - application: the owning Application, or None.
    - enabled: False hides the command from registration.
    """

    __introspectable__ = (
        "name",
        "aliases",
        "descr",
        "help",
    )

    def __init__(self, name=Unset, /, *, aliases=(), descr=Unset, help=Unset):
        """
        Parameters
        - name: Unset | str
          Canonical name; may also be set by configure().
        - aliases: Iterable[str]
          Alternative names, each validated like the canonical name.
        - descr: Unset | str
          One-line description shown by the list command.
        - help: Unset | str
          Long help shown by the help command.

        Raises
        - SchemaError: invalid name/alias, or no name at all after configure().
        """
        self._definition = InputDefinition()
        self._native = Unset
        self._name = ""
        self._aliases = []
        self._descr = ""
        self._help = ""
        self._code = Unset
        self._synopsis = Unset
        self._application = None
        self._ignore_validation_errors = False
        self._merged = False

        if name is not Unset:
            self.set_name(name)
        self.set_aliases(aliases)
        if descr is not Unset:
            self.set_descr(descr)
        if help is not Unset:
            self.set_help(help)

        self.configure()

        if not self._name:
            raise SchemaError("The command name cannot be empty.", code=FaultCode.INVALID_NAME)

    # --- metadata ---

    def set_name(self, name):
        self._name = _validate_name(name)
        self._synopsis = Unset
        return self

    def set_aliases(self, aliases):
        if isinstance(aliases, str):
            raise TypeError("command aliases must be an iterable of strings")
        self._aliases = [_validate_name(alias) for alias in aliases]
        return self

    def set_descr(self, descr):
        if not isinstance(descr, str):
            raise TypeError(f"{type(self).__typename__} 'descr' must be a string")
        self._descr = descr
        return self

    def set_help(self, help):
        if not isinstance(help, str):
            raise TypeError(f"{type(self).__typename__} 'help' must be a string")
        self._help = help
        return self

    @property
    def processed_help(self):
        program = os.path.basename(sys.argv[0]) or "console"
        return (
            self._help
            .replace("%command.name%", self._name)
            .replace("%command.full_name%", f"{program} {self._name}")
        )

    @property
    def enabled(self):
        return True

    # --- application ---

    @property
    def application(self):
        return self._application() if self._application is not None else None

    def set_application(self, application):
        self._application = weakref.ref(application) if application is not None else None
        if self._merged:
            self._definition = self._native
            self._native = Unset
            self._merged = False

    # --- definition ---

    @property
    def definition(self):
        return self._definition

    @property
    def native_definition(self):
        return coalesce(self._native, self._definition)

    def set_definition(self, definition):
        """
        Replace the definition with an InputDefinition or an iterable of descriptors.
        """
        if not isinstance(definition, InputDefinition):
            definition = InputDefinition(definition)
        self._definition = definition
        self._native = Unset
        self._synopsis = Unset
        self._merged = False
        return self

    def add_argument(self, name, mode=ArgumentMode.OPTIONAL, descr="", default=Unset):
        self._definition.add_argument(InputArgument(name, mode, descr, default))
        self._synopsis = Unset
        return self

    def add_option(self, name, shortcut=Unset, mode=OptionMode.VALUE_NONE, descr="", default=Unset):
        self._definition.add_option(InputOption(name, shortcut, mode, descr, default))
        self._synopsis = Unset
        return self

    @property
    def synopsis(self):
        if self._synopsis is Unset:
            self._synopsis = f"{self._name} {self.native_definition.synopsis()}".strip()
        return self._synopsis

    def _merge_application_definition(self):
        if (application := self.application) is None or self._merged:
            return

        self._native = InputDefinition([
            *self._definition.arguments.values(),
            *self._definition.options.values(),
        ])
        arguments = list(self._definition.arguments.values())
        self._definition.set_arguments(application.definition.arguments.values())
        self._definition.add_arguments(arguments)
        self._definition.add_options(application.definition.options.values())
        self._merged = True

    # --- running ---

    def ignore_validation_errors(self):
        """
        Run even when the input does not bind or validate; the command then
        receives a BoundInput carrying only the defaults.
        """
        self._ignore_validation_errors = True
        return self

    def set_code(self, code):
        """
        Attach a callable code(input, console) used instead of execute().
        """
        if not callable(code):
            raise TypeError("set_code() argument must be callable")
        self._code = code
        return self

    def execute(self, input, console):
        raise NotImplementedError("You must override the execute() method in the concrete command class.")

    def run(self, input, console):
        """
        Bind the raw input and run the command.

        Returns
        - the integer status (None from the code becomes 0).

        Raises
        - ParseError: binding or validation failed (unless ignored).
        """
        self.synopsis  # cached before the global definition is merged
        self._merge_application_definition()

        try:
            bound = input.bind(self._definition)
        except ParseError:
            if not self._ignore_validation_errors:
                raise
            bound = BoundInput(self._definition, interactive=input.interactive)

        self.initialize(bound, console)
        if bound.interactive:
            self.interact(bound, console)

        try:
            bound.validate()
        except ParseError:
            if not self._ignore_validation_errors:
                raise

        status = coalesce(self._code, self.execute)(bound, console)
        return 0 if status is None else int(status)

    def __invoke__(self, prompt=Unset):
        """
        Run this command on its own with a prompt (see make_input).
        """
        return self.run(make_input(prompt), Console())


def _styles():
    return defaultdict(str, {
        # === Sections ===
        "section-label": "bold #FFD600",  # AMBER headings (usage, arguments, ...)
        "synopsis": "#E5E7EB",  # light usage line
        "help-body": "#D1D5DB",

        # === Names ===
        "program-name": "bold #FF4D94",  # MAGENTA-PINK brand pop
        "program-version": "bold #00E6FF",  # CYAN version
        "namespace-label": "bold #36C5F0",  # SKY-BLUE namespace groups
        "command-name": "bold #22C55E",  # GREEN commands
        "argument-name": "bold #22C55E",
        "option-name": "bold #00E6FF",  # CYAN options
        "alias": "bold #22C55E",

        # === Descriptions ===
        "description": "#9CA3AF",  # Muted gray
        "default": "italic #FFD600",  # AMBER defaults
    } | getattr(sys.modules["__main__"], "__styles__", {}))


def _format_default(default, /):
    return json.dumps(default, default=str, ensure_ascii=False)


def _has_default(descriptor, /):
    if descriptor.default is None or descriptor.default is False:
        return False
    return not isinstance(descriptor.default, list) or len(descriptor.default) > 0


def _render_definition(definition, styles, *, colorful, globals=()):
    """
    Build the arguments/options sections of a definition.

    Returns a list of renderables (empty sections are skipped).
    """
    def text(fragment, style=""):
        return Text(str(fragment), styles[style] if colorful else "")

    def describe(descriptor):
        descr = text(descriptor.descr, "description")
        if isinstance(descriptor, InputOption) and not descriptor.accepts_value:
            return descr
        if isinstance(descriptor, InputArgument) and descriptor.required:
            return descr
        if _has_default(descriptor):
            descr.append_text(text(f" (default: {_format_default(descriptor.default)})", "default"))
        return descr

    renders = []

    if definition.arguments:
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()
        for name, argument in definition.arguments.items():
            table.add_row(Text.assemble(" ", text(name, "argument-name")), describe(argument))
        renders.extend((text("Arguments:", "section-label"), table, Text()))

    for label, options in (("Options:", definition.options.values()), ("Global options:", globals)):
        options = list(options)
        if not options:
            continue
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()
        for option in options:
            names = Text.assemble(" ", text("--" + option.name, "option-name"))
            if option.shortcut is not None:
                names.append_text(Text.assemble(" (", text("-" + option.shortcut, "option-name"), ")"))
            table.add_row(names, describe(option))
        renders.extend((text(label, "section-label"), table, Text()))

    return renders


class HelpCommand(Command):
    """
    Display the help of a command.

    The command to describe is either pinned with set_command() (the
    application does so when --help follows a command name) or resolved from
    the "command_name" argument.
    """

    def configure(self):
        self.ignore_validation_errors()
        self.set_name("help")
        self.set_definition([
            InputArgument("command_name", ArgumentMode.OPTIONAL, "The command name", "help"),
            InputOption("raw", Unset, OptionMode.VALUE_NONE, "To output raw command help"),
        ])
        self.set_descr("Displays help for a command")
        self.set_help(
            "The %command.name% command displays help for a given command:\n"
            "\n"
            "  %command.full_name% list\n"
            "\n"
            "To display the help without styles, use the --raw option:\n"
            "\n"
            "  %command.full_name% --raw list"
        )
        self._command = Unset

    def set_command(self, command):
        self._command = command
        return self

    def execute(self, input, console):
        command = self._command
        self._command = Unset
        if command is Unset:
            if (application := self.application) is None:
                command = self
            else:
                command = application.find(input.argument("command_name")).command
        console.print(self.describe(command, raw=input.option("raw")))
        return 0

    def describe(self, command, *, raw=False):
        """
        Build the help renderable of a command (plain text when raw is True).
        """
        styles = _styles()
        colorful = not raw

        def text(fragment, style=""):
            return Text(str(fragment), styles[style] if colorful else "")

        renders = [
            text("Usage:", "section-label"),
            Text.assemble(" ", text(command.synopsis, "synopsis")),
            Text(),
        ]

        if command.aliases:
            renders.append(Text.assemble(
                text("Aliases:", "section-label"),
                " ",
                Text(", ").join(text(alias, "alias") for alias in command.aliases),
            ))
            renders.append(Text())

        application = command.application
        renders.extend(_render_definition(
            command.native_definition,
            styles,
            colorful=colorful,
            globals=application.definition.options.values() if application is not None else (),
        ))

        if help := command.processed_help:
            renders.append(text("Help:", "section-label"))
            renders.append(Text("\n").join(
                Text.assemble(" ", text(line, "help-body")) for line in help.splitlines()
            ))

        if not help and renders and not renders[-1]:
            renders.pop()

        return Group(*renders)


class ListCommand(Command):
    """
    List the commands of the application, grouped by namespace.
    """

    def configure(self):
        self.set_name("list")
        self.set_definition([
            InputArgument("namespace", ArgumentMode.OPTIONAL, "The namespace name"),
            InputOption("raw", Unset, OptionMode.VALUE_NONE, "To output raw command list"),
        ])
        self.set_descr("Lists commands")
        self.set_help(
            "The %command.name% command lists all commands:\n"
            "\n"
            "  %command.full_name%\n"
            "\n"
            "You can also display the commands for a specific namespace:\n"
            "\n"
            "  %command.full_name% test\n"
            "\n"
            "It's also possible to get raw list of commands (useful for embedding command runner):\n"
            "\n"
            "  %command.full_name% --raw"
        )

    def execute(self, input, console):
        application = self.application
        if application is None:
            raise RuntimeError("the list command requires an application")

        namespace = input.argument("namespace")
        if namespace:
            namespace = application.find_namespace(namespace)
            commands = application.all(namespace)
        else:
            commands = application.all()

        if input.option("raw"):
            width = max(map(len, commands), default=0) + 2
            for name in sorted(commands):
                console.print(f"{name:<{width}}{commands[name].descr}".rstrip(), markup=False, highlight=False)
            return 0

        console.print(self.describe(application, commands, namespace))
        return 0

    @staticmethod
    def describe(application, commands, namespace=None):
        """
        Build the list renderable of the given commands.
        """
        styles = _styles()

        def text(fragment, style=""):
            return Text(str(fragment), styles[style])

        renders = [
            application.long_version,
            Text(),
            text("Usage:", "section-label"),
            Text("  [options] command [arguments]"),
            Text(),
        ]
        renders.extend(_render_definition(
            InputDefinition(application.definition.options.values()),
            styles,
            colorful=True,
        ))

        if namespace:
            renders.append(text(f'Available commands for the "{namespace}" namespace:', "section-label"))
        else:
            renders.append(text("Available commands:", "section-label"))

        groups = defaultdict(dict)
        for name in sorted(commands):
            groups[extract_namespace(name, 1)][name] = commands[name]

        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()
        for group in sorted(groups):
            if group and not namespace:
                table.add_row(text(group, "namespace-label"), Text())
            for name, command in groups[group].items():
                table.add_row(Text.assemble("  ", text(name, "command-name")), text(command.descr, "description"))
        renders.append(table)

        return Group(*renders)


def command(callback=Unset, /, *args, **kwargs):
    """
    Create a Command from a callable, or return a decorator to build it later.

    Invocation modes
    - Direct:     cmd = command(func, "name", aliases=[...], descr="...")
    - Decorator:  @command("name", descr="...")
                  def func(input, console): ...

    The callable receives (BoundInput, Console) and returns a status or None.
    Defaults
    - name: the callable's __name__ with underscores turned into dashes.
    - descr: the first line of the callable's docstring.
    """
    if isinstance(callback, str):
        args = (callback, *args)
        callback = Unset

    @rename("command")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@command() must be applied to a callable")
        parameters = args or (callback.__name__.replace("_", "-"),)
        options = dict(kwargs)
        if "descr" not in options and (doc := inspect.getdoc(callback)):
            options["descr"] = doc.splitlines()[0]
        return Command(*parameters, **options).set_code(callback)

    return wrapper(callback) if callback is not Unset else wrapper
