"""
Switchyard application: command container and entry point.

Responsibilities
- own the CommandRegistry and a CommandResolver over it.
- hold the global InputDefinition merged into every command run:
  argument "command" and the options --help/-h, --quiet/-q, --verbose/-v,
  --version/-V, --ansi, --no-ansi, --no-interaction/-n.
- detect the global flags on the raw input before any definition exists,
  resolve the command and run it.
- turn faults into rendered diagnostics and exit codes.

Exit codes
- 0 on success, 1 when a fault or any other exception is surfaced,
  command statuses capped at 255.

Console handling
- output goes to a rich Console; errors go to a stderr Console unless a
  console was given, in which case both share it.
- --quiet silences the output console and --no-ansi strips colors, for the
  current run only.
- --ansi forces terminal styling on the default console.
"""
import sys

from rich.console import Console
from rich.text import Text

from .arguments import ArgumentMode, InputArgument, InputOption, OptionMode
from .commands import Command, HelpCommand, ListCommand
from .definitions import InputDefinition
from .faults import CommandException, trigger
from .inputs import ArrayInput, make_input
from .registry import CommandRegistry
from .resolver import CommandResolver
from .utils import *

__all__ = (
    "Application",
    "invoke",
)


class Application:
    """
    Container of commands and runner of raw inputs.

    Parameters
    - name, version: shown by --version and the list command.
    - console: Unset | rich.console.Console
      Console used for both output and errors (handy for capture in tests);
      fresh stdout/stderr consoles are used per run when omitted.

    Attributes
    - catch_exceptions: render faults and return 1 instead of raising.
    - auto_exit: call sys.exit() with the status at the end of run().
    """

    def __init__(self, name="UNKNOWN", version="UNKNOWN", *, console=Unset):
        self._name = name
        self._version = version
        self._console = console
        self._registry = CommandRegistry()
        self._resolver = CommandResolver(self._registry)
        self._definition = self.default_definition()
        self._running = None
        self._verbose = False
        self.catch_exceptions = True
        self.auto_exit = True

        for command in self.default_commands():
            self.add(command)

    # --- metadata ---

    name = mirror("name")
    version = mirror("version")

    def set_name(self, name):
        self._name = name

    def set_version(self, version):
        self._version = version

    @property
    def console(self):
        return self._console

    def set_console(self, console=Unset):
        """
        Replace the console shared by output and errors (Unset restores the
        per-run stdout/stderr consoles).
        """
        self._console = console

    @property
    def long_version(self):
        if self._name != "UNKNOWN" and self._version != "UNKNOWN":
            return Text.assemble(
                (self._name, "bold #FF4D94"),
                " version ",
                (self._version, "bold #00E6FF"),
            )
        return Text("Console Tool", "bold #FF4D94")

    @property
    def definition(self):
        return self._definition

    def default_definition(self):
        return InputDefinition([
            InputArgument("command", ArgumentMode.REQUIRED, "The command to execute"),
            InputOption("--help", "-h", OptionMode.VALUE_NONE, "Display this help message."),
            InputOption("--quiet", "-q", OptionMode.VALUE_NONE, "Do not output any message."),
            InputOption("--verbose", "-v", OptionMode.VALUE_NONE, "Increase verbosity of messages."),
            InputOption("--version", "-V", OptionMode.VALUE_NONE, "Display this application version."),
            InputOption("--ansi", "", OptionMode.VALUE_NONE, "Force ANSI output."),
            InputOption("--no-ansi", "", OptionMode.VALUE_NONE, "Disable ANSI output."),
            InputOption("--no-interaction", "-n", OptionMode.VALUE_NONE, "Do not ask any interactive question."),
        ])

    def default_commands(self):
        return [HelpCommand(), ListCommand()]

    # --- registry ---

    def add(self, command):
        """
        Register a command and make this application its owner.

        Returns
        - the command, or None when it is disabled.
        """
        command.set_application(self)
        if not command.enabled:
            command.set_application(None)
            return None
        return self._registry.register(command)

    def add_commands(self, commands):
        for command in commands:
            self.add(command)

    def register(self, name):
        """
        Create, register and return an empty Command named `name`.
        """
        return self.add(Command(name))

    def get(self, name):
        return self._registry.lookup(name)

    def has(self, name):
        return self._registry.has(name)

    def all(self, namespace=Unset):
        return self._registry.all(namespace)

    # --- resolution ---

    def namespaces(self):
        return self._resolver.namespaces()

    def find_namespace(self, namespace):
        return self._resolver.find_namespace(namespace)

    def find(self, name, *, help=False):
        return self._resolver.find(name, help=help)

    # --- running ---

    def _consoles(self, input):
        if self._console is not Unset:
            console = stderr = self._console
        else:
            options = {}
            if input.has_parameter_option("--ansi"):
                options["force_terminal"] = True
            elif input.has_parameter_option("--no-ansi"):
                options["no_color"] = True
            console = Console(**options)
            stderr = Console(stderr=True, **options)

        if input.has_parameter_option("--no-ansi"):
            console.no_color = stderr.no_color = True
        if input.has_parameter_option(("--quiet", "-q")):
            console.quiet = True
        return console, stderr

    def run(self, input=Unset):
        """
        Run the application and return (or exit with) the status code.

        Exceptions raised while running are rendered on the error console
        (with a traceback under --verbose), followed by the running
        command's synopsis, and produce status 1. Exceptions other than
        CommandException are shown as "unexpected error" faults.

        --quiet and --no-ansi only apply to this run, even on a console
        given to the constructor.
        """
        input = make_input(input)
        shared = self._console
        if shared is not Unset:
            saved = shared.quiet, shared.no_color
        console, stderr = self._consoles(input)
        self._verbose = input.has_parameter_option(("--verbose", "-v"))

        try:
            status = self.do_run(input, console)
        except Exception as error:
            if not self.catch_exceptions:
                raise
            fault = error
            if not isinstance(error, CommandException):
                message = type(error).__name__ + (f": {error}" if str(error) else "")
                fault = CommandException(message, title="unexpected error")
            self.render_exception(fault, stderr, colorful=not input.has_parameter_option("--no-ansi"))
            status = 1
        finally:
            self._running = None
            # run flags only last for this run
            if shared is not Unset:
                shared.quiet, shared.no_color = saved

        status = min(status, 255)
        if self.auto_exit:
            sys.exit(status)
        return status

    def do_run(self, input, console=Unset):
        """
        Resolve and run the command named by the input, without error handling.
        """
        console = coalesce(console, Console())
        name = input.get_first_argument()
        help = input.has_parameter_option(("--help", "-h"))

        if help and name is None:
            name = "help"
            help = False
            input = ArrayInput({"command": "help"}, interactive=input.interactive)

        if input.has_parameter_option(("--no-interaction", "-n")):
            input.interactive = False

        if input.has_parameter_option(("--version", "-V")):
            console.print(self.long_version)
            return 0

        if name is None:
            name = "list"
            input = ArrayInput({"command": "list"}, interactive=input.interactive)

        command, help = self.find(name, help=help)
        if help:
            command = self.get("help").set_command(command)

        self._running = command
        status = command.run(input, console)
        self._running = None
        return status

    def render_exception(self, fault, console, *, colorful=True):
        """
        Print a fault, the traceback when verbose, and the running synopsis.
        """
        trigger(fault, shell=True, deferred=True, console=console, colorful=colorful, prog=self._name)
        if self._verbose:
            console.print_exception()
        if self._running is not None:
            console.print(Text(self._running.synopsis, "bold #00E6FF" if colorful else ""))

    def __invoke__(self, prompt=Unset):
        return self.run(make_input(prompt))


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for applications and commands.

    Parameters
    - object: an Application or a Command (anything implementing __invoke__).
    - prompt:
      • Unset: read sys.argv[1:].
      • str: split with shlex (StringInput).
      • Mapping: ArrayInput.
      • Iterable[str]: ArgvInput.

    Raises
    - TypeError: when 'object' cannot be invoked.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None
