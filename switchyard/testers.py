"""
Switchyard testers: run an application or a command against a prompt and
read back what it printed.

    >>> tester = ApplicationTester(application)
    >>> tester.run({"command": "list", "--raw": True})
    0
    >>> "help" in tester.display
    True

Both testers capture output on a rich Console writing to an in-memory
buffer. Options
- interactive: copied onto the raw input when given.
- decorated: keep terminal styling (ANSI codes) in the display.
- quiet: silence the capture console.
- width: capture console width, fixed so that tables wrap predictably.
"""
import io

from rich.console import Console

from .inputs import make_input
from .utils import *

__all__ = (
    "ApplicationTester",
    "CommandTester",
)


def _capture(*, decorated, quiet, width):
    return Console(
        file=io.StringIO(),
        force_terminal=decorated,
        color_system="truecolor" if decorated else None,
        quiet=quiet,
        width=width,
    )


class _Tester:
    def __init__(self):
        self._input = None
        self._console = None
        self._status = None

    @property
    def input(self):
        """The raw input of the last run."""
        return self._input

    @property
    def console(self):
        """The capture console of the last run."""
        return self._console

    @property
    def status(self):
        """The status code of the last run."""
        return self._status

    @property
    def display(self):
        """Everything printed during the last run."""
        return self._console.file.getvalue() if self._console is not None else ""

    def _prepare(self, prompt, interactive, decorated, quiet, width):
        self._input = make_input(prompt)
        if interactive is not Unset:
            self._input.interactive = interactive
        self._console = _capture(decorated=decorated, quiet=quiet, width=width)
        self._status = None


class ApplicationTester(_Tester):
    """
    Run an Application with a captured console.

    The application console is swapped for the capture console and
    auto_exit is turned off for the duration of the run; both are restored
    afterwards. Faults are rendered into the display like on a terminal.
    """

    def __init__(self, application):
        super().__init__()
        self._application = application

    @property
    def application(self):
        return self._application

    def run(self, prompt=(), *, interactive=Unset, decorated=False, quiet=False, width=120):
        self._prepare(prompt, interactive, decorated, quiet, width)
        application = self._application
        console, auto_exit = application.console, application.auto_exit
        application.set_console(self._console)
        application.auto_exit = False
        try:
            self._status = application.run(self._input)
        finally:
            application.set_console(console)
            application.auto_exit = auto_exit
        return self._status


class CommandTester(_Tester):
    """
    Run a single Command with a captured console.

    Faults raised by binding, validation or the command itself propagate
    to the caller.
    """

    def __init__(self, command):
        super().__init__()
        self._command = command

    @property
    def command(self):
        return self._command

    def execute(self, prompt=(), *, interactive=Unset, decorated=False, quiet=False, width=120):
        self._prepare(prompt, interactive, decorated, quiet, width)
        self._status = self._command.run(self._input, self._console)
        return self._status
