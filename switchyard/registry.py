"""
Switchyard command registry.

The registry maps every canonical command name and every alias to the command
that owns it, in registration order. It only performs exact lookups; prefix
matching and suggestions live in the resolver (see switchyard.resolver).
"""
from .faults import CommandOverrideWarning, UnknownCommandError, trigger
from .utils import *

__all__ = (
    "CommandRegistry",
)


def extract_namespace(name, limit=Unset):
    """
    Return the namespace part of a command name ("" for the global namespace).

    The last colon segment is dropped; when limit is given only the first
    `limit` remaining segments are kept.

        >>> extract_namespace("foo:bar:baz")
        'foo:bar'
        >>> extract_namespace("foo:bar:baz", 1)
        'foo'
        >>> extract_namespace("list")
        ''
    """
    segments = name.split(":")[:-1]
    if limit is not Unset:
        segments = segments[:limit]
    return ":".join(segments)


class CommandRegistry:
    """
    Name and alias index over registered commands.

    Contract
    - register(command) stores the command under its name and aliases;
      disabled commands are ignored.
    - lookup(name) is exact (names and aliases), never abbreviated.
    - registering a different command under a taken key replaces it and emits
      a CommandOverrideWarning.
    """

    def __init__(self, commands=()):
        self._commands = {}
        for command in commands:
            self.register(command)

    def register(self, command):
        """
        Store a command under its name and every alias.

        Returns
        - the command, or None when the command is disabled.
        """
        if not command.enabled:
            return None

        for key in (command.name, *command.aliases):
            if key in self._commands and self._commands[key] is not command:
                trigger(CommandOverrideWarning(
                    f'The command "{key}" has been overridden.',
                    hint=f"{self._commands[key].name!r} replaced by {command.name!r}",
                    name=key,
                ))
            self._commands[key] = command
        return command

    def lookup(self, name):
        """
        Exact name-or-alias lookup.

        Raises
        - UnknownCommandError: nothing is registered under that key.
        """
        if name not in self._commands:
            raise UnknownCommandError(f'The command "{name}" does not exist.', name=name)
        return self._commands[name]

    def has(self, name):
        return name in self._commands

    def names(self):
        """
        Every registered key (canonical names and aliases) in registration order.
        """
        return list(self._commands)

    def commands(self):
        """
        Unique commands in registration order.
        """
        return list(dict.fromkeys(self._commands.values()))

    def all(self, namespace=Unset):
        """
        Canonical name -> command for every unique command, or only those whose
        namespace is exactly `namespace` ("" selects the global namespace).
        """
        return {
            command.name: command
            for command in self.commands()
            if namespace is Unset or extract_namespace(command.name) == namespace
        }

    def __contains__(self, name):
        return self.has(name)

    def __len__(self):
        return len(self.commands())
