"""
Switchyard command resolver.

Resolves a user supplied, possibly abbreviated, possibly namespaced command
name to exactly one registered command.

Namespace model
- a command name is "segment(:segment)*"; its namespace is every segment but
  the last; the global namespace is "".

Algorithm
- find_namespace(): each colon segment is expanded through the abbreviation
  table of that segment across the registered namespaces sharing the
  segments already resolved.
- find(): the leading namespace is expanded, then the name is matched against
  the abbreviation table of the canonical names in that namespace, then
  against the aliases in that namespace.
- nothing is cached: tables are rebuilt from the registry on every call, so
  registrations between calls are always visible.

Suggestions
- find_alternatives() ranks candidates by Levenshtein distance; a candidate
  qualifies when its distance is at most len(query) // 3 or when it contains
  the query. Suggestions never change whether resolution succeeds.
"""
from typing import NamedTuple

from .faults import *
from .registry import extract_namespace
from .utils import *

__all__ = (
    "Resolution",
    "CommandResolver",
    "abbreviate",
    "extract_namespace",
    "find_alternatives",
    "levenshtein",
)


class Resolution(NamedTuple):
    """
    Result of CommandResolver.find().

    - command: the resolved command.
    - help: True when the caller asked for the command's help instead of
      running it; the caller substitutes the help command.
    """
    command: object
    help: bool = False


def levenshtein(first, second, /):
    """
    Edit distance (insertions, deletions, substitutions) between two strings.

        >>> levenshtein("kitten", "sitting")
        3
    """
    if len(first) < len(second):
        return levenshtein(second, first)
    if not second:
        return len(first)
    previous = range(len(second) + 1)
    for index, left in enumerate(first):
        current = [index + 1]
        for column, right in enumerate(second):
            current.append(min(
                previous[column + 1] + 1,
                current[column] + 1,
                previous[column] + (left != right),
            ))
        previous = current
    return previous[-1]


def abbreviate(names, /):
    """
    Build the abbreviation table of a collection of names.

    Every non-empty proper prefix maps to the names sharing it (in the given
    order); every full name maps to itself only, even when it is also a
    prefix of another name.

        >>> abbreviate(["foo", "foobar"])["foo"]
        ['foo']
        >>> abbreviate(["foo", "foobar"])["f"]
        ['foo', 'foobar']
    """
    names = list(dict.fromkeys(names))
    abbreviations = {}
    for name in names:
        for length in range(len(name) - 1, 0, -1):
            abbreviations.setdefault(name[:length], []).append(name)
    for name in names:
        abbreviations[name] = [name]
    return abbreviations


def find_alternatives(query, candidates, abbreviations=Unset):
    """
    Rank the candidates that look like `query`.

    Parameters
    - query: the unmatched user input.
    - candidates: names to compare against.
    - abbreviations: optional abbreviation table; when no candidate
      qualifies, its keys are tested instead and their names suggested.

    Returns
    - a list of names ordered by ascending distance (ties keep candidate order).
    """
    def qualified(pairs):
        found = {}
        for key, name in pairs:
            distance = levenshtein(query, key)
            if distance <= len(query) // 3 or query in key:
                if name not in found or distance < found[name]:
                    found[name] = distance
        return sorted(found, key=found.__getitem__)

    alternatives = qualified((candidate, candidate) for candidate in candidates)
    if not alternatives and abbreviations is not Unset:
        alternatives = qualified(
            (key, name)
            for key, names in abbreviations.items()
            for name in names
        )
    return alternatives


def _describe_ambiguity(names, /):
    """
    "X, Y" or "X, Y and N more".
    """
    message = f"{names[0]}, {names[1]}"
    if len(names) > 2:
        message += f" and {len(names) - 2} more"
    return message


def _with_suggestions(message, alternatives, /):
    if not alternatives:
        return message
    if len(alternatives) == 1:
        return message + "\n\nDid you mean this?\n    " + alternatives[0]
    return message + "\n\nDid you mean one of these?\n    " + "\n    ".join(alternatives)


class CommandResolver:
    """
    Abbreviation-aware resolver layered over a CommandRegistry.

    The resolver is read-only: it never mutates the registry nor keeps any
    state between calls.
    """

    def __init__(self, registry, /):
        self._registry = registry

    @property
    def registry(self):
        return self._registry

    def namespaces(self):
        """
        Distinct non-empty namespaces of every name and alias, in registration order.
        """
        namespaces = {}
        for command in self._registry.commands():
            for name in (command.name, *command.aliases):
                if namespace := extract_namespace(name):
                    namespaces[namespace] = None
        return list(namespaces)

    def find_namespace(self, namespace):
        """
        Expand a possibly abbreviated namespace.

            >>> resolver.find_namespace("f:b")   # with "foo:bar:baz" registered
            'foo:bar'

        Raises
        - UnknownNamespaceError: a segment matches nothing.
        - AmbiguousNamespaceError: a segment matches several namespaces.
        """
        known = [candidate.split(":") for candidate in self.namespaces()]
        found = []
        for depth, part in enumerate(namespace.split(":")):
            segments = dict.fromkeys(
                pieces[depth]
                for pieces in known
                if len(pieces) > depth and pieces[:depth] == found
            )
            abbreviations = abbreviate(segments)

            if part not in abbreviations:
                query = ":".join((*found, part))
                alternatives = find_alternatives(query, self.namespaces(), abbreviate(self.namespaces()))
                raise UnknownNamespaceError(
                    _with_suggestions(
                        f'There are no commands defined in the "{namespace}" namespace.',
                        alternatives
                    ),
                    name=namespace,
                    suggestions=alternatives,
                    hint="run 'list' to see the available namespaces",
                )

            if len(matches := abbreviations[part]) > 1:
                raise AmbiguousNamespaceError(
                    f'The namespace "{namespace}" is ambiguous ({_describe_ambiguity(matches)}).',
                    name=namespace,
                    suggestions=[":".join((*found, match)) for match in matches],
                )

            found.append(matches[0])

        return ":".join(found)

    def find(self, name, *, help=False):
        """
        Resolve a possibly abbreviated command name or alias.

        Parameters
        - name: user input, e.g. "f:b", "foo:bar", "afoobar".
        - help: forwarded into the Resolution; the caller decides whether to
          substitute the help command.

        Raises
        - UnknownNamespaceError / AmbiguousNamespaceError: see find_namespace().
        - UnknownCommandError: no name nor alias matches.
        - AmbiguousCommandError: several names (or aliases) match.
        """
        namespace, separator, leaf = name.rpartition(":")
        search = name
        if separator:
            namespace = self.find_namespace(namespace)
            search = f"{namespace}:{leaf}"

        commands = self._registry.commands()

        names = [command.name for command in commands if extract_namespace(command.name) == namespace]
        abbreviations = abbreviate(names)
        if search in abbreviations:
            return self._resolve(name, abbreviations[search], help)

        aliases = [
            alias
            for command in commands
            for alias in command.aliases
            if extract_namespace(alias) == namespace
        ]
        aliases = abbreviate(aliases)
        if search in aliases:
            return self._resolve(name, aliases[search], help)

        everything = self._registry.names()
        alternatives = find_alternatives(search, everything, abbreviate(everything))
        raise UnknownCommandError(
            _with_suggestions(f'Command "{name}" is not defined.', alternatives),
            name=name,
            suggestions=alternatives,
            hint="run 'list' to see the available commands",
        )

    def _resolve(self, name, matches, help, /):
        if len(matches) > 1:
            raise AmbiguousCommandError(
                f'Command "{name}" is ambiguous ({_describe_ambiguity(matches)}).',
                name=name,
                suggestions=list(matches),
            )
        return Resolution(self._registry.lookup(matches[0]), bool(help))
