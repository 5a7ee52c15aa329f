"""The session's environment: an ordered, name-unique registry of constants and definitions.

A Context is never modified: adding a declaration returns a new Context, so a directive that fails halfway cannot
affect contexts produced before it. Declarations are stored newest first, which is also the order in which the
desugarer numbers them (the newest declaration gets the lowest index).
"""

from dataclasses import dataclass

from plambda.lang.error import NameConflict
from plambda.pure import printer
from plambda.term import Term, shift


@dataclass(frozen=True)
class Constant:
    """A declared name with no value."""


@dataclass(frozen=True)
class Definition:
    """A declared name bound to a term, resolved against the declarations older than it."""
    term: Term


class Context:

    def __init__(self, entries=()):
        self._entries = tuple(entries)

    @property
    def names(self):
        """Declared names, newest first."""
        return [name for name, __ in self._entries]

    @property
    def decls(self):
        return [decl for __, decl in self._entries]

    def lookup(self, index):
        """Returns the value of the declaration at index, shifted to be valid in this whole context, or None if it is
        a constant. Raises IndexError if there is no such declaration.
        """
        if index < 0:
            raise IndexError(f"context index {index} out of range")

        __, decl = self._entries[index]
        if isinstance(decl, Definition):
            return shift(decl.term, index + 1)
        return None

    def _add(self, name, decl):
        if name in self:
            raise NameConflict(name)
        return Context(((name, decl),) + self._entries)

    def add_constant(self, name):
        return self._add(name, Constant())

    def add_definition(self, name, term):
        return self._add(name, Definition(term))

    def render(self):
        """Returns (name, value) pairs from the oldest declaration to the newest. value is None for constants and the
        printed term for definitions.
        """
        names = self.names
        rendered = []
        for index in range(len(self._entries) - 1, -1, -1):
            name, decl = self._entries[index]
            if isinstance(decl, Definition):
                rendered.append((name, printer.expr(names[index + 1:], decl.term)))
            else:
                rendered.append((name, None))
        return rendered

    def __contains__(self, name):
        return any(name == entry_name for entry_name, __ in self._entries)

    def __len__(self):
        return len(self._entries)

    def __eq__(self, other):
        return isinstance(other, Context) and self._entries == other._entries

    def __hash__(self):
        return hash(self._entries)

    def __repr__(self):
        return f"Context({self.names})"
