"""Desugaring: resolves the names of a surface syntax tree into de Bruijn indices."""

from plambda.lang.error import UnboundName
from plambda.pure.lexical import Abstraction, Application, Variable
from plambda.term import Apply, Bound, Lambda


def resolve(names, term):
    """Converts the surface term into a resolved Term. names are the context's names, newest first; binders are pushed
    in front of them, so the innermost binder gets index 0. Raises UnboundName for an unknown identifier.
    """
    names = list(names)

    if isinstance(term, Variable):
        try:
            return Bound(names.index(term.name))
        except ValueError:
            raise UnboundName("unknown identifier {}", term.name, loc=term.loc)

    elif isinstance(term, Abstraction):
        body = resolve(list(reversed(term.args)) + names, term.body)
        for arg in reversed(term.args):
            body = Lambda(arg, body)
        return body

    elif isinstance(term, Application):
        return Apply(resolve(names, term.left), resolve(names, term.right))

    raise TypeError(f"cannot resolve {term!r}")
