"""Resolved λ-terms, as produced by desugaring and consumed by the reducer and printer.

Variables are de Bruijn indices: Bound(0) refers to the innermost enclosing λ. Indices that point past every enclosing
λ refer to the context, newest declaration first.
"""

from dataclasses import dataclass


class Term:
    """Superclass of resolved terms."""


@dataclass(frozen=True)
class Bound(Term):
    index: int


@dataclass(frozen=True)
class Lambda(Term):
    name: str  # only a hint for printing
    body: Term


@dataclass(frozen=True)
class Apply(Term):
    left: Term
    right: Term


def shift(term, amount, cutoff=0):
    """Adds amount to every index in term that is free below cutoff binders."""
    if amount == 0:
        return term
    if isinstance(term, Bound):
        return Bound(term.index + amount) if term.index >= cutoff else term
    elif isinstance(term, Lambda):
        return Lambda(term.name, shift(term.body, amount, cutoff + 1))
    return Apply(shift(term.left, amount, cutoff), shift(term.right, amount, cutoff))


def subst(term, index, value):
    """Replaces Bound(index) in term with value. value is shifted as binders are crossed."""
    if isinstance(term, Bound):
        return value if term.index == index else term
    elif isinstance(term, Lambda):
        return Lambda(term.name, subst(term.body, index + 1, shift(value, 1)))
    return Apply(subst(term.left, index, value), subst(term.right, index, value))


def beta(body, argument):
    """Contracts the redex (λ.body) argument."""
    return shift(subst(body, 0, shift(argument, 1)), -1)
