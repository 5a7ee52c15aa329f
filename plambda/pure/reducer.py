"""Normalization of resolved terms under an evaluation mode.

    eager   arguments are normalized before they are substituted (call-by-value), otherwise they are substituted as
            they are (call-by-name)
    deep    bodies of abstractions are normalized too, otherwise an abstraction is already a value

Names defined in the context are unfolded when they are met; constants stay as they are. A term without a normal form
makes normalize diverge: a contraction that gives back its own redex, as written or with its definitions unfolded,
raises NoNormalForm; otherwise Python's recursion limit or an interrupt ends the computation.
"""

from plambda.lang.error import NoNormalForm
from plambda.term import Apply, Bound, Lambda, beta, shift


def normalize(ctx, mode, term, trace=None):
    """Returns the normal form of term in ctx, following mode. trace, if given, is called with every contractum and the
    names of the binders it sits under (innermost first).
    """

    def norm(term, binders):
        depth = len(binders)
        while True:
            if isinstance(term, Bound):
                if term.index < depth:
                    return term
                value = ctx.lookup(term.index - depth)
                if value is None:
                    return term
                term = shift(value, depth)

            elif isinstance(term, Lambda):
                if not mode.deep:
                    return term
                return Lambda(term.name, norm(term.body, [term.name] + binders))

            else:
                right = norm(term.right, binders) if mode.eager else term.right
                left = norm(term.left, binders)
                if not isinstance(left, Lambda):
                    return Apply(left, right if mode.eager else norm(right, binders))

                reduced = beta(left.body, right)
                if reduced == term or reduced == Apply(left, right):  # before or after unfolding
                    raise NoNormalForm("term reduces to itself, it has no normal form")
                term = reduced
                if trace is not None:
                    trace(term, binders)

    return norm(term, [])
