"""Printing of resolved terms back into surface syntax."""

from plambda.term import Apply, Bound, Lambda

MAX_DEPTH = 42  # abstractions and applications nested deeper are printed as ELLIPSIS
ELLIPSIS = "..."


def fresh(name, used):
    """Returns name, primed as many times as needed to not be in used."""
    while name in used:
        name += "'"
    return name


def expr(names, term):
    """Returns term as a string. names are the names of the free indices, innermost first."""
    return _expr(list(names), term, 0)


def _expr(names, term, depth):
    if isinstance(term, Bound):
        return names[term.index]
    elif depth > MAX_DEPTH:
        return ELLIPSIS

    if isinstance(term, Lambda):
        args = []
        while isinstance(term, Lambda):
            arg = fresh(term.name, names)
            args.append(arg)
            names = [arg] + names
            term = term.body
        return f"λ{' '.join(args)}. {_expr(names, term, depth + 1)}"

    head, args = term, []
    while isinstance(head, Apply):
        args.insert(0, head.right)
        head = head.left

    parts = [_enclose(names, head, depth, isinstance(head, Lambda))]
    for arg in args:
        parts.append(_enclose(names, arg, depth + 1, isinstance(arg, (Apply, Lambda))))
    return " ".join(parts)


def _enclose(names, term, depth, parens):
    printed = _expr(names, term, depth)
    return f"({printed})" if parens and printed != ELLIPSIS else printed
