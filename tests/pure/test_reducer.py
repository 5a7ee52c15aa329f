import unittest

from plambda.lang.context import Context
from plambda.lang.error import NoNormalForm, UnboundName
from plambda.lang.mode import EvaluationMode
from plambda.pure import printer
from plambda.pure.desugar import resolve
from plambda.pure.lexical import parse_term
from plambda.pure.reducer import normalize
from plambda.term import Apply, Bound, Lambda, beta, shift


def context(*constants, **definitions):
    ctx = Context()
    for name in constants:
        ctx = ctx.add_constant(name)
    for name, source in definitions.items():
        ctx = ctx.add_definition(name, resolve(ctx.names, parse_term(source)))
    return ctx


def evaluate(ctx, source, eager=False, deep=False):
    term = normalize(ctx, EvaluationMode(eager, deep), resolve(ctx.names, parse_term(source)))
    return printer.expr(ctx.names, term)


class TermTestCase(unittest.TestCase):

    def test_shift(self):
        term = Lambda("x", Apply(Bound(0), Bound(1)))
        self.assertEqual(Lambda("x", Apply(Bound(0), Bound(3))), shift(term, 2))
        self.assertEqual(term, shift(term, 0))

    def test_beta(self):
        # (λx. x free) y, with free = Bound(1) and y = Bound(0) outside the redex
        body = Apply(Bound(0), Bound(1))
        self.assertEqual(Apply(Bound(0), Bound(0)), beta(body, Bound(0)))
        # argument moves under a binder
        body = Lambda("z", Bound(1))
        self.assertEqual(Lambda("z", Bound(3)), beta(body, Bound(2)))


class DesugarTestCase(unittest.TestCase):

    def test_resolve(self):
        cases = {
            "λx. x": Lambda("x", Bound(0)),
            "λx y. x": Lambda("x", Lambda("y", Bound(1))),
            "λx. a": Lambda("x", Bound(2)),
            "b a": Apply(Bound(0), Bound(1)),
            "λb. b a": Lambda("b", Apply(Bound(0), Bound(2))),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, resolve(["b", "a"], parse_term(case)), case)

    def test_unbound(self):
        with self.assertRaises(UnboundName) as raised:
            resolve(["a"], parse_term("λx. a y"))
        self.assertEqual("unknown identifier y", raised.exception.msg)
        self.assertEqual(7, raised.exception.loc.column)


class PrinterTestCase(unittest.TestCase):

    def test_expr(self):
        cases = {
            Lambda("x", Bound(0)): "λx. x",
            Lambda("x", Lambda("y", Apply(Bound(1), Bound(0)))): "λx y. x y",
            Apply(Apply(Bound(0), Bound(1)), Bound(0)): "f g f",
            Apply(Bound(0), Apply(Bound(1), Bound(0))): "f (g f)",
            Apply(Lambda("x", Bound(0)), Lambda("y", Bound(0))): "(λx. x) (λy. y)",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, printer.expr(["f", "g"], case), case)

    def test_fresh_names(self):
        self.assertEqual("λx'. x' x", printer.expr(["x"], Lambda("x", Apply(Bound(0), Bound(1)))))
        self.assertEqual("λx x'. x x'", printer.expr([], Lambda("x", Lambda("x", Apply(Bound(1), Bound(0))))))

    def test_ellipsis(self):
        term = Bound(0)
        for __ in range(printer.MAX_DEPTH + 5):
            term = Apply(Bound(0), term)
        self.assertTrue(printer.expr(["f"], term).endswith(f"f {printer.ELLIPSIS}" + ")" * printer.MAX_DEPTH))


class NormalizeTestCase(unittest.TestCase):

    def test_constants(self):
        ctx = context("y", "z")
        self.assertEqual("y", evaluate(ctx, "(λx. x) y"))
        self.assertEqual("z y", evaluate(ctx, "z ((λx. x) y)"))

    def test_definitions_unfold(self):
        ctx = context("y", id="λx. x", k="λa b. a")
        self.assertEqual("y", evaluate(ctx, "id y"))
        self.assertEqual("y", evaluate(ctx, "k y id"))
        self.assertEqual("λx. x", evaluate(ctx, "id"))

    def test_shallow_and_deep(self):
        ctx = context()
        self.assertEqual("λx. (λy. y) x", evaluate(ctx, "λx. (λy. y) x"))
        self.assertEqual("λx. x", evaluate(ctx, "λx. (λy. y) x", deep=True))

    def test_church_numerals(self):
        ctx = context(two="λf x. f (f x)", succ="λn f x. f (n f x)")
        self.assertEqual("λf x. f (f (f x))", evaluate(ctx, "succ two", deep=True))
        self.assertEqual("λf x. f (f (f x))", evaluate(ctx, "succ two", eager=True, deep=True))

    def test_lazy_and_eager(self):
        ctx = context("z")
        omega = "((λw. w w) (λw. w w))"
        self.assertEqual("z", evaluate(ctx, f"(λx. z) {omega}"))
        self.assertRaises(NoNormalForm, evaluate, ctx, f"(λx. z) {omega}", eager=True)
        self.assertRaises(NoNormalForm, evaluate, ctx, omega)

    def test_unfolded_self_application(self):
        ctx = context("z", w="λx. x x")
        self.assertRaises(NoNormalForm, evaluate, ctx, "w w")
        self.assertRaises(NoNormalForm, evaluate, ctx, "w w", eager=True)
        self.assertEqual("z", evaluate(ctx, "(λx. z) (w w)"))

    def test_trace(self):
        ctx = context("y")
        steps = []
        term = resolve(ctx.names, parse_term("(λx. x) ((λx. x) y)"))
        normalize(ctx, EvaluationMode(), term, trace=lambda term, binders: steps.append(term))
        self.assertEqual(2, len(steps))
        self.assertEqual(Bound(0), steps[-1])


if __name__ == '__main__':
    unittest.main()
