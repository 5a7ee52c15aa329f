"""Session control for the toplevel language: executes directives against a context, either one at a time (see
lang/shell.py) or folded over a whole file.
"""

import sys
from dataclasses import dataclass

from plambda.lang.context import Context
from plambda.lang.error import ErrorHandler, TypingError
from plambda.lang.lexical import (ConstantStmt, ContextStmt, DeepStmt, DefineStmt, EagerStmt, ExprStmt, HelpStmt,
                                  QuitStmt, parse_file)
from plambda.lang.mode import EvaluationMode
from plambda.pure import desugar, printer, reducer

HELP_TEXT = """Toplevel directives:
<expr> ;                      evaluate <expr>
x := <expr> ;                 define x to be <expr>
#lazy ;                       evaluate lazily (do not evaluate arguments)
#eager ;                      evaluate eagerly (evaluate arguments immediately)
#deep ;                       evaluate inside λ-abstraction
#shallow ;                    do not evaluate inside λ-abstraction
#constant x ... y ;           declare constants
#context ;                    print current definitions
#help ;                       print this help
#quit ;                       exit

Syntax:
^ x ... y . e                  λ-abstraction (λ and \\ work too)
e1 e2                          application
(* ... *)  -- ...              comments
"""


@dataclass(frozen=True)
class Halt:
    """Outcome of a directive that ends the session."""
    code: int = 0


class Session:
    """Governs a toplevel session: owns the evaluation mode and executes directives against contexts. Contexts are
    passed in and returned, never kept, so a failed directive leaves the caller's context as it was.
    """

    def __init__(self, mode=None, error_handler=None, stdout=None):
        self.mode = mode if mode is not None else EvaluationMode()
        self.error_handler = error_handler if error_handler is not None else ErrorHandler()
        self._stdout = stdout

    @property
    def stdout(self):
        return self._stdout if self._stdout is not None else sys.stdout

    def print(self, *args):
        print(*args, file=self.stdout)

    def execute(self, interactive, ctx, stmt):
        """Executes directive stmt in ctx. Prints the result if interactive, and returns the new context, or a Halt if
        the session should end. Errors are raised, never reported here.
        """
        if isinstance(stmt, ExprStmt):
            term = desugar.resolve(ctx.names, stmt.term)
            term = reducer.normalize(ctx, self.mode, term, trace=self._trace(ctx))
            if interactive:
                self.print(f"    = {printer.expr(ctx.names, term)}")
            return ctx

        elif isinstance(stmt, ContextStmt):
            if interactive:
                for name, value in ctx.render():
                    if value is None:
                        self.print(f"#constant {name};")
                    else:
                        self.print(f"{name} := {value};")
            return ctx

        elif isinstance(stmt, EagerStmt):
            self.mode.eager = stmt.value
            if interactive:
                self.print(f"I will evaluate {self.mode.describe_strategy()}.")
            return ctx

        elif isinstance(stmt, DeepStmt):
            self.mode.deep = stmt.value
            if interactive:
                self.print(f"I will evaluate {self.mode.describe_scope()}.")
            return ctx

        elif isinstance(stmt, ConstantStmt):
            # left fold without rollback: the error carries the context as it was when the clash was found
            for name in stmt.names:
                if name in ctx:
                    error = TypingError("{} already exists", name, loc=stmt.loc)
                    error.context = ctx
                    raise error
                if interactive:
                    self.print(f"{name} is a constant.")
                ctx = ctx.add_constant(name)
            return ctx

        elif isinstance(stmt, DefineStmt):
            if stmt.name in ctx:
                raise TypingError("{} already exists", stmt.name, loc=stmt.loc)
            term = desugar.resolve(ctx.names, stmt.term)
            if interactive:
                self.print(f"{stmt.name} is defined.")
            return ctx.add_definition(stmt.name, term)

        elif isinstance(stmt, HelpStmt):
            if interactive:
                self.print(HELP_TEXT)
            return ctx

        elif isinstance(stmt, QuitStmt):
            return Halt(0)

        raise TypeError(f"unknown directive {stmt!r}")

    def _trace(self, ctx):
        def trace(term, binders):
            self.error_handler.debug("β", printer.expr(binders + ctx.names, term))

        return trace if self.error_handler.verbosity >= 3 else None

    def load_file(self, ctx, path, interactive=False):
        """Executes every directive of the file at path, starting from ctx. Errors are not caught: loading stops at the
        first one. Returns the resulting context, or a Halt if the file quits.
        """
        for stmt in parse_file(path):
            ctx = self.execute(interactive, ctx, stmt)
            if isinstance(ctx, Halt):
                break
        return ctx

    def load_files(self, files, ctx=None):
        """Loads every (path, interactive) pair of files in order, starting from ctx (empty if not given)."""
        if ctx is None:
            ctx = Context()

        for path, interactive in files:
            ctx = self.load_file(ctx, path, interactive)
            if isinstance(ctx, Halt):
                break
        return ctx
