"""Error handling for the lambda toplevel. Only GenericExceptions should be encountered during a session: if another
type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Verbosity levels follow the toplevel's -V flag:
    0   print nothing
    1   print errors
    2   print errors (default)
    3   print errors and every reduction step
"""

import sys
from dataclasses import dataclass

from termcolor import colored


@dataclass(frozen=True)
class Location:
    """Position of a token in a source. column is 1-based; text is the full source line (used for diagnosis)."""
    path: str
    line: int
    column: int
    text: str = ""

    def __str__(self):
        return f"{self.path}:{self.line}:{self.column}"


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a lambda error. msg is a str.format template that is
    filled in with exprs, exprs[0] being the offending snippet.
    """
    kind = "error"

    def __init__(self, msg, exprs=None, loc=None, width=None, diagnosis=True, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = list(exprs)
        self.msg = msg.format(*self.exprs)
        self.loc = loc
        self.width = width if width is not None else max(len(self.exprs[0]) if self.exprs else 1, 1)

        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)

    def colored_msg(self):
        """Message with expr snippets bolded."""
        return self.template.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))


class ParseError(GenericException):
    """Malformed input or an unrecognised token."""
    kind = "syntax error"


class TypingError(GenericException):
    """Ill-formed declaration, such as redeclaring an existing name."""
    kind = "typing error"


class NameConflict(TypingError):
    """Raised by Context when a name is added twice."""

    def __init__(self, name, loc=None):
        super().__init__("{} already exists", name, loc=loc)
        self.name = name


class UnboundName(GenericException):
    """Identifier that is neither bound by a λ nor declared in the context."""
    kind = "unbound name"


class NoNormalForm(GenericException):
    """Reduction that gets back to the very term it started from."""
    kind = "evaluation error"


class ErrorHandler:
    """Context manager that reports lambda errors. A fatal handler ends the process with exit code 1 after reporting,
    a non-fatal one suppresses the error so the caller can carry on.
    """
    ERROR = "red"
    DEBUG = "cyan"

    def __init__(self, fatal=True, verbosity=2, stream=None):
        self.fatal = fatal
        self.verbosity = verbosity
        self._stream = stream

    @property
    def stream(self):
        return self._stream if self._stream is not None else sys.stderr

    @staticmethod
    def diagnose(error):
        """Returns the source line of error with the offending part highlighted and underlined."""
        text = error.loc.text.rstrip("\n")
        start = min(max(error.loc.column - 1, 0), len(text))
        end = min(start + error.width, len(text))

        diagnosis = "  " + text[:start]
        diagnosis += colored(text[start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += text[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def _report(self, error):
        error_msg = ""
        if error.loc is not None:
            error_msg += colored(f"{error.loc}: ", attrs=["bold"])
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored(f"{error.kind}: ", ErrorHandler.ERROR, attrs=["bold"]) + error.colored_msg()
        print(error_msg, file=self.stream)

        if not error.internal and error.diagnosis and error.loc is not None and error.loc.text.strip():
            print(ErrorHandler.diagnose(error), file=self.stream)

    def debug(self, step, expr):
        """Prints a single reduction step."""
        if self.verbosity >= 3:
            print(colored(f"{step} ", ErrorHandler.DEBUG, attrs=["bold"]) + expr, file=self.stream)

    def interrupt(self):
        print("Interrupted.", file=self.stream)
        if self.fatal:
            sys.exit(1)

    def throw(self, error):
        """Reports error, which must be a GenericException. Exits with code 1 if this handler is fatal."""
        if self.verbosity >= 1:
            self._report(error)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is None:
            pass
        elif issubclass(exc_type, KeyboardInterrupt):
            self.interrupt()
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.throw(GenericException("normal form might exist, but maximum recursion depth exceeded"))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
