"""Handles interactive/command-line mode for the lambda toplevel. Uses cmd as backend."""

import cmd
import os

from plambda import __version__
from plambda.lang.error import ErrorHandler
from plambda.lang.lexical import SH_FILE, parse_toplevel
from plambda.lang.session import Halt
from plambda.pure.lexical import IncompleteInput


class LineReader:
    """Input stream that remembers whether its last read hit the end of input. cmd.Cmd reports the end of input as the
    line "EOF", which is also a valid identifier.
    """

    def __init__(self, stream):
        self.stream = stream
        self.at_eof = False

    def readline(self):
        line = self.stream.readline()
        self.at_eof = not line
        return line

    def __getattr__(self, name):
        return getattr(self.stream, name)


class Shell(cmd.Cmd):
    """Lambda calculus toplevel shell. Holds the current context; a directive that fails leaves it untouched."""
    prompt = "# "
    secondary_prompt = "  "  # used for line continuations
    _tmp_prompt = "# "       # also used for prompt swapping in line continuations

    def __init__(self, sess, ctx, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.stdin = LineReader(self.stdin)
        self.use_rawinput = False  # line editing comes from the wrapper, see lang/launcher.py

        self.sess = sess
        self.ctx = ctx
        self.error_handler = ErrorHandler(fatal=False, verbosity=sess.error_handler.verbosity,
                                          stream=sess.error_handler.stream)
        self.exit_code = 0

        eof = "Ctrl-Z" if os.name == "nt" else "Ctrl-D"
        self.intro = f"lambda {__version__}\n[Type {eof} to exit or \"#help;\" for help.]"

        self._tmp_line = ""
        self._first_line = 1
        self.line_num = 0

    def onecmd(self, line):
        """Every line is toplevel input, except the end of input."""
        if line == "EOF" and self.stdin.at_eof:
            return self.do_EOF(line)
        return self.default(line)

    def default(self, line):
        """Adds line to the pending input and executes every directive it completes."""
        self.line_num += 1
        if not self._tmp_line:
            self._first_line = self.line_num
        source = self._tmp_line + line + "\n"
        self._tmp_line = ""  # an error discards the pending input

        with self.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            try:
                stmts, rest = parse_toplevel(source, SH_FILE, self._first_line)
            except IncompleteInput:
                stmts, rest = [], source

            for stmt in stmts:
                result = self.sess.execute(True, self.ctx, stmt)
                if isinstance(result, Halt):
                    self.exit_code = result.code
                    return True
                self.ctx = result

            self._tmp_line = rest

        self.prompt = self.secondary_prompt if self._tmp_line else self._tmp_prompt
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return True

    def run(self):
        """Runs the loop until end of input or #quit. An interrupt only abandons the pending input. Returns the exit
        code.
        """
        intro = None
        while True:
            try:
                self.cmdloop(intro)
                return self.exit_code
            except KeyboardInterrupt:
                self.error_handler.interrupt()
                self._tmp_line = ""
                self.prompt = self._tmp_prompt
                intro = ""
