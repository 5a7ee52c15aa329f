import io
import unittest
from unittest import mock

from plambda.lang.context import Context
from plambda.lang.error import ErrorHandler
from plambda.lang.session import Session
from plambda.lang.shell import Shell


class ShellTestCase(unittest.TestCase):

    def make_shell(self, stdin, ctx=None):
        self.out = io.StringIO()
        self.err = io.StringIO()
        sess = Session(error_handler=ErrorHandler(stream=self.err), stdout=self.out)

        return Shell(sess, ctx if ctx is not None else Context(), stdin=stdin, stdout=self.out)

    def run_shell(self, source, ctx=None):
        shell = self.make_shell(io.StringIO(source), ctx)
        return shell, shell.run()

    def test_session(self):
        shell, code = self.run_shell("#constant x y;\nid := λz. z;\nid x;\n#context;\n")

        self.assertEqual(0, code)
        self.assertEqual(["id", "y", "x"], shell.ctx.names)
        self.assertIn("    = x\n", self.out.getvalue())
        self.assertIn("#constant x;\n#constant y;\nid := λz. z;\n", self.out.getvalue())
        self.assertEqual("", self.err.getvalue())

    def test_banner(self):
        __, code = self.run_shell("")
        self.assertEqual(0, code)
        self.assertTrue(self.out.getvalue().startswith("lambda "))
        self.assertIn("\"#help;\" for help.", self.out.getvalue())

    def test_syntax_error_keeps_context(self):
        ctx = Context().add_constant("c")
        shell, code = self.run_shell("f (;\n#constant x;\n", ctx)

        self.assertEqual(0, code)
        self.assertIn("syntax error", self.err.getvalue())
        self.assertEqual(["x", "c"], shell.ctx.names)

    def test_errors_keep_context(self):
        cases = {
            "#constant x;\n#constant y x;\n": ("typing error", ["x"]),
            "#constant x;\nx := λy. y;\n": ("typing error", ["x"]),
            "#constant x;\nf x;\n": ("unbound name", ["x"]),
            "#constant x;\n(λw. w w) (λw. w w);\n": ("evaluation error", ["x"]),
            "#constant x;\n#nope;\n": ("syntax error", ["x"]),
        }
        for case, (kind, names) in cases.items():
            shell, code = self.run_shell(case)
            self.assertEqual(0, code, case)
            self.assertIn(kind, self.err.getvalue(), case)
            self.assertEqual(names, shell.ctx.names, case)

    def test_line_continuation(self):
        shell = self.make_shell(io.StringIO())
        shell.default("id :=")
        self.assertEqual(shell.secondary_prompt, shell.prompt)
        self.assertEqual(0, len(shell.ctx))

        shell.default("  λx. x")
        shell.default(";")
        self.assertEqual(shell._tmp_prompt, shell.prompt)
        self.assertEqual(["id"], shell.ctx.names)
        self.assertIn("id is defined.", self.out.getvalue())

    def test_continued_comment(self):
        shell, __ = self.run_shell("(* a comment\nover lines *) #constant x;\n")
        self.assertEqual(["x"], shell.ctx.names)
        self.assertEqual("", self.err.getvalue())

    def test_error_location(self):
        self.run_shell("#constant x;\n\n  #constant x;\n")
        self.assertIn("<in>:3:3", self.err.getvalue())
        self.assertIn("already exists", self.err.getvalue())

    def test_error_discards_pending_input(self):
        shell, __ = self.run_shell("#constant x; f (;\n#context;\n")
        self.assertEqual([], shell.ctx.names)
        self.assertEqual("", shell._tmp_line)

    def test_several_directives_on_a_line(self):
        shell, __ = self.run_shell("#constant a; #constant b; #eager;\n")
        self.assertEqual(["b", "a"], shell.ctx.names)
        self.assertTrue(shell.sess.mode.eager)

    def test_eof_is_a_name(self):
        shell, code = self.run_shell("#constant EOF;\nid :=\nEOF\n;\n#constant after;\n")
        self.assertEqual(0, code)
        self.assertEqual(["after", "id", "EOF"], shell.ctx.names)
        self.assertEqual("", self.err.getvalue())

    def test_empty_lines(self):
        shell, code = self.run_shell("\n#constant x;\n\n\n#constant y;\n")
        self.assertEqual(0, code)
        self.assertEqual(["y", "x"], shell.ctx.names)
        self.assertEqual(5, shell.line_num)

    def test_quit(self):
        shell, code = self.run_shell("#constant x;\n#quit;\n#constant y;\n")
        self.assertEqual(0, code)
        self.assertEqual(["x"], shell.ctx.names)

    def test_interrupt_while_executing(self):
        shell = self.make_shell(io.StringIO("#constant x;\n#constant y;\n"))
        shell.sess.execute = mock.Mock(side_effect=[KeyboardInterrupt(), Context().add_constant("y")])

        self.assertEqual(0, shell.run())
        self.assertIn("Interrupted.", self.err.getvalue())
        self.assertEqual(["y"], shell.ctx.names)

    def test_interrupt_while_reading(self):
        stdin = mock.Mock()
        stdin.readline.side_effect = [KeyboardInterrupt(), "#constant x;\n", ""]
        shell = self.make_shell(stdin)

        self.assertEqual(0, shell.run())
        self.assertIn("Interrupted.", self.err.getvalue())
        self.assertEqual(["x"], shell.ctx.names)


if __name__ == '__main__':
    unittest.main()
