"""Command-line entry point of the lambda toplevel: wraps itself with a line-editing wrapper, loads the files given on
the command line and then runs the interactive shell. Called from the lambda executable script.
"""

import argparse
import platform
import sys

from plambda import __version__
from plambda.lang import launcher
from plambda.lang.error import ErrorHandler
from plambda.lang.session import Halt, Session
from plambda.lang.shell import Shell

USAGE = "lambda [option] ... [file] ..."


class AddFile(argparse.Action):
    """Appends files to namespace.files as (path, interactive) pairs, keeping the command-line order of -l and bare
    files. Bare files are loaded interactively and disable the shell.
    """

    def __init__(self, *args, interactive=False, **kwargs):
        super().__init__(*args, **kwargs)
        self.interactive = interactive

    def __call__(self, parser, namespace, values, option_string=None):
        if isinstance(values, str):
            values = [values]
        if not values:
            return

        files = list(getattr(namespace, self.dest, None) or [])
        files.extend((path, self.interactive) for path in values)
        setattr(namespace, self.dest, files)

        if self.interactive:
            namespace.shell = False


def build_parser():
    parser = argparse.ArgumentParser(prog="lambda", usage=USAGE)
    parser.set_defaults(wrappers=list(launcher.WRAPPERS))

    parser.add_argument("--wrapper", metavar="PROGRAM", dest="wrappers", type=lambda program: [program],
                        help="specify a command-line wrapper to be used (such as rlwrap or ledit)")
    parser.add_argument(launcher.NO_WRAPPER, dest="wrappers", action="store_const", const=None,
                        help="do not use a command-line wrapper")
    parser.add_argument("-v", action="version", version=f"%(prog)s {__version__} ({platform.system()})",
                        help="print version information and exit")
    parser.add_argument("-V", metavar="INT", dest="verbosity", type=int, default=2, help="set verbosity level")
    parser.add_argument("-n", dest="shell", action="store_false", help="do not run the interactive toplevel")
    parser.add_argument("-l", metavar="FILE", dest="files", action=AddFile, interactive=False,
                        help="load FILE into the initial environment")
    parser.add_argument("files", metavar="file", nargs="*", action=AddFile, interactive=True,
                        help="file to load and run (disables the interactive toplevel)")
    return parser


def parse_args(argv):
    """Parses argv. Bare files may appear anywhere, so whatever a pass leaves over is parsed again."""
    parser = build_parser()
    args, rest = parser.parse_known_args(argv)
    while rest:
        if rest[0].startswith("-"):
            parser.error(f"unrecognized arguments: {' '.join(rest)}")
        args, rest = parser.parse_known_args(rest, args)
    return args


def main(argv=None):
    """Runs the lambda toplevel. Returns the exit code."""
    if argv is None:
        argv = sys.argv[1:]
    args = parse_args(argv)

    if args.shell:
        launcher.wrap(args.wrappers, argv)

    error_handler = ErrorHandler(fatal=True, verbosity=args.verbosity)
    sess = Session(error_handler=error_handler)

    with error_handler:
        ctx = sess.load_files(args.files or [])

    if isinstance(ctx, Halt):
        return ctx.code
    if args.shell:
        return Shell(sess, ctx).run()
    return 0
