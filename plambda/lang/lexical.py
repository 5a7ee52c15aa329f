"""Lexical analysis for the toplevel language, a shallow wrapper around pure lambda calculus. Every directive is
terminated by ';'.

All grammar can be loosely defined as follows:

```
<expr_stmt>     ::= <λ-term>                ; evaluate and print the λ-term
<define_stmt>   ::= <name> ":=" <λ-term>    ; bind a name to a λ-term
<constant_stmt> ::= "#constant" <name>+     ; declare names with no value
<eager_stmt>    ::= "#eager" | "#lazy"
<deep_stmt>     ::= "#deep" | "#shallow"
<context_stmt>  ::= "#context"
<help_stmt>     ::= "#help"
<quit_stmt>     ::= "#quit"
```

For λ-term grammar and comments, see pure/lexical.py.
"""

from abc import ABC, abstractmethod

from plambda.lang.error import ParseError
from plambda.pure.lexical import TermParser, tokenize

SH_FILE = "<in>"  # command-line interpreter filename


class Grammar(ABC):
    """Superclass representing any toplevel directive. tokens exclude the terminating ';', whose location is end_loc.
    """

    def __init__(self, tokens, end_loc):
        """Assumes check_grammar has been run."""
        self.tokens = list(tokens)
        self.loc = self.tokens[0].loc if self.tokens else end_loc
        self.end_loc = end_loc
        self._cls = type(self).__name__

    @staticmethod
    @abstractmethod
    def check_grammar(tokens):
        """This method should check the tokens' top-level grammar and return whether or not they are this directive.
        It should also raise a ParseError if they look like this directive but are syntactically invalid.
        """

    @classmethod
    def infer(cls, tokens, end_loc):
        """Infers the type of the directive and returns an object of the correct grammar subclass."""
        for subclass in cls.__subclasses__():
            if subclass.check_grammar(tokens):
                return subclass(tokens, end_loc)

        token = tokens[0]
        raise ParseError("unknown directive '{}'", token.text, loc=token.loc)

    @property
    def expr(self):
        return " ".join(token.text for token in self.tokens)

    def __repr__(self):
        return f"{self._cls}('{self.expr}')"

    def __str__(self):
        return self.expr

    def __eq__(self, other):
        return isinstance(other, type(self)) and other.expr == self.expr

    def __hash__(self):
        return hash(self.expr)


def _is_directive(tokens, *names):
    return bool(tokens) and tokens[0].kind == "DIRECTIVE" and tokens[0].text in names


def _takes_no_arguments(tokens):
    if len(tokens) > 1:
        raise ParseError("'{}' takes no arguments", tokens[0].text, loc=tokens[1].loc)
    return True


class ContextStmt(Grammar):
    """#context: print the current declarations."""

    @staticmethod
    def check_grammar(tokens):
        return _is_directive(tokens, "#context") and _takes_no_arguments(tokens)


class EagerStmt(Grammar):
    """#eager / #lazy: evaluation strategy."""

    def __init__(self, tokens, end_loc):
        super().__init__(tokens, end_loc)
        self.value = self.tokens[0].text == "#eager"

    @staticmethod
    def check_grammar(tokens):
        return _is_directive(tokens, "#eager", "#lazy") and _takes_no_arguments(tokens)


class DeepStmt(Grammar):
    """#deep / #shallow: whether to evaluate inside abstractions."""

    def __init__(self, tokens, end_loc):
        super().__init__(tokens, end_loc)
        self.value = self.tokens[0].text == "#deep"

    @staticmethod
    def check_grammar(tokens):
        return _is_directive(tokens, "#deep", "#shallow") and _takes_no_arguments(tokens)


class ConstantStmt(Grammar):
    """#constant x ... y: declare names with no value."""

    def __init__(self, tokens, end_loc):
        super().__init__(tokens, end_loc)
        self.names = [token.text for token in self.tokens[1:]]

    @staticmethod
    def check_grammar(tokens):
        if not _is_directive(tokens, "#constant"):
            return False

        if len(tokens) == 1:
            raise ParseError("#constant expects at least one name", loc=tokens[0].loc, width=len("#constant"))
        for token in tokens[1:]:
            if token.kind != "NAME":
                raise ParseError("'{}' is not a valid name", token.text, loc=token.loc)
        return True


class HelpStmt(Grammar):

    @staticmethod
    def check_grammar(tokens):
        return _is_directive(tokens, "#help") and _takes_no_arguments(tokens)


class QuitStmt(Grammar):

    @staticmethod
    def check_grammar(tokens):
        return _is_directive(tokens, "#quit") and _takes_no_arguments(tokens)


class DefineStmt(Grammar):
    """<name> := <λ-term>"""

    def __init__(self, tokens, end_loc):
        super().__init__(tokens, end_loc)
        self.name = self.tokens[0].text
        self.term = TermParser(self.tokens[2:], end_loc).parse()

    @staticmethod
    def check_grammar(tokens):
        return len(tokens) >= 2 and tokens[0].kind == "NAME" and tokens[1].kind == "DEFINE"


class ExprStmt(Grammar):
    """<λ-term>: evaluate. Must stay the last subclass, it accepts anything that is not a directive."""

    def __init__(self, tokens, end_loc):
        super().__init__(tokens, end_loc)
        self.term = TermParser(self.tokens, end_loc).parse()

    @staticmethod
    def check_grammar(tokens):
        return bool(tokens) and tokens[0].kind != "DIRECTIVE"


def split_directives(tokens):
    """Groups tokens into directives. Returns a list of Grammar objects and the tokens after the last ';'. Empty
    directives are skipped.
    """
    stmts = []
    pending = []
    for token in tokens:
        if token.kind == "SEMI":
            if pending:
                stmts.append(Grammar.infer(pending, token.loc))
            pending = []
        else:
            pending.append(token)
    return stmts, pending


def parse_toplevel(source, path=SH_FILE, first_line=1):
    """Parses every complete directive in source. Returns the directives and the unterminated remainder of source
    ("" if nothing but whitespace and comments follows the last ';').
    """
    tokens = tokenize(source, path, first_line)
    stmts, pending = split_directives(tokens)
    if not pending:
        return stmts, ""

    consumed = 0
    for token in tokens:
        if token.kind == "SEMI":
            consumed = token.end
    return stmts, source[consumed:]


def parse_file(path):
    """Parses the file at path into a list of directives. Every directive must be terminated by ';'."""
    try:
        with open(path, "r", encoding="utf-8") as file:
            source = file.read()
    except OSError:
        raise ParseError("'{}' could not be opened", path, diagnosis=False)

    stmts, pending = split_directives(tokenize(source, path))
    if pending:
        raise ParseError("unexpected end of file, missing ';' after '{}'", pending[-1].text, loc=pending[-1].loc)
    return stmts
