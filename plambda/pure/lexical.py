"""Pure lambda calculus tokenizer, syntax tree and parser.

The `pure` directory contains pure lambda calculus handling- not sufficient for the toplevel language, which adds
directives and definitions on top (see lang/lexical.py).

Formally, the surface syntax of a λ-term is

```
<λ-term> ::= <λ> <name>+ "." <λ-term>   ; "abstraction"
                                        ; - <λ> is any of λ, ^ or \
                                        ; - λx y.e is shorthand for λx.λy.e
                                        ; - abstraction bodies are greedy: λx.x y = λx.(x y)
           | <simple>+                  ; "application"
                                        ; - associating by left: a b c d = (((a b) c) d)
                                        ; - the last argument may be an unparenthesized abstraction
<simple> ::= <name> | "(" <λ-term> ")"
```

Names are made of letters, digits, underscores and primes. Comments are either `--` until the end of the line or
`(* ... *)`, which may be nested.
"""

import re
from dataclasses import dataclass

from plambda.lang.error import Location, ParseError


class IncompleteInput(ParseError):
    """Source ended in the middle of a token (for example inside a comment). The shell asks for more input."""


TOKENS = [
    ("LAMBDA", r"λ|\^|\\"),
    ("DEFINE", r":="),
    ("PERIOD", r"\."),
    ("LPAREN", r"\("),
    ("RPAREN", r"\)"),
    ("SEMI", r";"),
    ("DIRECTIVE", r"#[A-Za-z_]+"),
    ("NAME", r"[A-Za-z0-9_']+"),
]
TOKEN_RE = re.compile("|".join(f"(?P<{kind}>{pattern})" for kind, pattern in TOKENS))


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    loc: Location
    end: int  # offset just past this token in the tokenized source


def tokenize(source, path="<in>", first_line=1):
    """Splits source into Tokens. Raises ParseError on an unrecognised symbol, IncompleteInput on an unterminated
    comment.
    """
    lines = source.split("\n")
    tokens = []

    pos = 0
    line = 0
    line_start = 0

    def loc(at):
        return Location(path, first_line + line, at - line_start + 1, lines[line])

    while pos < len(source):
        char = source[pos]

        if char == "\n":
            pos += 1
            line += 1
            line_start = pos

        elif char.isspace():
            pos += 1

        elif source.startswith("--", pos):
            newline = source.find("\n", pos)
            pos = len(source) if newline == -1 else newline

        elif source.startswith("(*", pos):
            start = loc(pos)
            depth = 0
            while True:
                if pos >= len(source):
                    raise IncompleteInput("unterminated comment", "(*", loc=start)
                elif source.startswith("(*", pos):
                    depth += 1
                    pos += 2
                elif source.startswith("*)", pos):
                    depth -= 1
                    pos += 2
                    if depth == 0:
                        break
                elif source[pos] == "\n":
                    pos += 1
                    line += 1
                    line_start = pos
                else:
                    pos += 1

        else:
            match = TOKEN_RE.match(source, pos)
            if match is None:
                raise ParseError("unrecognised symbol '{}'", char, loc=loc(pos))
            tokens.append(Token(match.lastgroup, match.group(), loc(pos), match.end()))
            pos = match.end()

    return tokens


class LambdaTerm:
    """Surface syntax tree node: variable, abstraction, or application. Names are still names here, see
    pure/desugar.py for resolution.
    """

    def __init__(self, loc=None):
        self.loc = loc
        self.nodes = []
        self._cls = type(self).__name__

    @property
    def expr(self):
        """Readable form of this term."""
        raise NotImplementedError()

    @property
    def tokenizable(self):
        """Whether or not this term has sub nodes (needs parentheses as an argument)."""
        return bool(self.nodes)

    def __repr__(self):
        return f"{self._cls}('{self.expr}')"

    def __str__(self):
        return self.expr

    def __eq__(self, other):
        return isinstance(other, type(self)) and self.expr == other.expr

    def __hash__(self):
        return hash(self.expr)


class Variable(LambdaTerm):

    def __init__(self, name, loc=None):
        super().__init__(loc)
        self.name = name

    @property
    def expr(self):
        return self.name


class Abstraction(LambdaTerm):
    """λ args. body, with args a non-empty list of names."""

    def __init__(self, args, body, loc=None):
        super().__init__(loc)
        self.args = list(args)
        self.body = body
        self.nodes = [body]

    @property
    def expr(self):
        return f"λ{' '.join(self.args)}. {self.body.expr}"


class Application(LambdaTerm):

    def __init__(self, left, right, loc=None):
        super().__init__(loc)
        self.left = left
        self.right = right
        self.nodes = [left, right]

    @property
    def expr(self):
        left = f"({self.left.expr})" if isinstance(self.left, Abstraction) else self.left.expr
        right = f"({self.right.expr})" if self.right.tokenizable else self.right.expr
        return f"{left} {right}"


class TermParser:
    """Recursive descent parser over the tokens of a single λ-term. end_loc is reported when the tokens run out."""

    def __init__(self, tokens, end_loc=None):
        self.tokens = list(tokens)
        self.end_loc = end_loc
        self.pos = 0

    def peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def advance(self):
        token = self.peek()
        if token is None:
            raise ParseError("unexpected end of λ-term", loc=self.end_loc)
        self.pos += 1
        return token

    def expect(self, kind, what):
        token = self.advance()
        if token.kind != kind:
            raise ParseError("expected {} but found '{}'", [what, token.text], loc=token.loc, width=len(token.text))
        return token

    def parse(self):
        """Parses every token as one λ-term."""
        term = self.term()
        token = self.peek()
        if token is not None:
            raise ParseError("unexpected '{}'", token.text, loc=token.loc)
        return term

    def term(self):
        token = self.peek()
        if token is not None and token.kind == "LAMBDA":
            self.advance()
            args = []
            while self.peek() is not None and self.peek().kind == "NAME":
                args.append(self.advance().text)
            if not args:
                raise ParseError("'{}' must bind at least one variable", token.text, loc=token.loc)
            self.expect("PERIOD", "'.'")
            return Abstraction(args, self.term(), token.loc)
        return self.application()

    def application(self):
        term = self.simple()
        while self.peek() is not None and self.peek().kind in ("NAME", "LPAREN", "LAMBDA"):
            if self.peek().kind == "LAMBDA":
                return Application(term, self.term(), term.loc)
            term = Application(term, self.simple(), term.loc)
        return term

    def simple(self):
        token = self.advance()
        if token.kind == "NAME":
            return Variable(token.text, token.loc)
        elif token.kind == "LPAREN":
            term = self.term()
            self.expect("RPAREN", "')'")
            return term
        raise ParseError("unexpected '{}'", token.text, loc=token.loc)


def parse_term(source, path="<in>"):
    """Parses source as a single λ-term (no terminating ';')."""
    tokens = tokenize(source, path)
    end_loc = tokens[-1].loc if tokens else Location(path, 1, 1, source)
    return TermParser(tokens, end_loc).parse()
