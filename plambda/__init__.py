"""Toplevel for the untyped lambda calculus.

For reference:
- "Pure lambda calculus": λ-terms, their resolution to de Bruijn indices, reduction and printing (plambda/pure)
- "Toplevel language": directives terminated by ';' that declare, define and evaluate λ-terms (plambda/lang)

Basic program flow:
    1. Parser: tokenizes the input and builds a directive, whose λ-term is a surface syntax tree
    2. Desugaring: resolves the names of the λ-term against the current context
    3. Execution: normalizes the λ-term under the session's evaluation mode, or extends the context
"""

__version__ = "1.0"
