"""
SimpleLang AST Builder

Parses one line of source with a lark LALR grammar and turns the parse tree
into the statement AST.
"""

from lark import Lark, Transformer, Token
from lark.exceptions import UnexpectedInput, UnexpectedCharacters, UnexpectedEOF, VisitError

from ast_nodes import *
from errors import ParseError


MAX_NUMBER = 2 ** 32 - 1

GRAMMAR = r"""
?start: stmt

stmt: IDENTIFIER "=" expr          -> assign
    | "if" expr "then" stmt        -> if_stmt
    | "print" expr                 -> print_stmt

// At most one comparison; `a == b == c` does not parse
?expr: addsub "==" addsub          -> comp
     | addsub

?addsub: term
       | addsub "+" term           -> add
       | addsub "-" term           -> sub

?term: IDENTIFIER                  -> identifier
     | NUMBER                      -> number
     | "(" expr ")"

IDENTIFIER: /[a-zA-Z][a-zA-Z0-9]*/
NUMBER: /[0-9]+/

%import common.WS_INLINE
%ignore WS_INLINE
"""


class ASTBuilder(Transformer):
    """Converts a lark parse tree to SimpleLang AST"""

    # ========================================================================
    # Statements
    # ========================================================================

    def assign(self, children) -> Assign:
        name, value = children
        return Assign(str(name), value)

    def if_stmt(self, children) -> If:
        condition, body = children
        return If(condition, body)

    def print_stmt(self, children) -> Print:
        (value,) = children
        return Print(value)

    # ========================================================================
    # Expressions
    # ========================================================================

    def comp(self, children) -> Comp:
        left, right = children
        return Comp(left, right)

    def add(self, children) -> Add:
        left, right = children
        return Add(left, right)

    def sub(self, children) -> Sub:
        left, right = children
        return Sub(left, right)

    def identifier(self, children) -> Identifier:
        (token,) = children
        return Identifier(str(token))

    def number(self, children) -> Number:
        (token,) = children
        value = int(token)
        if value > MAX_NUMBER:
            raise ParseError(f"number {token} does not fit in 32 bits",
                             token.line, token.column)
        return Number(value)


_parser = Lark(GRAMMAR, parser="lalr", lexer="basic", propagate_positions=True)


def _describe(error: UnexpectedInput) -> str:
    if isinstance(error, UnexpectedEOF):
        return "unexpected end of input"
    if isinstance(error, UnexpectedCharacters):
        return f"unexpected character {error.char!r}"
    token = getattr(error, "token", None)
    if isinstance(token, Token):
        if token.type == "$END":
            return "unexpected end of input"
        return f"unexpected {token.value!r}"
    return "invalid syntax"


def parse_tree(source: str):
    """Parse one statement into a lark tree (no AST conversion)."""
    try:
        return _parser.parse(source.strip())
    except UnexpectedInput as e:
        raise ParseError(_describe(e), e.line, e.column) from None


def parse_statement(source: str) -> Stmt:
    """Parse one line of SimpleLang source into a statement."""
    tree = parse_tree(source)
    try:
        return ASTBuilder().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, ParseError):
            raise e.orig_exc from None
        raise
