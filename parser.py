from ast_nodes import (
    ExprStatement, Let, Assign, CompoundAssign,
    Number, Var, Unary, Binary, Empty, EmptyParen,
)
from errors import (
    TokenizerError, UnexpectedToken, UnexpectedEOF, InvalidNumber, TokenizerFailure,
)


# binding power of explicit binary operators (higher binds tighter)
BINARY_PRECEDENCE = {
    "PLUS": 1,
    "MINUS": 1,
    "STAR": 2,
    "SLASH": 2,
}

# a primary starting right after an operand means implicit multiplication
IMPLICIT_MUL_START = ("LPAREN", "NUMBER", "IDENT")
IMPLICIT_MUL_PRECEDENCE = BINARY_PRECEDENCE["STAR"]

COMPOUND_ASSIGN = {
    "PLUS_ASSIGN": "+=",
    "MINUS_ASSIGN": "-=",
    "STAR_ASSIGN": "*=",
    "SLASH_ASSIGN": "/=",
}

# tokens the parser never sees
SKIPPED = ("COMMENT", "NEWLINE")


class Parser:
    def __init__(self, tokens):
        # tokens: a list from Lexer.tokenize() or a lazy Lexer.iter_tokens()
        self.tokens = iter(tokens)
        self.last_token = None
        self.current_token = self._pull()
        self.next_token = self._pull()

    def _pull(self):
        try:
            while True:
                tok = next(self.tokens, None)
                if tok is None:
                    # exhausted: keep handing out the final EOF
                    return self.last_token
                if tok.type not in SKIPPED:
                    self.last_token = tok
                    return tok
        except TokenizerError as e:
            raise TokenizerFailure.wrap(e) from e

    def advance(self):
        self.current_token = self.next_token
        self.next_token = self._pull()

    # move to next token, but only if it matches what we expect
    def eat(self, token_type):
        if self.current_token.type != token_type:
            self.unexpected()
        tok = self.current_token
        self.advance()
        return tok

    def unexpected(self, tok=None):
        tok = tok or self.current_token
        raise UnexpectedToken(tok.describe(), tok.line, tok.column)

    def at_end(self):
        return self.current_token.type == "EOF"

    # ---------- TOP LEVEL ----------
    def parse(self):
        if self.at_end():
            return ExprStatement(Empty())
        return self.statement()

    # ---------- STATEMENTS ----------
    def statement(self):
        tok = self.current_token

        if tok.type == "LET":
            return self.let_statement()
        if tok.type == "IDENT" and self.next_token.type == "ASSIGN":
            return self.assign_statement()
        if tok.type == "IDENT" and self.next_token.type in COMPOUND_ASSIGN:
            return self.compound_assign_statement()
        return ExprStatement(self.expr())

    # let NAME [: TYPE] = expr
    def let_statement(self):
        self.eat("LET")
        name = self.eat("IDENT").value

        type_name = None
        if self.current_token.type == "COLON":
            self.eat("COLON")
            type_name = self.eat("IDENT").value

        self.eat("ASSIGN")
        return Let(name, type_name, self.expr())

    def assign_statement(self):
        name = self.eat("IDENT").value
        self.eat("ASSIGN")
        return Assign(name, self.expr())

    def compound_assign_statement(self):
        name = self.eat("IDENT").value
        op = COMPOUND_ASSIGN[self.current_token.type]
        self.advance()
        return CompoundAssign(name, op, self.expr())

    # ---------- EXPRESSIONS ----------
    # precedence climbing over binary operators; everything left-associative
    def expr(self, min_prec=1):
        node = self.unary()

        while True:
            tok = self.current_token
            if tok.type in BINARY_PRECEDENCE:
                prec = BINARY_PRECEDENCE[tok.type]
                implicit = False
            elif tok.type in IMPLICIT_MUL_START:
                prec = IMPLICIT_MUL_PRECEDENCE
                implicit = True
            else:
                break

            if prec < min_prec:
                break

            if implicit:
                op = "*"
            else:
                op = self.op_token_to_text(tok.type)
                self.advance()

            right = self.expr(prec + 1)
            node = Binary(node, op, right)

        return node

    # unary -> (+|-) unary | primary
    def unary(self):
        tok = self.current_token
        if tok.type in ("PLUS", "MINUS"):
            self.advance()
            return Unary(self.op_token_to_text(tok.type), self.unary())
        return self.primary()

    # primary -> NUMBER | IDENT | ( ) | ( expr )
    def primary(self):
        tok = self.current_token

        if tok.type == "NUMBER":
            self.advance()
            try:
                value = float(tok.value)
            except ValueError:
                raise InvalidNumber(tok.value, tok.line, tok.column) from None
            return Number(value)

        if tok.type == "IDENT":
            self.advance()
            return Var(tok.value)

        if tok.type == "LPAREN":
            self.advance()
            if self.current_token.type == "RPAREN":
                self.advance()
                return EmptyParen()
            node = self.expr()
            self.eat("RPAREN")
            return node

        if tok.type == "EOF":
            raise UnexpectedEOF(tok.line, tok.column)

        self.unexpected(tok)

    def op_token_to_text(self, op_type):
        return {
            "PLUS": "+",
            "MINUS": "-",
            "STAR": "*",
            "SLASH": "/",
        }[op_type]


def parse(tokens):
    return Parser(tokens).parse()
