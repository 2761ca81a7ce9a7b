from errors import UnexpectedCharacter


DIGITS = "0123456789"

KEYWORDS = {
    "let": "LET",
}

# single-char operators; the value is the compound form when followed by '='
OPERATORS = {
    "+": ("PLUS", "PLUS_ASSIGN"),
    "-": ("MINUS", "MINUS_ASSIGN"),
    "*": ("STAR", "STAR_ASSIGN"),
    "/": ("SLASH", "SLASH_ASSIGN"),
}

PUNCTUATION = {
    "(": "LPAREN",
    ")": "RPAREN",
    "=": "ASSIGN",
    ":": "COLON",
}


class Token:
    def __init__(self, type, value=None, line=1, column=1, end=None):
        self.type = type
        self.value = value
        self.line = line
        self.column = column
        # last column covered by the token (inclusive)
        self.end = column if end is None else end

    def describe(self):
        if self.value is not None:
            return f"{self.type}({self.value})"
        return self.type

    def __repr__(self):
        return f"{self.describe()}@{self.line}:{self.column}"


class Lexer:
    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.current_char = text[0] if text else None
        self.line = 1
        self.column = 1

    def advance(self):
        # track line/column based on current_char before moving
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1
        if self.pos >= len(self.text):
            self.current_char = None
        else:
            self.current_char = self.text[self.pos]

    def peek(self):
        nxt = self.pos + 1
        if nxt >= len(self.text):
            return None
        return self.text[nxt]

    def read_comment(self):
        start_line, start_col = self.line, self.column
        self.advance()  # skip ';'
        result = ""
        while self.current_char is not None and self.current_char != "\n":
            result += self.current_char
            self.advance()
        return Token("COMMENT", result, line=start_line, column=start_col, end=start_col + len(result))

    def read_identifier(self):
        start_line, start_col = self.line, self.column
        result = ""
        while self.current_char and (self.current_char.isalnum() or self.current_char == "_"):
            result += self.current_char
            self.advance()

        end_col = start_col + len(result) - 1
        if result in KEYWORDS:
            return Token(KEYWORDS[result], line=start_line, column=start_col, end=end_col)
        return Token("IDENT", result, line=start_line, column=start_col, end=end_col)

    # NUMBER keeps its raw text; the parser converts it
    def read_number(self):
        start_line, start_col = self.line, self.column
        result = ""
        has_dot = False

        while self.current_char is not None and (self.current_char in DIGITS or self.current_char == "."):
            if self.current_char == ".":
                if has_dot:
                    break
                has_dot = True
            result += self.current_char
            self.advance()

        if self.current_char is not None and self.current_char in "eE":
            result += self.current_char
            self.advance()
            if self.current_char is not None and self.current_char in "+-":
                result += self.current_char
                self.advance()
            while self.current_char is not None and self.current_char in DIGITS:
                result += self.current_char
                self.advance()

        return Token("NUMBER", result, line=start_line, column=start_col, end=start_col + len(result) - 1)

    def get_next_token(self):
        while self.current_char is not None:

            if self.current_char == "\n":
                start_line, start_col = self.line, self.column
                self.advance()
                return Token("NEWLINE", line=start_line, column=start_col)

            if self.current_char.isspace():
                self.advance()
                continue

            if self.current_char == ";":
                return self.read_comment()

            if self.current_char.isalpha() or self.current_char == "_":
                return self.read_identifier()

            if self.current_char in DIGITS:
                return self.read_number()

            if self.current_char in OPERATORS:
                start_line, start_col = self.line, self.column
                plain, compound = OPERATORS[self.current_char]
                if self.peek() == "=":
                    self.advance()
                    self.advance()
                    return Token(compound, line=start_line, column=start_col, end=start_col + 1)
                self.advance()
                return Token(plain, line=start_line, column=start_col)

            if self.current_char in PUNCTUATION:
                start_line, start_col = self.line, self.column
                token_type = PUNCTUATION[self.current_char]
                self.advance()
                return Token(token_type, line=start_line, column=start_col)

            raise UnexpectedCharacter(self.current_char, self.line, self.column)

        return Token("EOF", line=self.line, column=self.column)

    def iter_tokens(self):
        # lazy stream; stops after yielding EOF
        while True:
            tok = self.get_next_token()
            yield tok
            if tok.type == "EOF":
                return

    def tokenize(self):
        return list(self.iter_tokens())


def tokenize(text):
    return Lexer(text).tokenize()
