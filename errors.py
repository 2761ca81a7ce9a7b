class ArithError(Exception):
    pass


# ---------- LEXING ----------

class TokenizerError(ArithError):
    pass


class UnexpectedCharacter(TokenizerError):
    def __init__(self, found: str, line: int, col: int):
        super().__init__(f"Unexpected character '{found}' at line {line}, col {col}")
        self.found = found
        self.line = line
        self.col = col


# ---------- PARSING ----------

class ParserError(ArithError):
    # line/col are relative to the logical statement handed to the lexer
    def __init__(self, message: str, line: int, col: int):
        super().__init__(message)
        self.line = line
        self.col = col


class UnexpectedToken(ParserError):
    def __init__(self, found: str, line: int, col: int):
        super().__init__(f"Unexpected token: found {found} at line {line}, col {col}", line, col)
        self.found = found


class UnexpectedEOF(ParserError):
    def __init__(self, line: int, col: int):
        super().__init__(f"Unexpected end of input at line {line}, col {col}", line, col)


class InvalidNumber(ParserError):
    def __init__(self, value: str, line: int, col: int):
        super().__init__(f"Invalid number: {value} at line {line}, col {col}", line, col)
        self.value = value


class NestingTooDeep(ParserError):
    def __init__(self, line: int, col: int):
        super().__init__(f"Expression nested too deeply at line {line}, col {col}", line, col)


class TokenizerFailure(ParserError):
    """A lexical error that surfaced while the parser was pulling tokens."""

    def __init__(self, message: str, line: int, col: int):
        super().__init__(f"Tokenizer error: {message} at line {line}, col {col}", line, col)
        self.message = message

    @classmethod
    def wrap(cls, err: UnexpectedCharacter) -> "TokenizerFailure":
        return cls(f"Unexpected character '{err.found}'", err.line, err.col)


# ---------- COMPILING ----------

class CompileError(ArithError):
    pass


class UnsupportedOperator(CompileError):
    def __init__(self, description: str):
        super().__init__(f"unsupported operator during compilation: {description}")
        self.description = description


# ---------- EXECUTING ----------

class ExecError(ArithError):
    pass


class StackUnderflow(ExecError):
    def __init__(self, instr: str):
        super().__init__(f"stack underflow while executing instruction '{instr}'")
        self.instr = instr


class DivisionByZero(ExecError):
    def __init__(self):
        super().__init__("division by zero")


class NoResult(ExecError):
    def __init__(self):
        super().__init__("execution finished with no result on the stack")


class ExecFailure(ExecError):
    def __init__(self, message: str):
        super().__init__(f"execution error: {message}")
        self.message = message


# ---------- PER-STATEMENT ENVELOPE ----------

class EvalError(ArithError):
    kind = "eval"

    def __init__(self, error: ArithError, source: str):
        super().__init__(str(error))
        self.error = error
        self.source = source


class EvalParseError(EvalError):
    kind = "parse"

    def __init__(self, error: ParserError, source: str, line_offset: int):
        super().__init__(error, source)
        self.line_offset = line_offset

    @property
    def absolute_line(self) -> int:
        return self.line_offset + self.error.line - 1

    def format(self) -> str:
        line_no = str(self.absolute_line)
        pointer = " " * max(self.error.col - 1, 0) + "^"
        return "\n".join([
            f"Error: {self.error}",
            f"{line_no} | {self.source}",
            f"{' ' * len(line_no)} | {pointer}",
        ])

    def __str__(self) -> str:
        return self.format()


class EvalCompileError(EvalError):
    kind = "compile"

    def __str__(self) -> str:
        return f"compile error: {self.error} in input: {self.source}"


class EvalExecError(EvalError):
    kind = "exec"

    def __str__(self) -> str:
        return f"runtime error: {self.error} in input: {self.source}"
