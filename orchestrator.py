"""Line-oriented driver: raw text in, one result or error per logical statement out.

Each logical statement goes lexer -> parser -> compiler -> VM on its own; a
failure is recorded and the next statement still runs against the same VM.
"""

import logging

from ast_nodes import Let, Assign, CompoundAssign, Binary, Var
from compiler import Compiler
from errors import (
    ParserError, UnexpectedCharacter, UnexpectedEOF, NestingTooDeep, TokenizerFailure,
    CompileError, ExecError,
    EvalParseError, EvalCompileError, EvalExecError,
)
from lexer import Lexer
from parser import Parser
from vm import VM


log = logging.getLogger(__name__)


def strip_comment(line: str) -> str:
    return line.split(";", 1)[0]


def split_statements(source: str):
    """Join continuation lines and drop comments/blanks.

    Returns (statements, pending): statements is a list of (text, first_line)
    pairs; pending is the same kind of pair for a buffer still open at end of
    input (last line ended with a backslash), or None.
    """
    statements = []
    buffer = ""
    start_line = 0

    # only "\n" (with an optional "\r" before it) ends a line; other
    # separators such as form feed stay inside the statement as whitespace
    lines = source.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    for line_no, raw_line in enumerate(lines, start=1):
        if raw_line.endswith("\r"):
            raw_line = raw_line[:-1]
        content = strip_comment(raw_line).strip()

        if not buffer:
            start_line = line_no

        if content.endswith("\\"):
            buffer += content[:-1].strip() + " "
            continue

        buffer += content
        if buffer.strip():
            statements.append((buffer.strip(), start_line))
        buffer = ""

    pending = None
    if buffer.strip():
        pending = (buffer.strip(), start_line)
    return statements, pending


def parse_statement(text: str):
    try:
        tokens = Lexer(text).tokenize()
    except UnexpectedCharacter as e:
        log.debug("tokenizer error at line %d, col %d", e.line, e.col)
        raise TokenizerFailure.wrap(e) from e
    log.debug("%d tokens", len(tokens))

    parser = Parser(tokens)
    try:
        stmt = parser.parse()
    except RecursionError:
        tok = parser.current_token
        raise NestingTooDeep(tok.line, tok.column) from None
    if not parser.at_end():
        parser.unexpected()
    return stmt


def run_statement(stmt, vm: VM):
    """Run one parsed statement. Returns the value for expressions, else None."""
    compiler = Compiler()

    if isinstance(stmt, Let):
        vm.define(stmt.name, vm.execute(compiler.compile(stmt.value)))
        return None

    if isinstance(stmt, Assign):
        # existence is checked before the value is evaluated
        vm.require_defined(stmt.name)
        vm.assign(stmt.name, vm.execute(compiler.compile(stmt.value)))
        return None

    if isinstance(stmt, CompoundAssign):
        vm.require_defined(stmt.name)
        combined = Binary(Var(stmt.name), stmt.binary_op, stmt.value)
        vm.assign(stmt.name, vm.execute(compiler.compile(combined)))
        return None

    program = compiler.compile(stmt.expr)
    log.debug("compiled %d instructions", len(program))
    if not program.instructions:
        return None
    return vm.execute(program)


def evaluate_lines(source: str, vm: VM | None = None):
    """Evaluate every logical statement in source.

    Returns a list holding, per statement that produced something, either a
    (value, statement_text) tuple or an EvalError.
    """
    if vm is None:
        vm = VM()

    statements, pending = split_statements(source)
    results = []

    for text, line_offset in statements:
        log.debug("statement at line %d: %r", line_offset, text)
        try:
            stmt = parse_statement(text)
            value = run_statement(stmt, vm)
        except ParserError as e:
            results.append(EvalParseError(e, text, line_offset))
            continue
        except CompileError as e:
            results.append(EvalCompileError(e, text))
            continue
        except ExecError as e:
            results.append(EvalExecError(e, text))
            continue

        if value is not None:
            results.append((value, text))

    if pending is not None:
        text, line_offset = pending
        log.debug("unterminated continuation at line %d: %r", line_offset, text)
        results.append(EvalParseError(UnexpectedEOF(1, len(text) + 1), text, line_offset))

    return results
