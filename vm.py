import logging

from errors import StackUnderflow, DivisionByZero, NoResult, ExecFailure


log = logging.getLogger(__name__)


class VM:
    def __init__(self, env=None):
        self.stack = []                                 # stack for values
        self.globals = {} if env is None else env       # the session's variables
        self.ip = 0                                     # instruction pointer

    # ---------- ENVIRONMENT ----------
    def lookup(self, name: str) -> float:
        if name not in self.globals:
            raise ExecFailure(f"undefined variable: {name}")
        return self.globals[name]

    def define(self, name: str, value: float):
        # redeclaration simply rebinds
        self.globals[name] = value

    def assign(self, name: str, value: float):
        self.require_defined(name)
        self.globals[name] = value

    def require_defined(self, name: str):
        if name not in self.globals:
            raise ExecFailure(f"undefined variable: {name}")

    # ---------- EXECUTION ----------
    def pop(self, opcode: str) -> float:
        if not self.stack:
            raise StackUnderflow(opcode.capitalize())
        return self.stack.pop()

    def execute(self, program) -> float:
        # program: a BytecodeProgram or any sequence of (opcode, arg)
        instructions = list(program)
        self.stack = []
        self.ip = 0
        log.debug("executing %d instructions", len(instructions))

        while self.ip < len(instructions):
            self.step(instructions[self.ip])

        if not self.stack:
            raise NoResult()
        return self.stack.pop()

    def step(self, instruction):
        opcode, arg = instruction

        if opcode == "PUSH":
            self.stack.append(float(arg))
            self.ip += 1
            return

        if opcode == "LOAD":
            self.stack.append(self.lookup(arg))
            self.ip += 1
            return

        if opcode in ("ADD", "SUB", "MUL", "DIV"):
            b = self.pop(opcode)
            if opcode == "DIV" and b == 0.0:
                raise DivisionByZero()
            a = self.pop(opcode)
            if opcode == "ADD":
                self.stack.append(a + b)
            elif opcode == "SUB":
                self.stack.append(a - b)
            elif opcode == "MUL":
                self.stack.append(a * b)
            else:
                self.stack.append(a / b)
            self.ip += 1
            return

        if opcode == "NEG":
            self.stack.append(-self.pop(opcode))
            self.ip += 1
            return

        raise ExecFailure(f"unknown instruction: {opcode}")


def execute(program, env=None):
    return VM(env).execute(program)
