from bytecode import BytecodeProgram
from ast_nodes import Number, Var, Unary, Binary, Empty, EmptyParen
from errors import UnsupportedOperator


class Compiler:
    def __init__(self):
        self.bc = BytecodeProgram()

    def emit(self, opcode, arg=None):
        return self.bc.emit(opcode, arg)

    def compile(self, node):
        # entry point: one expression tree -> one flat program
        self.bc = BytecodeProgram()
        self.compile_expr(node)
        return self.bc

    # post-order: operands first, operator last. Uses an explicit work stack,
    # since sums parse into left-deep trees as deep as they are long.
    def compile_expr(self, root):
        work = [(root, False)]

        while work:
            node, operands_done = work.pop()

            if isinstance(node, Number):
                self.emit("PUSH", float(node.value))

            elif isinstance(node, Var):
                self.emit("LOAD", node.name)

            elif isinstance(node, Unary):
                if node.op not in ("+", "-"):
                    raise UnsupportedOperator(f"unary {node.op!r}")
                if not operands_done:
                    work.append((node, True))
                    work.append((node.expr, False))
                elif node.op == "-":
                    self.emit("NEG")

            elif isinstance(node, Binary):
                if not operands_done:
                    work.append((node, True))
                    work.append((node.right, False))
                    work.append((node.left, False))
                else:
                    self.emit(self.binary_op_to_opcode(node.op))

            elif isinstance(node, Empty):
                continue

            elif isinstance(node, EmptyParen):
                self.emit("PUSH", 0.0)

            else:
                raise UnsupportedOperator(f"node {type(node).__name__}")

    def binary_op_to_opcode(self, op):
        mapping = {
            "+": "ADD",
            "-": "SUB",
            "*": "MUL",
            "/": "DIV",
        }
        if op not in mapping:
            raise UnsupportedOperator(f"binary {op!r}")
        return mapping[op]


def compile_expr(node):
    return Compiler().compile(node)
