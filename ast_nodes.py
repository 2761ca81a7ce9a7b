class ASTNode:
    def fields(self):
        return dict(self.__dict__)

    # structural equality, so parsed trees can be compared
    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.fields() == other.fields()

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in self.fields().items())
        return f"{self.__class__.__name__}({fields})"


# ---------- STATEMENTS ----------

class ExprStatement(ASTNode):
    def __init__(self, expr):
        self.expr = expr


class Let(ASTNode):
    def __init__(self, name, type_name, value):
        self.name = name              # variable name
        self.type_name = type_name    # optional annotation, never checked
        self.value = value            # expression


class Assign(ASTNode):
    def __init__(self, name, value):
        self.name = name
        self.value = value


class CompoundAssign(ASTNode):
    def __init__(self, name, op, value):
        self.name = name
        self.op = op  # "+=", "-=", "*=", "/="
        self.value = value

    @property
    def binary_op(self):
        return self.op[:-1]


# ---------- EXPRESSIONS ----------

class Number(ASTNode):
    def __init__(self, value):
        self.value = value


class Var(ASTNode):
    def __init__(self, name):
        self.name = name


class Unary(ASTNode):
    def __init__(self, op, expr):
        self.op = op
        self.expr = expr


class Binary(ASTNode):
    def __init__(self, left, op, right):
        self.left = left
        self.op = op
        self.right = right


class Empty(ASTNode):
    pass


class EmptyParen(ASTNode):
    pass
