import pytest

from errors import StackUnderflow, DivisionByZero, NoResult, ExecFailure
from vm import VM, execute


def test_push_and_arithmetic():
    assert execute([("PUSH", 5.0), ("PUSH", 3.0), ("SUB", None)]) == 2.0
    assert execute([("PUSH", 9.0), ("PUSH", 3.0), ("DIV", None)]) == 3.0
    assert execute([("PUSH", 4.0), ("PUSH", 2.5), ("MUL", None)]) == 10.0
    assert execute([("PUSH", 4.0), ("NEG", None)]) == -4.0


def test_load_reads_environment():
    vm = VM({"x": 2.0})
    assert vm.execute([("LOAD", "x"), ("PUSH", 3.0), ("ADD", None)]) == 5.0


def test_undefined_variable():
    with pytest.raises(ExecFailure) as exc:
        execute([("LOAD", "x")])
    assert exc.value.message == "undefined variable: x"
    assert str(exc.value) == "execution error: undefined variable: x"


def test_division_by_zero():
    with pytest.raises(DivisionByZero):
        execute([("PUSH", 1.0), ("PUSH", 0.0), ("DIV", None)])
    with pytest.raises(DivisionByZero):
        execute([("PUSH", 1.0), ("PUSH", -0.0), ("DIV", None)])


def test_divisor_checked_before_left_operand():
    with pytest.raises(DivisionByZero):
        execute([("PUSH", 0.0), ("DIV", None)])


def test_stack_underflow_names_instruction():
    with pytest.raises(StackUnderflow) as exc:
        execute([("PUSH", 1.0), ("ADD", None)])
    assert exc.value.instr == "Add"
    assert str(exc.value) == "stack underflow while executing instruction 'Add'"

    with pytest.raises(StackUnderflow):
        execute([("NEG", None)])


def test_no_result():
    with pytest.raises(NoResult):
        execute([])


def test_stack_is_reset_between_runs():
    vm = VM()
    assert vm.execute([("PUSH", 1.0), ("PUSH", 2.0)]) == 2.0
    with pytest.raises(NoResult):
        vm.execute([])


def test_define_and_assign():
    vm = VM()
    vm.define("a", 1.0)
    vm.define("a", 4.0)
    assert vm.lookup("a") == 4.0

    vm.assign("a", 5.0)
    assert vm.globals == {"a": 5.0}

    with pytest.raises(ExecFailure):
        vm.assign("b", 1.0)
    assert "b" not in vm.globals


def test_separate_vms_do_not_share_variables():
    first, second = VM(), VM()
    first.define("x", 1.0)
    with pytest.raises(ExecFailure):
        second.lookup("x")
