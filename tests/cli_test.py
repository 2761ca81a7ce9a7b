import logging
import re

import pytest

import cli


@pytest.mark.parametrize("value, expected", [
    (3.0, "3"),
    (-5.0, "-5"),
    (2.5, "2.5"),
    (1.4, "1.4"),
    (1 / 3, "0.333333333333333"),
    (float("inf"), "inf"),
])
def test_format_number(value, expected):
    assert cli.format_number(value) == expected


def test_parse_args_defaults():
    opts = cli.parse_args([])
    assert opts["debug"] == 0
    assert opts["files"] == []
    assert opts["command"] is None


def test_parse_args_debug_and_files():
    opts = cli.parse_args(["-dd", "-f", "a.arith", "--files=b.arith", "--debug", "--files", "c.arith"])
    assert opts["debug"] == 3
    assert opts["files"] == ["a.arith", "b.arith", "c.arith"]


def test_parse_args_completion():
    opts = cli.parse_args(["completion", "fish"])
    assert (opts["command"], opts["shell"]) == ("completion", "fish")


@pytest.mark.parametrize("argv", [["-x"], ["-f"], ["completion"], ["extra"]])
def test_parse_args_rejects_bad_input(argv):
    with pytest.raises(cli.UsageError):
        cli.parse_args(argv)


def test_log_level(monkeypatch):
    monkeypatch.delenv("ARITH_LOG", raising=False)
    assert cli.log_level(0) == logging.WARNING
    assert cli.log_level(1) == logging.INFO
    assert cli.log_level(2) == logging.DEBUG

    monkeypatch.setenv("ARITH_LOG", "debug")
    assert cli.log_level(0) == logging.DEBUG

    monkeypatch.setenv("ARITH_LOG", "nonsense")
    assert cli.log_level(0) == logging.WARNING


@pytest.mark.parametrize("shell, marker", [
    ("bash", "complete -F _arith arith"),
    ("zsh", "#compdef arith"),
    ("fish", "complete -c arith"),
])
def test_completion_scripts(capsys, shell, marker):
    cli.main(["completion", shell])
    assert marker in capsys.readouterr().out


def test_unknown_shell_is_usage_error(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["completion", "tcsh"])
    assert exc.value.code == 2
    assert "Unsupported shell: tcsh" in capsys.readouterr().err


def test_version_and_help(capsys):
    cli.main(["--version"])
    assert capsys.readouterr().out.strip() == f"arith {cli.VERSION}"

    cli.main(["-h"])
    assert "Usage:" in capsys.readouterr().out


def test_save_output_extension(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert cli.save_output("session", "1 + 1\n") == "session.arith"
    assert cli.save_output("kept.arith", "") == "kept.arith"
    assert cli.save_output("twice.arith.arith", "") == "twice.arith"
    assert (tmp_path / "session.arith").read_text(encoding="utf-8") == "1 + 1\n"
    assert "Output saved to session.arith" in capsys.readouterr().out


def test_save_command_writes_history(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    history = ["let a = 1\n", "a + 1\n"]
    assert cli.handle_command(":w notes", history) is False
    assert cli.handle_command(":wq", history) is True
    assert (tmp_path / "notes.arith").read_text(encoding="utf-8") == "let a = 1\na + 1\n"
    assert (tmp_path / "history.arith").exists()


def test_handle_command_ignores_expressions():
    assert cli.handle_command("1 + 1", []) is None
    assert cli.handle_command(":q", []) is True


def test_eval_and_print(capsys):
    vm = cli.VM()
    cli.eval_and_print("let r = 2\nr(3)\n1/0", vm)
    out, err = capsys.readouterr()
    assert out == "= 6\n"
    assert "division by zero" in err


def test_file_mode(tmp_path, capsys):
    first = tmp_path / "calc.arith"
    first.write_text("let x = 4 ; four\n1 + 1\nx(2)\n1 / 0\n", encoding="utf-8")
    second = tmp_path / "other.arith"
    second.write_text("x\n", encoding="utf-8")

    cli.main(["-f", str(first), "-f", str(second)])
    out, err = capsys.readouterr()

    assert "--- Results from calc.arith ---" in out
    assert "1 + 1 [1]: 2" in out
    assert "x(2) [2]: 8" in out
    assert "Error in calc.arith: runtime error: division by zero in input: 1 / 0" in err
    # variables do not leak between files
    assert "--- Results from other.arith ---" in out
    assert "Error in other.arith: runtime error: execution error: undefined variable: x" in err


def test_file_mode_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["-f", str(tmp_path / "missing.arith")])
    assert exc.value.code == 1
    assert "cannot read" in capsys.readouterr().err


def usage_flags():
    options = cli.USAGE.split("Options:\n", 1)[1].split("\n\n", 1)[0]
    flags = set()
    for line in options.splitlines():
        names = line.strip().split("  ", 1)[0]
        flags.update(names.split(", "))
    return flags


def bash_flags():
    words = re.findall(r'compgen -W "([^"]*)"', cli.COMPLETIONS["bash"])
    return {w for group in words for w in group.split() if w.startswith("-")}


def zsh_flags():
    pairs = re.findall(r"\{(-\w),(--[\w-]+)\}", cli.COMPLETIONS["zsh"])
    return {flag for pair in pairs for flag in pair}


def fish_flags():
    script = cli.COMPLETIONS["fish"]
    short = {"-" + s for s in re.findall(r"-s (\w)", script)}
    long = {"--" + s for s in re.findall(r"-l ([\w-]+)", script)}
    return short | long


def test_usage_lists_expected_flags():
    assert usage_flags() == {"-d", "--debug", "-f", "--files", "-h", "--help", "-V", "--version"}


@pytest.mark.parametrize("extract", [bash_flags, zsh_flags, fish_flags])
def test_completion_flags_match_usage(extract):
    assert extract() == usage_flags()


@pytest.mark.parametrize("flag", sorted(usage_flags()))
def test_every_documented_flag_is_accepted(flag):
    argv = [flag, "x"] if flag in ("-f", "--files") else [flag]
    cli.parse_args(argv)



def test_completion_shell_names_match_supported_shells():
    supported = set(cli.COMPLETIONS)
    bash = re.search(r'completion\)\n\s+COMPREPLY=\( \$\(compgen -W "([^"]*)"', cli.COMPLETIONS["bash"])
    zsh = re.search(r"'2:shell:\(([^)]*)\)'", cli.COMPLETIONS["zsh"])
    fish = re.search(r"-a '([^']*)'", cli.COMPLETIONS["fish"])
    for match in (bash, zsh, fish):
        assert set(match.group(1).split()) == supported
