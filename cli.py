import logging
import os
import sys
import time
import traceback

import colorama

from errors import EvalError
from orchestrator import evaluate_lines
from vm import VM


VERSION = "0.1.0"

log = logging.getLogger("cli")

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

BANNER = "arith REPL - enter expressions. Use \\ for line-continuation. :q to quit."

HELP = (
    "Commands:\n"
    "  :q, :quit, :exit     leave the REPL\n"
    "  :h, :help            show this help\n"
    "  :bench               time a long expression\n"
    "  :save [name], :w     save this session's input to name.arith (default: history)\n"
    "  :wq [name]           save, then quit"
)

BENCH_EXPRESSION = (
    "1 + 2 * (3 - 4) / -5 + (6 * 7) - 8 / 9 + 10 * (11 + 12) - (13 * 14) / 15 + 16"
    " - 17 * 18 / (19 + 20) - 21 + 22 * 23 / 24 - 25 + 26 * (27 - 28) / 29 + 30"
)
BENCH_ITERATIONS = 1000

USAGE = """Usage:
  arith                       start the interactive REPL
  arith -f FILE [-f FILE ...] evaluate every statement in the given files
  arith completion SHELL      print a completion script (bash, zsh, fish)

Options:
  -d, --debug     more log output (repeat for more: -dd)
  -f, --files     file to process (repeatable)
  -h, --help      show this message
  -V, --version   show the version

Environment:
  ARITH_LOG       default log level (debug, info, warning, error)"""

COMPLETIONS = {
    "bash": """_arith() {
    local cur prev
    cur="${COMP_WORDS[COMP_CWORD]}"
    prev="${COMP_WORDS[COMP_CWORD-1]}"
    case "$prev" in
        -f|--files)
            COMPREPLY=( $(compgen -f -- "$cur") )
            return 0
            ;;
        completion)
            COMPREPLY=( $(compgen -W "bash zsh fish" -- "$cur") )
            return 0
            ;;
    esac
    COMPREPLY=( $(compgen -W "-d --debug -f --files -h --help -V --version completion" -- "$cur") )
}
complete -F _arith arith
""",
    "zsh": """#compdef arith

_arith() {
    _arguments \\
        '*'{-d,--debug}'[more log output]' \\
        '*'{-f,--files}'[file to process]:file:_files' \\
        '(- *)'{-h,--help}'[show help]' \\
        '(- *)'{-V,--version}'[show version]' \\
        '1:command:(completion)' \\
        '2:shell:(bash zsh fish)'
}

_arith "$@"
""",
    "fish": """complete -c arith -s d -l debug -d 'more log output'
complete -c arith -s f -l files -r -F -d 'file to process'
complete -c arith -s h -l help -d 'show help'
complete -c arith -s V -l version -d 'show version'
complete -c arith -n '__fish_use_subcommand' -f -a completion -d 'print a completion script'
complete -c arith -n '__fish_seen_subcommand_from completion' -f -a 'bash zsh fish'
""",
}


class UsageError(Exception):
    pass


# ---------- OUTPUT ----------

def format_number(x: float) -> str:
    # integers without a decimal point, otherwise up to 15 decimals, trimmed
    if x.is_integer():
        return str(int(x))
    s = f"{x:.15f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def print_error(message):
    print(f"{colorama.Fore.RED}{message}{colorama.Style.RESET_ALL}", file=sys.stderr)


def eval_and_print(source: str, vm: VM):
    for res in evaluate_lines(source, vm):
        if isinstance(res, EvalError):
            log.debug("%s error in %r", res.kind, res.source)
            print_error(f"! {res}")
        else:
            value, _text = res
            print(f"= {format_number(value)}")


# ---------- LOGGING ----------

def log_level(debug: int) -> int:
    if debug >= 2:
        return logging.DEBUG
    if debug == 1:
        return logging.INFO

    name = os.environ.get("ARITH_LOG", "").strip().upper()
    level = logging.getLevelName(name) if name else logging.WARNING
    if not isinstance(level, int):
        return logging.WARNING
    return level


def setup_logging(debug: int):
    logging.basicConfig(level=log_level(debug), format=LOG_FORMAT, stream=sys.stderr)


# ---------- REPL ----------

def save_output(filename: str, content: str) -> str:
    if filename.endswith(".arith.arith"):
        filename = filename[: -len(".arith")]
    elif not filename.endswith(".arith"):
        filename += ".arith"

    with open(filename, "w", encoding="utf-8") as f:
        f.write(content)
    print(f"Output saved to {filename}")
    return filename


def cmd_bench():
    start = time.perf_counter()
    for _ in range(BENCH_ITERATIONS):
        evaluate_lines(BENCH_EXPRESSION, VM())
    elapsed = time.perf_counter() - start

    print(f"Benchmarking {BENCH_EXPRESSION}:")
    print(f"  Iterations: {BENCH_ITERATIONS}")
    print(f"  Total time: {elapsed * 1000:.3f}ms")
    print(f"  Average time per evaluation: {elapsed / BENCH_ITERATIONS * 1e6:.3f}µs")


def handle_command(command: str, history: list) -> bool | None:
    # returns True to quit, False when handled, None when not a command
    if command in (":q", ":quit", ":exit"):
        return True

    if command in (":h", ":help"):
        print(HELP)
        return False

    if command == ":bench":
        cmd_bench()
        return False

    name, _, arg = command.partition(" ")
    if name in (":save", ":w", ":wq"):
        filename = arg.strip() or "history"
        try:
            save_output(filename, "".join(history))
        except OSError as e:
            log.error("Error saving output: %s", e)
        return name == ":wq"

    return None


def cmd_repl(debug: int = 0):
    # one VM for the whole session, so variables persist across inputs
    vm = VM()
    history = []

    print(BANNER)

    acc = ""
    while True:
        prompt = ">> " if not acc else "... "
        try:
            line = input(prompt)
        except (EOFError, KeyboardInterrupt):
            # mid-statement: evaluate whatever we have
            if acc.strip():
                history.append(acc)
                eval_and_print(acc, vm)
            print()
            break

        trimmed = line.rstrip()

        # commands only work at the start of a statement
        if not acc:
            handled = handle_command(trimmed.strip(), history)
            if handled is True:
                break
            if handled is False:
                continue

        acc += trimmed + "\n"
        if trimmed.endswith("\\"):
            continue

        history.append(acc)
        try:
            eval_and_print(acc, vm)
        except Exception as e:
            if debug:
                traceback.print_exc()
            else:
                print_error(f"! internal error: {e}")
        acc = ""


# ---------- FILE MODE ----------

def cmd_files(paths, debug: int = 0):
    for path in paths:
        file_name = os.path.basename(path) or path
        log.info("Processing file: %s", file_name)

        try:
            with open(path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            if debug:
                traceback.print_exc()
            print(f"Error: cannot read {path}: {e.strerror or e}", file=sys.stderr)
            sys.exit(1)

        print(f"--- Results from {file_name} ---")
        # every file gets its own variables
        for idx, res in enumerate(evaluate_lines(content, VM()), start=1):
            if isinstance(res, EvalError):
                print_error(f"Error in {file_name}: {res}")
            else:
                value, text = res
                print(f"{text} [{idx}]: {format_number(value)}")
        print()


# ---------- COMPLETION ----------

def cmd_completion(shell: str):
    if shell not in COMPLETIONS:
        raise UsageError(f"Unsupported shell: {shell} (expected one of: {', '.join(COMPLETIONS)})")
    sys.stdout.write(COMPLETIONS[shell])


# ---------- ARGUMENTS ----------

def parse_args(argv):
    opts = {"debug": 0, "files": [], "command": None, "shell": None, "help": False, "version": False}

    i = 0
    while i < len(argv):
        arg = argv[i]

        if arg in ("-h", "--help"):
            opts["help"] = True
        elif arg in ("-V", "--version"):
            opts["version"] = True
        elif arg == "--debug":
            opts["debug"] += 1
        elif arg.startswith("-d") and set(arg[1:]) == {"d"}:
            # -d, -dd, -ddd ...
            opts["debug"] += len(arg) - 1
        elif arg in ("-f", "--files"):
            if i + 1 >= len(argv):
                raise UsageError(f"{arg} expects a file path")
            i += 1
            opts["files"].append(argv[i])
        elif arg.startswith("--files="):
            opts["files"].append(arg[len("--files="):])
        elif arg == "completion" and opts["command"] is None:
            if i + 1 >= len(argv):
                raise UsageError("completion expects a shell name")
            i += 1
            opts["command"] = "completion"
            opts["shell"] = argv[i]
        else:
            raise UsageError(f"Unknown argument: {arg}")
        i += 1

    return opts


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    try:
        opts = parse_args(argv)
        if opts["help"]:
            print(USAGE)
            return
        if opts["version"]:
            print(f"arith {VERSION}")
            return

        setup_logging(opts["debug"])
        colorama.just_fix_windows_console()

        if opts["command"] == "completion":
            cmd_completion(opts["shell"])
            return
    except UsageError as e:
        print(str(e), file=sys.stderr)
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    if opts["files"]:
        cmd_files(opts["files"], debug=opts["debug"])
    else:
        cmd_repl(debug=opts["debug"])


if __name__ == "__main__":
    main()
