import io
import logging
import sys

import pytest

from mscheme import config
from mscheme.builtin.env_builtin import OPERATORS
from mscheme.errors import SchemeNameError, SchemeRuntimeError, SchemeSyntaxError
from mscheme.interpreter import Interpreter, Outcome
from mscheme.reader.parser import read
from mscheme.repl import main, serve
from mscheme.types.lambda_fn import Builtin, Op


def test_every_operator_has_a_handler():
    assert set(OPERATORS) == set(Op)
    assert len(Op) == 34


def test_global_environment_is_seeded(interp):
    for op in Op:
        value = interp.env.lookup(op.value)
        assert isinstance(value, Builtin) and value.op is op
        assert value in interp.heap


def test_end_to_end_session(run):
    assert run("(+ 1 2 3)") == "6"
    assert run("(define (square x) (* x x))") == "square"
    assert run("(square 5)") == "25"
    assert run("(if (> 3 2) 'yes 'no)") == "yes"
    assert run("(define p (cons 1 2))") == "p"
    assert run("(set-car! p 10)") == "1"
    assert run("p") == "(10 . 2)"


def test_run_expression(interp):
    expr = read("(* 6 7)", interp.heap)
    assert interp.run_expression(expr) == "42"


@pytest.mark.parametrize(
    "line,error",
    [
        ("(1 2", SchemeSyntaxError),
        (")", SchemeSyntaxError),
        ("1 2", SchemeSyntaxError),
        ("(if)", SchemeSyntaxError),
        ("undefined", SchemeNameError),
        ("(set! undefined 1)", SchemeNameError),
        ("(car 1)", SchemeRuntimeError),
        ("(1 2)", SchemeRuntimeError),
        ("(+ 'a 1)", SchemeRuntimeError),
    ]
)
def test_error_categories(interp, line, error):
    with pytest.raises(error):
        interp.run(line)


def test_execute_reports_outcomes(interp):
    ok = interp.execute("(list 1 2)")
    assert ok.ok and ok.error is None
    assert str(ok) == "(1 2)"

    assert str(interp.execute("(")).startswith("Syntax error: ")
    assert str(interp.execute("nope")) == "Name error: nope not found"
    assert str(interp.execute("(car 1)")) == "Runtime error: car requires a pair"
    failed = interp.execute("(car 1)")
    assert not failed.ok
    assert isinstance(failed.error, SchemeRuntimeError)


def test_outcome_str():
    assert str(Outcome("5")) == "5"
    assert str(Outcome("", SchemeNameError("x not found"))) == "Name error: x not found"


def test_execute_logs_failures(interp, caplog):
    with caplog.at_level(logging.DEBUG, logger="mscheme.interpreter"):
        interp.execute("(car 1)")
    assert "car requires a pair" in caplog.text


def test_collection_is_logged(interp, caplog):
    with caplog.at_level(logging.DEBUG, logger="mscheme.types.heap"):
        interp.run("(list 1 2 3)")
    assert "collected" in caplog.text


def test_bounded_recursion_depth(run):
    run("(define (count n) (if (= n 0) 0 (+ 1 (count (- n 1)))))")
    assert run("(count 300)") == "300"


def test_runaway_recursion_is_a_runtime_error():
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(2000)
    try:
        with Interpreter(recursion_limit=0) as interp:
            interp.run("(define (loop n) (loop n))")
            with pytest.raises(SchemeRuntimeError, match="maximum recursion depth"):
                interp.run("(loop 1)")
            # the session is still usable afterwards
            assert interp.run("(+ 1 1)") == "2"
    finally:
        sys.setrecursionlimit(previous)


def test_deeply_nested_input_is_a_syntax_error(interp):
    deep = "'" + "(" * 6000 + ")" * 6000
    failed = interp.execute(deep)
    assert not failed.ok
    assert isinstance(failed.error, SchemeSyntaxError)
    assert str(failed) == "Syntax error: maximum nesting depth exceeded"
    assert interp.run("(+ 1 2)") == "3"


def test_serve_continues_after_deeply_nested_line(interp):
    out = io.StringIO()
    deep = "(" * 6000 + ")" * 6000
    serve([deep + "\n", "(+ 1 2)\n"], out, interp)
    assert out.getvalue().splitlines() == [
        "Syntax error: maximum nesting depth exceeded",
        "3",
    ]


def test_deep_first_nesting_is_bounded_by_recursion_limit():
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(1000)
    try:
        with Interpreter(recursion_limit=0) as interp:
            interp.run("(define x 0)")
            # each step wraps x one level deeper; copying and printing recurse on `first`
            with pytest.raises(SchemeRuntimeError, match="maximum recursion depth"):
                for _ in range(2000):
                    interp.run("(set! x (list x))")
            assert interp.run("(+ 1 2)") == "3"
            assert interp.run("(pair? x)") == "#t"
    finally:
        sys.setrecursionlimit(previous)


def test_recursion_limit_is_raised():
    previous = sys.getrecursionlimit()
    try:
        with Interpreter(recursion_limit=previous + 100):
            assert sys.getrecursionlimit() == previous + 100
    finally:
        sys.setrecursionlimit(previous)


def test_close_clears_heap():
    interp = Interpreter()
    assert len(interp.heap) > 0
    interp.close()
    assert len(interp.heap) == 0


# -------------------------------
# Configuration
# -------------------------------
def test_config_defaults(monkeypatch):
    for var in ("MSCHEME_RECURSION_LIMIT", "MSCHEME_COLLECT_ON_ERROR", "MSCHEME_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    assert config.get_recursion_limit() == config.DEFAULT_RECURSION_LIMIT
    assert config.get_collect_on_error() is False
    assert config.get_log_level() == logging.WARNING


def test_config_from_environment(monkeypatch):
    monkeypatch.setenv("MSCHEME_RECURSION_LIMIT", " 5000 ")
    monkeypatch.setenv("MSCHEME_COLLECT_ON_ERROR", "On")
    monkeypatch.setenv("MSCHEME_LOG_LEVEL", "debug")
    assert config.get_recursion_limit() == 5000
    assert config.get_collect_on_error() is True
    assert config.get_log_level() == logging.DEBUG


def test_config_invalid_values(monkeypatch):
    monkeypatch.setenv("MSCHEME_RECURSION_LIMIT", "lots")
    with pytest.raises(ValueError, match="MSCHEME_RECURSION_LIMIT"):
        config.get_recursion_limit()
    monkeypatch.setenv("MSCHEME_COLLECT_ON_ERROR", "maybe")
    assert config.get_collect_on_error() is False
    monkeypatch.setenv("MSCHEME_LOG_LEVEL", "chatty")
    assert config.get_log_level() == logging.WARNING


# -------------------------------
# REPL
# -------------------------------
def test_serve_one_line_per_expression(interp):
    out = io.StringIO()
    lines = ["(define x 2)\n", "\n", "   \n", "(* x 21)\n", "(car x)\n", "x\n"]
    serve(lines, out, interp)
    assert out.getvalue().splitlines() == [
        "x",
        "42",
        "Runtime error: car requires a pair",
        "2",
    ]


def test_main_reads_file(tmp_path, capsys):
    source = tmp_path / "session.scm"
    source.write_text("(define p (list 1))\n(set-cdr! p p)\np\n(foo)\n", encoding="utf-8")
    assert main([str(source)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "p",
        "()",
        "(1 . {selfref})",
        "Name error: foo not found",
    ]


def test_main_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("(or 1 2 3)\n(or #f 3)\n(\n"))
    assert main([]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[:2] == ["#t", "3"]
    assert out[2].startswith("Syntax error: ")
