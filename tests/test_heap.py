import pytest

from mscheme.interpreter import Interpreter
from mscheme.errors import SchemeRuntimeError
from mscheme.types.environment import Environment
from mscheme.types.lambda_fn import Closure
from mscheme.types.nil import Nil
from mscheme.types.symbol import Symbol
from mscheme.types.values import Integer, Pair


def test_make_registers_values(heap):
    a = heap.make(Integer, 1)
    b = heap.make(Pair, a, Nil)
    assert len(heap) == 2
    assert a in heap and b in heap
    assert Integer(1) not in heap
    assert heap.stats.allocations == 2


def test_collect_reclaims_unreachable(heap, root):
    kept = heap.make(Integer, 1)
    root.define("kept", kept)
    garbage = heap.make(Pair, heap.make(Integer, 2), Nil)

    assert heap.collect(root) == 2
    assert kept in heap and root in heap
    assert garbage not in heap
    assert heap.stats.collections == 1
    assert heap.stats.reclaimed == 2


def test_collect_is_idempotent(heap, root):
    root.define("x", heap.make(Integer, 1))
    heap.make(Integer, 2)
    assert heap.collect(root) == 1
    assert heap.collect(root) == 0
    assert len(heap) == 2


def test_self_referencing_pair_survives(heap, root):
    p = heap.make(Pair, heap.make(Integer, 1), Nil)
    p.second = p
    root.define("p", p)
    assert heap.collect(root) == 0
    assert p in heap and p.first in heap


def test_unreachable_cycle_is_reclaimed(heap, root):
    a = heap.make(Pair)
    b = heap.make(Pair, a, a)
    a.first = b
    a.second = b
    assert heap.collect(root) == 2
    assert a not in heap and b not in heap


def test_cycle_through_environment(heap, root):
    # env -> pair -> env
    frame = heap.make(Environment, root)
    p = heap.make(Pair, frame, Nil)
    frame.define("p", p)
    root.define("frame", frame)
    assert heap.collect(root) == 0
    root.vars.clear()
    assert heap.collect(root) == 2
    assert frame not in heap and p not in heap


def test_environment_marks_parent(heap, root):
    parent = heap.make(Environment)
    parent.define("v", heap.make(Integer, 7))
    child = heap.make(Environment, parent)
    root.define("child", child)
    heap.collect(root)
    assert parent in heap
    assert parent.vars["v"] in heap


def test_closure_marks_params_body_and_env(heap, root):
    captured = heap.make(Environment, root)
    param = heap.make(Symbol, "x")
    body = heap.make(Pair, heap.make(Symbol, "+"), heap.make(Pair, param, Nil))
    fn = heap.make(Closure, [param], [body], captured)
    root.define("f", fn)
    assert heap.collect(root) == 0
    assert all(v in heap for v in (captured, param, body, body.first, fn))


def test_deep_structure_marks_without_recursion(heap, root):
    lst = Nil
    for i in range(100_000):
        lst = heap.make(Pair, heap.make(Integer, i), lst)
    root.define("lst", lst)
    assert heap.collect(root) == 0
    assert len(heap) == 200_001


def test_clear(heap, root):
    heap.make(Integer, 1)
    heap.clear()
    assert len(heap) == 0


# -------------------------------
# Collection inside an interpreter session
# -------------------------------
def test_session_heap_is_stable_across_evaluations(interp):
    interp.run("(define x (list 1 2))")
    baseline = len(interp.heap)
    for _ in range(3):
        assert interp.run("(+ 1 2 (car x))") == "4"
        assert len(interp.heap) == baseline


def test_bound_values_survive_collection(run, interp):
    run("(define p (list 1))", "(set-cdr! p p)")
    p = interp.env.lookup("p")
    run("(+ 1 1)")
    assert p in interp.heap
    assert run("p") == "(1 . {selfref})"


def test_redefinition_frees_old_value(run, interp):
    run("(define x (list 1 2 3))")
    old = interp.env.lookup("x")
    run("(define x 0)")
    assert old not in interp.heap


def test_failed_evaluation_leaks_until_next_success():
    with Interpreter(collect_on_error=False) as interp:
        interp.run("1")
        baseline = len(interp.heap)
        with pytest.raises(SchemeRuntimeError):
            interp.run("(car (list 1 2 3 4 5) 1)")
        assert len(interp.heap) > baseline
        interp.run("1")
        assert len(interp.heap) == baseline


def test_collect_on_error():
    with Interpreter(collect_on_error=True) as interp:
        interp.run("1")
        baseline = len(interp.heap)
        with pytest.raises(SchemeRuntimeError):
            interp.run("(car (list 1 2 3 4 5) 1)")
        assert len(interp.heap) == baseline


def test_collect_on_error_from_environment(monkeypatch):
    monkeypatch.setenv("MSCHEME_COLLECT_ON_ERROR", "yes")
    with Interpreter() as interp:
        assert interp.collect_on_error is True
