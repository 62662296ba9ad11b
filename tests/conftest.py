import pytest

from mscheme.interpreter import Interpreter
from mscheme.types.environment import Environment
from mscheme.types.heap import Heap

# Most tests drive a fresh Interpreter session through `run`, which feeds one
# line at a time (exactly like the REPL) and returns the last printed result.
# Lower-level tests build values by hand on a bare Heap.


@pytest.fixture
def interp():
    with Interpreter() as session:
        yield session


@pytest.fixture
def run(interp):
    def _run(*lines: str) -> str:
        result = None
        for line in lines:
            result = interp.run(line)
        return result

    return _run


@pytest.fixture
def heap():
    return Heap()


@pytest.fixture
def root(heap):
    """An empty global environment registered on `heap`."""
    return heap.make(Environment)
