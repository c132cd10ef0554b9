"""Tests for C3 merge and whole-graph linearization."""

import pytest

from c3lang.errors import Inconsistency, NoProgress, UnknownClass
from c3lang.linearization import linearize, merge
from c3lang.registry import ClassRegistry
from c3lang.sets import Sets


def _graph(classes: dict[str, str]) -> ClassRegistry:
    graph = ClassRegistry()
    for cls, parents in classes.items():
        graph.declare_str(cls, parents)
    return graph


# From https://www.python.org/download/releases/2.3/mro/ and Wikipedia
PYTHON_DOCS_EXAMPLE = {
    "O": "",
    "A": "O",
    "B": "O",
    "C": "O",
    "D": "O",
    "E": "O",
    "K1": "A, B, C",
    "K2": "D, B, E",
    "K3": "D, A",
    "Z": "K1, K2, K3",
}

ERC20_EXAMPLE = {
    "Context": "",
    "IERC20": "",
    "IERC20Metadata": "IERC20",
    "IERC20Errors": "",
    "ERC20": "Context, IERC20Metadata, IERC20, IERC20Errors",
    "ERC20Burnable": "ERC20, Context",
    "ERC20Capped": "ERC20",
    "Ownable": "Context",
    "Plascoin": "ERC20Capped, ERC20Burnable, Ownable",
}


def _ancestors(graph: ClassRegistry, cls: str) -> set[str]:
    seen = set()
    todo = list(graph.path(cls))
    while todo:
        parent = todo.pop()
        if parent not in seen:
            seen.add(parent)
            todo.extend(graph.path(parent))
    return seen


def _is_subsequence(short: list[str], long: list[str]) -> bool:
    it = iter(long)
    return all(item in it for item in short)


def test_merge():
    sets = Sets([["B", "O"], ["A", "O"], ["C", "O"], ["B", "A", "C"]])
    assert merge("K", sets) == ["K", "B", "A", "C", "O"]


def test_merge_2():
    sets = [
        ["K1", "C", "B", "A", "O"],
        ["K3", "A", "D", "O"],
        ["K2", "B", "D", "E", "O"],
        ["K1", "K3", "K2"],
    ]
    assert merge("Z", sets) == ["Z", "K1", "C", "K3", "K2", "B", "A", "D", "E", "O"]


def test_merge_no_sets():
    """A root merges as just itself."""
    assert merge("A", []) == ["A"]


def test_merge_deterministic():
    sets = [["B", "O"], ["A", "O"], ["C", "O"], ["B", "A", "C"]]
    results = {tuple(merge("K", [list(s) for s in sets])) for _ in range(10)}
    assert len(results) == 1


def test_merge_inconsistency_details():
    with pytest.raises(Inconsistency) as info:
        merge("X", [["A", "B"], ["B", "A"], ["A", "B"]])
    err = info.value
    assert err.cls == "X"
    assert err.candidates == ["A", "B", "A"]
    assert err.sets == [["A", "B"], ["B", "A"], ["A", "B"]]
    assert "cannot linearize X" in str(err)


def test_diamond():
    result = linearize(_graph({"A": "", "B": "A", "C": "A", "D": "B, C"}))

    target = ClassRegistry()
    target.declare_str("A", "A")
    target.declare_str("B", "B, A")
    target.declare_str("C", "C, A")
    target.declare_str("D", "D, B, C, A")
    assert result == target


def test_erc20_example():
    result = linearize(_graph(ERC20_EXAMPLE))
    assert result.path("Context") == ["Context"]
    assert result.path("IERC20") == ["IERC20"]
    assert result.path("IERC20Metadata") == ["IERC20Metadata", "IERC20"]
    assert result.path("ERC20") == ["ERC20", "Context", "IERC20Metadata", "IERC20", "IERC20Errors"]
    assert result.path("ERC20Burnable") == [
        "ERC20Burnable", "ERC20", "Context", "IERC20Metadata", "IERC20", "IERC20Errors",
    ]
    assert result.path("Ownable") == ["Ownable", "Context"]
    assert result.path("Plascoin") == [
        "Plascoin", "ERC20Capped", "ERC20Burnable", "ERC20", "Ownable",
        "Context", "IERC20Metadata", "IERC20", "IERC20Errors",
    ]


def test_python_docs_example():
    result = linearize(_graph(PYTHON_DOCS_EXAMPLE))
    assert result.path("K1") == ["K1", "A", "B", "C", "O"]
    assert result.path("K2") == ["K2", "D", "B", "E", "O"]
    assert result.path("K3") == ["K3", "D", "A", "O"]
    assert result.path("Z") == ["Z", "K1", "K2", "K3", "D", "A", "B", "C", "E", "O"]


@pytest.mark.parametrize("classes", [PYTHON_DOCS_EXAMPLE, ERC20_EXAMPLE])
def test_matches_python_mro(classes):
    """Paths agree with the interpreter's own C3 for the same hierarchy."""
    graph = _graph(classes)
    result = linearize(graph)
    types: dict[str, type] = {}
    # A parent's path is always shorter than its child's
    for cls in sorted(result.all_classes(), key=lambda c: len(result.path(c))):
        bases = tuple(types[p] for p in graph.path(cls)) or (object,)
        types[cls] = type(cls, bases, {})
    for cls in result.all_classes():
        mro = [t.__name__ for t in types[cls].__mro__ if t is not object]
        assert result.path(cls) == mro


@pytest.mark.parametrize("classes", [PYTHON_DOCS_EXAMPLE, ERC20_EXAMPLE])
def test_paths_cover_ancestors_once(classes):
    graph = _graph(classes)
    result = linearize(graph)
    for cls in graph.all_classes():
        path = result.path(cls)
        assert path[0] == cls
        assert len(path) == len(set(path))
        assert set(path[1:]) == _ancestors(graph, cls)


@pytest.mark.parametrize("classes", [PYTHON_DOCS_EXAMPLE, ERC20_EXAMPLE])
def test_monotonicity(classes):
    """Every ancestor's path appears, in order, inside its descendant's path."""
    graph = _graph(classes)
    result = linearize(graph)
    for cls in graph.all_classes():
        for ancestor in _ancestors(graph, cls):
            assert _is_subsequence(result.path(ancestor), result.path(cls))


def test_local_precedence_order_kept():
    result = linearize(_graph({"O": "", "A": "O", "B": "O", "X": "B, A"}))
    assert result.path("X") == ["X", "B", "A", "O"]


def test_self_parent_is_root():
    result = linearize(_graph({"A": "A", "B": "A"}))
    assert result.path("A") == ["A"]
    assert result.path("B") == ["B", "A"]


def test_inconsistent_hierarchy():
    """Z asks for C before K, but K's path puts C after A and B."""
    graph = _graph({"O": "", "A": "O", "B": "O", "C": "O", "K": "A, B, C", "Z": "C, K"})
    with pytest.raises(Inconsistency) as info:
        linearize(graph)
    assert info.value.cls == "Z"


def test_inconsistent_parent_order():
    graph = _graph({"O": "", "A": "O", "B": "A, O", "X": "O, A"})
    with pytest.raises(Inconsistency, match="cannot linearize X"):
        linearize(graph)


def test_cycle():
    with pytest.raises(NoProgress) as info:
        linearize(_graph({"A": "B", "B": "A"}))
    assert info.value.pending == ["A", "B"]
    assert info.value.cycle == ["A", "B", "A"]
    assert "A < B < A" in str(info.value)


def test_cycle_behind_solved_classes():
    with pytest.raises(NoProgress) as info:
        linearize(_graph({"R": "", "A": "R, B", "B": "A", "C": "R"}))
    assert info.value.pending == ["A", "B"]
    assert info.value.cycle == ["A", "B", "A"]


def test_self_cycle():
    with pytest.raises(NoProgress) as info:
        linearize(_graph({"A": "", "X": "X, A"}))
    assert info.value.cycle == ["X", "X"]


def test_dangling_parent():
    with pytest.raises(UnknownClass) as info:
        linearize(_graph({"B": "A"}))
    assert info.value.cls == "A"
    assert info.value.referenced_by == "B"


def test_dangling_parent_deep():
    """C is stuck only because B is; the missing class is still named."""
    with pytest.raises(UnknownClass, match="Missing"):
        linearize(_graph({"C": "B", "B": "Missing"}))


def test_input_not_consumed():
    graph = _graph({"A": "", "B": "A"})
    linearize(graph)
    assert graph.path("B") == ["A"]
    assert graph.all_classes() == ["A", "B"]


def test_idempotent():
    graph = _graph(PYTHON_DOCS_EXAMPLE)
    assert linearize(graph) == linearize(graph)


def test_contributions_carried_over():
    graph = _graph({"A": "", "B": "A"})
    graph.contribute_function("A", "foo")
    graph.contribute_variable("B", "x")
    result = linearize(graph)
    assert result.resolved_functions("B") == ["foo"]
    assert result.resolved_variables("B") == ["x"]


def test_empty_graph():
    assert linearize(ClassRegistry()).is_empty()
