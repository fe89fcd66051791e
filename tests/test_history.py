from agriplot.modules.plots.history import RingHistory
from conftest import ring_of

A = ring_of((0, 0))
B = ring_of((0, 0), (0, 1))
C = ring_of((0, 0), (0, 1), (1, 1))


def test_push_records_prior_and_clears_redo():
    history = RingHistory()
    history.push((), A)
    history.push(A, B)
    history.undo()
    assert history.can_redo

    history.push(history.current, C)
    assert history.current == C
    assert history.undo_stack == [A, ()]
    assert history.redo_stack == []


def test_undo_and_redo_walk_the_stacks():
    history = RingHistory()
    for ring in (A, B, C):
        history.commit(ring)

    assert history.undo() and history.current == B
    assert history.undo() and history.current == A
    assert history.redo_stack == [B, C]
    assert history.redo() and history.current == B


def test_empty_stacks_are_no_ops():
    history = RingHistory(A)
    assert not history.undo()
    assert not history.redo()
    assert history.current == A


def test_replace_current_does_not_touch_stacks():
    history = RingHistory(A)
    history.replace_current(B)
    assert history.current == B
    assert not history.can_undo and not history.can_redo


def test_snapshots_are_immutable_copies():
    source = list(B)
    history = RingHistory()
    history.commit(source)
    source.append(C[-1])
    assert history.current == B
    assert isinstance(history.current, tuple)
