from agriplot.modules.plots.editor import EditSession
from agriplot.modules.plots.services import ManagedSession, SessionStore


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def make_session(session_id):
    return ManagedSession(session_id=session_id, area_id="12", farm_id=None, editor=EditSession())


def test_idle_session_is_evicted_on_next_access():
    clock = FakeClock()
    store = SessionStore(idle_timeout=60, clock=clock)
    store.add(make_session("a"))

    clock.now += 61
    assert store.get("a") is None


def test_access_keeps_session_alive():
    clock = FakeClock()
    store = SessionStore(idle_timeout=60, clock=clock)
    store.add(make_session("a"))

    for _ in range(3):
        clock.now += 45
        assert store.get("a") is not None


def test_adding_a_session_sweeps_abandoned_ones():
    clock = FakeClock()
    store = SessionStore(idle_timeout=60, clock=clock)
    store.add(make_session("old"))
    clock.now += 30
    store.add(make_session("recent"))

    clock.now += 40
    store.add(make_session("new"))
    assert store.get("old") is None
    assert store.get("recent") is not None
    assert store.get("new") is not None
