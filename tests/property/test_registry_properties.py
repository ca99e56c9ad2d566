from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from conftest import SpyHost
from termkeys.terminal import TerminalRegistry

_NAMES = st.sampled_from(["a", "b", "c"])
_STEPS = st.one_of(
    st.tuples(st.just("get"), _NAMES, st.booleans()),
    st.tuples(st.just("dispose"), _NAMES, st.just(False)),
    st.tuples(st.just("close"), st.integers(min_value=0, max_value=30), st.just(False)),
    st.tuples(st.just("dispose_all"), st.just(""), st.just(False)),
)


@given(st.lists(_STEPS, max_size=40), st.booleans())
def test_at_most_one_live_session_per_name(steps: list[tuple[str, object, bool]], sync_close: bool) -> None:
    host = SpyHost(sync_close=sync_close)
    registry = TerminalRegistry(host)
    host.on_did_close_terminal(registry.handle_close)
    user_closed: set[int] = set()

    for action, target, force_new in steps:
        if action == "get":
            handle = registry.get_or_create(str(target), force_new)
            assert handle.disposed_by_owner is False
            assert handle.session.serial not in user_closed
        elif action == "dispose":
            registry.dispose(str(target))
        elif action == "close" and host.created:
            session = host.created[int(target) % len(host.created)]
            user_closed.add(session.serial)
            host.fire_close(session)
        elif action == "dispose_all":
            registry.dispose_all()

        live = [registry.get(name) for name in registry.names()]
        assert all(handle is not None and not handle.disposed_by_owner for handle in live)
        assert len({id(handle.session) for handle in live}) == len(live)
        for name in registry.names():
            assert registry.get(name).name == name
            assert registry.get(name).session.serial not in user_closed

    for session in host.created:
        assert session.dispose_calls <= 1
