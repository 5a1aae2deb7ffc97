from __future__ import annotations

import threading

import pytest

from emulink.protocol._internal.pending_invocation import PendingInvocation
from emulink.protocol._internal.registry import PendingRegistry
from emulink.protocol.errors import DuplicateInvocation, TooManyPending, UnknownInvocation


def _pending(invocation_id: int, timeout_s=None) -> PendingInvocation:
    return PendingInvocation(invocation_id=invocation_id, command_code=1, timeout_s=timeout_s)


def test_register_and_resolve_removes_entry_and_fulfils_future():
    reg = PendingRegistry()
    p = _pending(5)
    reg.register(5, p)
    assert reg.count() == 1
    assert 5 in reg

    out = reg.resolve(5, b"payload")

    assert out is p
    assert p.future.result(timeout=0) == b"payload"
    assert reg.count() == 0
    assert 5 not in reg


def test_resolve_unknown_raises_and_leaves_others_alone():
    reg = PendingRegistry()
    p = _pending(1)
    reg.register(1, p)

    with pytest.raises(UnknownInvocation) as ei:
        reg.resolve(2, b"")

    assert ei.value.invocation_id == 2
    assert 1 in reg and reg.count() == 1
    assert not p.done()


def test_resolve_twice_raises_unknown_second_time():
    reg = PendingRegistry()
    reg.register(1, _pending(1))
    reg.resolve(1, b"")
    with pytest.raises(UnknownInvocation):
        reg.resolve(1, b"")


def test_register_duplicate_rejected_and_original_kept():
    reg = PendingRegistry()
    first = _pending(9)
    reg.register(9, first)

    with pytest.raises(DuplicateInvocation):
        reg.register(9, _pending(9))

    reg.resolve(9, b"x")
    assert first.future.result(timeout=0) == b"x"


def test_max_pending_bound():
    reg = PendingRegistry(max_pending=2)
    reg.register(1, _pending(1))
    reg.register(2, _pending(2))
    with pytest.raises(TooManyPending):
        reg.register(3, _pending(3))

    reg.resolve(1, b"")
    reg.register(3, _pending(3))
    assert reg.count() == 2


def test_discard_only_removes_matching_entry():
    reg = PendingRegistry()
    p = _pending(4)
    reg.register(4, p)

    assert reg.discard(4, _pending(4)) is False
    assert 4 in reg
    assert reg.discard(4, p) is True
    assert reg.discard(4) is False


def test_pop_expired_returns_and_removes_overdue_only():
    reg = PendingRegistry()
    slow = _pending(1, timeout_s=10.0)
    fast = _pending(2, timeout_s=0.5)
    forever = _pending(3)
    for p in (slow, fast, forever):
        reg.register(p.invocation_id, p)

    expired = reg.pop_expired(fast.created_at + 1.0)

    assert expired == [fast]
    assert reg.count() == 2
    assert 1 in reg and 3 in reg


def test_fail_all_rejects_everything():
    reg = PendingRegistry()
    ps = [_pending(i) for i in (1, 2, 3)]
    for p in ps:
        reg.register(p.invocation_id, p)

    assert reg.fail_all(RuntimeError("gone")) == 3
    assert reg.count() == 0
    for p in ps:
        with pytest.raises(RuntimeError):
            p.future.result(timeout=0)


def test_completion_callback_may_reenter_registry():
    reg = PendingRegistry()
    p = _pending(1)
    reg.register(1, p)
    seen = []
    p.add_done_callback(lambda _fut: seen.append(reg.count()))

    reg.resolve(1, b"")

    assert seen == [0]


def test_parallel_register_and_resolve_keeps_entries_consistent():
    reg = PendingRegistry()
    per_thread = 250
    pendings = {}
    barrier = threading.Barrier(4)

    def worker(base: int) -> None:
        barrier.wait()
        for i in range(per_thread):
            iid = base + i
            p = _pending(iid)
            pendings[iid] = p
            reg.register(iid, p)
            reg.resolve(iid, iid.to_bytes(4, "big"))

    threads = [threading.Thread(target=worker, args=(t * 1000 + 1,)) for t in range(4)]
    for th in threads:
        th.start()
    for th in threads:
        th.join(timeout=5.0)

    assert reg.count() == 0
    assert len(pendings) == 4 * per_thread
    for iid, p in pendings.items():
        assert p.future.result(timeout=0) == iid.to_bytes(4, "big")
