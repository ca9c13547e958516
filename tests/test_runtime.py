import threading

from smon.roster import ServiceRoster
from smon.runtime import ReadWriteLock, RuntimeState


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    inside = threading.Barrier(2, timeout=2)
    errors = []

    def reader():
        with lock.read():
            try:
                inside.wait()
            except threading.BrokenBarrierError as e:
                errors.append(e)

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=3)
    assert errors == []


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    order = []
    writer_in = threading.Event()

    def reader():
        writer_in.wait(timeout=2)
        with lock.read():
            order.append("read")

    t = threading.Thread(target=reader)
    t.start()
    with lock.write():
        writer_in.set()
        t.join(timeout=0.2)
        assert t.is_alive()
        order.append("write")
    t.join(timeout=2)
    assert order == ["write", "read"]


def test_record_reload_updates_watch_state():
    runtime = RuntimeState()
    roster = ServiceRoster(up=("a",))
    with runtime.config_lock.write():
        runtime.record_reload(123.0, roster)
    assert runtime.watch.last_mtime == 123.0
    assert runtime.watch.roster is roster
    assert runtime.watch.reloads == 1
