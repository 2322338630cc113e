from __future__ import annotations

import threading

import pytest

from udpshooter.core.stats.rwlock import ReadWriteLock


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    lock.acquire_read()
    got = threading.Event()

    def second_reader():
        with lock.read_locked():
            got.set()

    t = threading.Thread(target=second_reader, daemon=True)
    t.start()
    assert got.wait(1.0)
    t.join(1.0)
    lock.release_read()
    assert lock.snapshot() == {"readers": 0, "writer": False}


def test_writer_waits_for_reader():
    lock = ReadWriteLock()
    lock.acquire_read()
    wrote = threading.Event()

    def writer():
        with lock.write_locked():
            wrote.set()

    t = threading.Thread(target=writer, daemon=True)
    t.start()
    assert not wrote.wait(0.2)
    lock.release_read()
    assert wrote.wait(1.0)
    t.join(1.0)


def test_reader_waits_for_active_writer():
    lock = ReadWriteLock()
    lock.acquire_write()
    read = threading.Event()

    def reader():
        with lock.read_locked():
            read.set()

    t = threading.Thread(target=reader, daemon=True)
    t.start()
    assert not read.wait(0.2)
    lock.release_write()
    assert read.wait(1.0)
    t.join(1.0)


def test_unbalanced_release_raises():
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()
