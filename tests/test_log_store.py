"""Durability of the append-only log backend."""

import asyncio
import json
import os
import threading

import pytest

from model.record import Record
from repository.log_store import LogRecordStore
from repository.record_store import RecordNotFound, StoreError

pytestmark = pytest.mark.asyncio


def _lines(path):
    with open(path, encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


async def test_state_survives_reopen(tmp_path):
    path = str(tmp_path / "db" / "records.log")
    s = await LogRecordStore(path).open()
    await s.put("abcd", Record(paused=True, data={"k": "v"}))
    await s.put("efgh", None)
    await s.put("ijkl", Record())
    await s.delete("ijkl")
    await s.close()

    reopened = await LogRecordStore(path).open()
    try:
        assert await reopened.get("abcd") == Record(paused=True, data={"k": "v"})
        assert await reopened.get("efgh") == Record()
        with pytest.raises(RecordNotFound):
            await reopened.get("ijkl")
        assert set(await reopened.get_paused()) == {"abcd"}
        assert await reopened.key_count() == 2
    finally:
        await reopened.close()


async def test_writes_hit_disk_before_returning(log_store):
    await log_store.put("abcd", Record(paused=True))
    await log_store.delete("abcd")
    entries = _lines(log_store.path)
    assert entries[-2] == {"op": "put", "key": "abcd", "record": {"paused": True, "data": None}}
    assert entries[-1] == {"op": "delete", "key": "abcd"}


async def test_deleting_absent_key_writes_nothing(log_store):
    before = os.path.getsize(log_store.path)
    await log_store.delete("missing")
    assert os.path.getsize(log_store.path) == before


async def test_close_compacts_to_one_line_per_key(tmp_path):
    path = str(tmp_path / "records.log")
    s = await LogRecordStore(path).open()
    for i in range(5):
        await s.put("abcd", Record(data=i))
    await s.put("gone", Record())
    await s.delete("gone")
    await s.close()

    assert _lines(path) == [
        {"op": "put", "key": "abcd", "record": {"paused": False, "data": 4}}
    ]


async def test_torn_and_garbage_lines_are_skipped(tmp_path):
    path = tmp_path / "records.log"
    good = json.dumps({"op": "put", "key": "abcd", "record": {"paused": True}})
    path.write_text(
        good + "\n"
        + "not json at all\n"
        + json.dumps({"op": "rename", "key": "abcd"}) + "\n"
        + '{"op": "put", "key": "efgh", "rec',
        encoding="utf-8",
    )

    s = await LogRecordStore(str(path)).open()
    try:
        assert await s.key_count() == 1
        assert await s.get("abcd") == Record(paused=True)
        # Appends after recovery land on a clean line
        await s.put("ijkl", Record())
    finally:
        await s.close()

    reopened = await LogRecordStore(str(path)).open()
    try:
        assert set(await reopened.find("")) == {"abcd", "ijkl"}
    finally:
        await reopened.close()


async def test_failed_fsync_raises_store_error_and_changes_nothing(
    log_store, monkeypatch
):
    await log_store.put("abcd", Record(data="old"))

    def boom(fd):
        raise OSError(5, "Input/output error")

    monkeypatch.setattr(os, "fsync", boom)
    with pytest.raises(StoreError) as exc:
        await log_store.put("abcd", Record(paused=True, data="new"))
    with pytest.raises(StoreError):
        await log_store.delete("abcd")
    monkeypatch.undo()

    assert isinstance(exc.value.cause, OSError)
    assert await log_store.get("abcd") == Record(data="old")
    assert await log_store.get_paused() == {}
    assert _lines(log_store.path)[-1]["record"] == {"paused": False, "data": "old"}


async def test_unserialisable_data_is_a_store_error(log_store):
    with pytest.raises(StoreError):
        await log_store.put("abcd", Record(data=object()))
    assert await log_store.key_count() == 0


async def test_put_after_close_is_a_store_error(tmp_path):
    s = await LogRecordStore(str(tmp_path / "records.log")).open()
    await s.close()
    with pytest.raises(StoreError):
        await s.put("abcd", Record())
    # close is idempotent
    await s.close()


async def test_back_to_back_failed_appends_leave_a_clean_log(log_store, monkeypatch):
    await log_store.put("abcd", Record(data="old"))

    def boom(fd):
        raise OSError(5, "Input/output error")

    monkeypatch.setattr(os, "fsync", boom)
    with pytest.raises(StoreError):
        await log_store.put("abcd", Record(paused=True, data="new"))
    with pytest.raises(StoreError):
        await log_store.delete("abcd")
    monkeypatch.undo()

    await log_store.put("efgh", Record(data="acked"))

    # Simulate a crash: drop the handle without the compaction close() does
    log_store._fh.close()
    log_store._fh = None
    with open(log_store.path, "rb") as f:
        raw = f.read()
    assert b"\x00" not in raw
    assert [e["op"] for e in _lines(log_store.path)] == ["put", "put"]

    reopened = await LogRecordStore(log_store.path).open()
    try:
        assert await reopened.get("abcd") == Record(data="old")
        assert await reopened.get("efgh") == Record(data="acked")
        assert await reopened.key_count() == 2
    finally:
        await reopened.close()


async def test_reads_do_not_block_the_loop_during_a_slow_write(log_store, monkeypatch):
    entered = threading.Event()
    release = threading.Event()
    real_fsync = os.fsync

    def slow_fsync(fd):
        entered.set()
        release.wait(5)
        real_fsync(fd)

    monkeypatch.setattr(os, "fsync", slow_fsync)
    put = asyncio.create_task(log_store.put("abcd", Record()))
    assert await asyncio.to_thread(entered.wait, 5)

    count = asyncio.create_task(log_store.key_count())
    # The loop keeps ticking while the read waits for the writer's lock
    for _ in range(5):
        await asyncio.sleep(0.01)
    assert not count.done()

    release.set()
    await put
    assert await count == 1
    monkeypatch.undo()
