import asyncio
from datetime import datetime, timezone

import pytest

from alert_data.region import RegionID
from alert_data.scraper import Status, StatusFeed


def make_status(minute=0, enabled=True):
    return Status(RegionID.KYIV_CITY, enabled, datetime(2024, 8, 22, 8, minute, tzinfo=timezone.utc))


@pytest.mark.asyncio
async def test_put_then_get():
    feed = StatusFeed()
    status = make_status()
    assert await feed.put(status) is True
    assert await feed.get() == status


@pytest.mark.asyncio
async def test_put_blocks_while_full_without_timeout():
    feed = StatusFeed(maxsize=1)
    await feed.put(make_status(1))
    blocked = asyncio.create_task(feed.put(make_status(2)))
    await asyncio.sleep(0.05)
    assert not blocked.done()

    assert (await feed.get()).updated_at.minute == 1
    assert await asyncio.wait_for(blocked, 1) is True
    assert (await feed.get()).updated_at.minute == 2


@pytest.mark.asyncio
async def test_put_with_timeout_drops_when_full():
    feed = StatusFeed(maxsize=1)
    await feed.put(make_status(1))
    assert await feed.put(make_status(2), timeout=0.01) is False
    assert (await feed.get()).updated_at.minute == 1


@pytest.mark.asyncio
async def test_close_wakes_waiting_consumers():
    feed = StatusFeed()
    consumers = [asyncio.create_task(feed.get()) for _ in range(3)]
    await asyncio.sleep(0.01)
    feed.close()
    results = await asyncio.wait_for(asyncio.gather(*consumers), 1)
    assert results == [None, None, None]


@pytest.mark.asyncio
async def test_pending_item_is_drained_before_end_of_stream():
    feed = StatusFeed(maxsize=1)
    status = make_status(5)
    await feed.put(status)
    feed.close()
    feed.close()  # idempotent

    assert feed.closed
    assert await feed.get() == status
    assert await feed.get() is None
    assert await feed.get() is None


@pytest.mark.asyncio
async def test_async_iteration_ends_on_close():
    feed = StatusFeed(maxsize=1)

    async def produce():
        for minute in range(3):
            await feed.put(make_status(minute))
        feed.close()

    producer = asyncio.create_task(produce())
    received = [status.updated_at.minute async for status in feed]
    await producer
    assert received == [0, 1, 2]


@pytest.mark.asyncio
async def test_put_after_close_is_an_error():
    feed = StatusFeed()
    feed.close()
    with pytest.raises(RuntimeError):
        await feed.put(make_status())


@pytest.mark.asyncio
async def test_close_after_put_wakes_every_consumer():
    feed = StatusFeed(maxsize=1)
    first = asyncio.create_task(feed.get())
    second = asyncio.create_task(feed.get())
    await asyncio.sleep(0.01)

    status = make_status(7)
    await feed.put(status)
    feed.close()

    done, pending = await asyncio.wait({first, second}, timeout=1)
    assert not pending
    assert sorted([first.result(), second.result()], key=lambda s: s is None) == [status, None]


@pytest.mark.asyncio
async def test_close_ends_iteration_for_every_consumer():
    feed = StatusFeed(maxsize=1)
    received = []

    async def consume():
        async for status in feed:
            received.append(status)

    consumers = [asyncio.create_task(consume()) for _ in range(2)]
    await asyncio.sleep(0.01)
    await feed.put(make_status(3))
    feed.close()

    await asyncio.wait_for(asyncio.gather(*consumers), 1)
    assert [s.updated_at.minute for s in received] == [3]
