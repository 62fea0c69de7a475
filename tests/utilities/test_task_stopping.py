import asyncio
import logging

import pytest

from settle._cogs.aiokits.aiotasks import stop, wait

pytestmark = pytest.mark.looptime


async def simple() -> None:
    await asyncio.Event().wait()


async def test_wait_with_no_tasks():
    done, pending = await wait([])
    assert not done
    assert not pending


async def test_wait_for_the_first_completed(looptime):
    task1 = asyncio.create_task(asyncio.sleep(5))
    task2 = asyncio.create_task(simple())
    done, pending = await wait([task1, task2], return_when=asyncio.FIRST_COMPLETED)
    assert done == {task1}
    assert pending == {task2}
    assert looptime == 5
    task2.cancel()


async def test_stop_with_no_tasks(caplog):
    logger = logging.getLogger()
    await stop([], title='sample', logger=logger)
    assert not caplog.messages


async def test_stop_cancels_unfinished_tasks(assert_logs, looptime):
    logger = logging.getLogger()
    task1 = asyncio.create_task(simple())
    task2 = asyncio.create_task(simple())
    await stop([task1, task2], title='sample', logger=logger)
    assert task1.cancelled()
    assert task2.cancelled()
    assert looptime == 0
    assert_logs([r"Sample: 2 unfinished session\(s\) are cancelled\."])


async def test_stop_skips_finished_tasks(assert_logs, looptime):
    logger = logging.getLogger()
    task1 = asyncio.create_task(asyncio.sleep(0))
    task2 = asyncio.create_task(simple())
    await wait([task1], return_when=asyncio.ALL_COMPLETED)
    await stop([task1, task2], title='sample', logger=logger)
    assert not task1.cancelled()
    assert task2.cancelled()
    assert_logs([r"Sample: 1 unfinished session\(s\) are cancelled\."])


async def test_stop_with_all_tasks_finished(caplog):
    logger = logging.getLogger()
    task = asyncio.create_task(asyncio.sleep(0))
    await wait([task])
    await stop([task], title='sample', logger=logger)
    assert not task.cancelled()
    assert not caplog.messages
