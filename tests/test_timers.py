import asyncio

from linechat.timers import SingleSlotTimer


def test_only_one_call_pending():
    async def scenario():
        timer = SingleSlotTimer("test")
        calls = []
        assert timer.schedule(0.01, lambda: calls.append(1)) is True
        assert timer.schedule(0.01, lambda: calls.append(2)) is False
        assert timer.pending is True
        await asyncio.sleep(0.05)
        assert timer.pending is False
        return calls

    assert asyncio.run(scenario()) == [1]


def test_cancel_prevents_callback_and_frees_slot():
    async def scenario():
        timer = SingleSlotTimer("test")
        calls = []
        timer.schedule(0.01, lambda: calls.append("first"))
        assert timer.cancel() is True
        assert timer.cancel() is False
        assert timer.schedule(0.01, lambda: calls.append("second")) is True
        await asyncio.sleep(0.05)
        return calls

    assert asyncio.run(scenario()) == ["second"]


def test_callback_may_reschedule_itself():
    async def scenario():
        timer = SingleSlotTimer("test")
        calls = []

        def tick():
            calls.append(len(calls))
            if len(calls) < 3:
                assert timer.schedule(0.0, tick) is True

        timer.schedule(0.0, tick)
        await asyncio.sleep(0.05)
        return calls

    assert asyncio.run(scenario()) == [0, 1, 2]
