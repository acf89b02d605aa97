"""
Cancelable Handles - Unit Tests

Covers variant resolution and the side effect of cancel() per variant.
"""
import asyncio
import functools
import pytest
from unittest.mock import Mock
from rallypoint.core.events import Signal
from rallypoint.handles import (
    HandleKind,
    InvalidHandleKind,
    PlaybackHandle,
    ScheduledHandle,
    SuspendingTeardown,
    TeardownHandle,
    cancel,
    cancel_async,
    classify_handle,
    is_cancelable,
)
from rallypoint.playback import TimedPlayback


class TestClassification:

    def test_handle_objects(self):
        assert classify_handle(TeardownHandle(lambda: None)) is HandleKind.HANDLE
        assert classify_handle(Signal().connect(print)) is HandleKind.HANDLE

    def test_foreign_subscription(self):
        connection = Mock(spec=["disconnect"])
        assert classify_handle(connection) is HandleKind.SUBSCRIPTION

    def test_playback(self):
        playback = Mock(spec=["pause", "destroy", "play"])
        assert classify_handle(playback) is HandleKind.PLAYBACK

    def test_scheduled(self):
        loop = asyncio.new_event_loop()
        try:
            future = loop.create_future()
            timer = loop.call_later(10, print)
            assert classify_handle(future) is HandleKind.SCHEDULED
            assert classify_handle(timer) is HandleKind.SCHEDULED
            timer.cancel()
        finally:
            loop.close()

    def test_teardown(self):
        assert classify_handle(lambda: None) is HandleKind.TEARDOWN
        assert classify_handle(functools.partial(print, "bye")) is HandleKind.TEARDOWN

    @pytest.mark.parametrize("value", [42, "text", object(), [1, 2]])
    def test_invalid_values(self, value):
        with pytest.raises(InvalidHandleKind):
            classify_handle(value)
        assert not is_cancelable(value)

    def test_invalid_kind_is_a_type_error(self):
        with pytest.raises(TypeError):
            cancel(3.14)

    def test_signal_is_not_a_handle(self):
        """A notification source is not a subscription: its disconnect() needs the callback."""
        sig = Signal("evt")
        sig.connect(print)

        with pytest.raises(InvalidHandleKind):
            classify_handle(sig)
        with pytest.raises(InvalidHandleKind):
            cancel(sig)
        assert sig.subscriber_count == 1

    def test_capabilities_needing_arguments_rejected(self):
        class Channel:
            def disconnect(self, callback):
                pass

        with pytest.raises(InvalidHandleKind):
            classify_handle(Channel())
        with pytest.raises(InvalidHandleKind):
            classify_handle(lambda reason: None)


class TestCancel:

    def test_none_is_noop(self):
        cancel(None)

    def test_teardown_callable_invoked(self):
        calls = []

        def teardown():
            calls.append("released")
            return "ignored"

        cancel(teardown)
        assert calls == ["released"]

    def test_teardown_handle_runs_once(self):
        teardown = Mock()
        handle = TeardownHandle(teardown)

        cancel(handle)
        cancel(handle)
        handle.cancel()

        teardown.assert_called_once_with()
        assert handle.cancelled

    def test_teardown_handle_requires_callable(self):
        with pytest.raises(TypeError):
            TeardownHandle("not callable")

    def test_teardown_handle_context_manager(self):
        teardown = Mock()
        with TeardownHandle(teardown) as handle:
            teardown.assert_not_called()
        teardown.assert_called_once_with()
        assert handle.cancelled

    def test_foreign_subscription_disconnected(self):
        connection = Mock(spec=["disconnect"])
        cancel(connection)
        connection.disconnect.assert_called_once_with()

    def test_playback_paused_then_destroyed(self):
        manager = Mock()
        playback = Mock(spec=["pause", "destroy"])
        playback.pause.side_effect = lambda: manager.pause()
        playback.destroy.side_effect = lambda: manager.destroy()

        cancel(playback)

        assert [c[0] for c in manager.mock_calls] == ["pause", "destroy"]

    def test_playback_handle(self):
        playback = TimedPlayback(1.0)
        handle = PlaybackHandle(playback)

        cancel(handle)
        cancel(handle)

        assert playback.destroyed

    def test_teardown_failure_propagates(self):
        def broken():
            raise RuntimeError("teardown failed")

        with pytest.raises(RuntimeError, match="teardown failed"):
            cancel(broken)

    def test_suspending_teardown_refused(self):
        calls = []

        async def close():
            calls.append("closed")

        with pytest.raises(SuspendingTeardown):
            cancel(close)
        handle = TeardownHandle(close)
        with pytest.raises(SuspendingTeardown):
            cancel(handle)

        assert calls == []
        assert not handle.cancelled

    def test_callable_returning_coroutine_refused(self):
        async def close():
            pass

        with pytest.raises(SuspendingTeardown):
            cancel(lambda: close())


class TestCancelScheduled:

    @pytest.mark.asyncio
    async def test_pending_task_aborted(self):
        task = asyncio.create_task(asyncio.sleep(3600))
        await asyncio.sleep(0)

        cancel(task)
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_finished_task_untouched(self):
        task = asyncio.create_task(asyncio.sleep(0, result="done"))
        await task

        cancel(task)
        cancel(ScheduledHandle(task))

        assert task.result() == "done"

    @pytest.mark.asyncio
    async def test_calling_task_not_aborted(self):
        current = asyncio.current_task()

        cancel(current)
        cancel(ScheduledHandle(current))
        await asyncio.sleep(0)

        assert not current.cancelled()

    @pytest.mark.asyncio
    async def test_loop_callback_aborted(self):
        calls = []
        timer = asyncio.get_running_loop().call_later(0.01, calls.append, 1)

        cancel(timer)
        await asyncio.sleep(0.03)

        assert calls == []
        assert timer.cancelled()

    @pytest.mark.asyncio
    async def test_foreign_cancel_done_object(self):
        job = Mock(spec=["cancel", "done"])
        job.done.return_value = False
        cancel(job)
        job.cancel.assert_called_once_with()

        finished = Mock(spec=["cancel", "done"])
        finished.done.return_value = True
        cancel(finished)
        finished.cancel.assert_not_called()


class TestCancelAsync:

    @pytest.mark.asyncio
    async def test_awaits_suspending_teardown(self):
        calls = []

        async def close():
            await asyncio.sleep(0)
            calls.append("closed")

        await cancel_async(close)
        assert calls == ["closed"]

    @pytest.mark.asyncio
    async def test_teardown_handle_async_once(self):
        calls = []

        async def close():
            calls.append("closed")

        handle = TeardownHandle(close)
        await cancel_async(handle)
        await cancel_async(handle)
        cancel(handle)

        assert calls == ["closed"]

    @pytest.mark.asyncio
    async def test_sync_variants_delegate(self):
        sig = Signal("evt")
        connection = sig.connect(print)

        await cancel_async(connection)
        await cancel_async(None)

        assert sig.subscriber_count == 0
