import asyncio
import pytest
from rallypoint.playback import PlaybackDestroyed, TimedPlayback, Timer


@pytest.mark.asyncio
async def test_completed_fires_after_duration(scheduler):
    playback = TimedPlayback(0.02, scheduler=scheduler, name="fade")
    completions = []
    playback.completed.connect(completions.append)

    playback.play()
    assert playback.is_playing
    await asyncio.sleep(0.001)
    assert completions == []

    await asyncio.sleep(0.05)
    assert completions == [playback]
    assert playback.finished
    assert not playback.is_playing

@pytest.mark.asyncio
async def test_zero_duration_never_completes_synchronously(scheduler):
    timer = Timer(0, scheduler=scheduler)
    completions = []
    timer.completed.connect(completions.append)

    timer.play()
    assert completions == []

    await asyncio.sleep(0.01)
    assert completions == [timer]

@pytest.mark.asyncio
async def test_pause_keeps_elapsed_time(scheduler):
    playback = TimedPlayback(0.1, scheduler=scheduler)
    completions = []
    playback.completed.connect(completions.append)

    playback.play()
    await asyncio.sleep(0.02)
    playback.pause()
    paused_at = playback.elapsed
    assert 0 < paused_at < 0.1

    await asyncio.sleep(0.12)
    assert completions == []
    assert playback.elapsed == paused_at

    playback.play()
    await asyncio.sleep(0.15)
    assert completions == [playback]

@pytest.mark.asyncio
async def test_play_twice_is_noop(scheduler):
    timer = Timer(0.01, scheduler=scheduler)
    completions = []
    timer.completed.connect(completions.append)

    timer.play()
    timer.play()
    await asyncio.sleep(0.04)

    assert len(completions) == 1

@pytest.mark.asyncio
async def test_replay_after_completion_restarts(scheduler):
    timer = Timer(0.01, scheduler=scheduler)
    completions = []
    timer.completed.connect(completions.append)

    timer.play()
    await asyncio.sleep(0.03)
    timer.play()
    await asyncio.sleep(0.03)

    assert len(completions) == 2

@pytest.mark.asyncio
async def test_destroy_stops_and_drops_subscribers(scheduler):
    timer = Timer(0.01, scheduler=scheduler)
    completions = []
    timer.completed.connect(completions.append)

    timer.play()
    timer.destroy()
    timer.destroy()
    await asyncio.sleep(0.03)

    assert completions == []
    assert timer.completed.subscriber_count == 0
    with pytest.raises(PlaybackDestroyed):
        timer.play()

def test_negative_duration_rejected():
    with pytest.raises(ValueError):
        TimedPlayback(-1)
