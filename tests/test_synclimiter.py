from telguard.synclimiter import CoreOptions, SyncLimiter


class Clock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_non_positive_interval_always_allows():
    limiter = SyncLimiter(0)
    assert all(limiter.can_sync() for _ in range(5))
    negative = SyncLimiter(-1)
    assert negative.can_sync() and negative.can_sync()


def test_first_call_allowed_then_limited():
    clock = Clock()
    limiter = SyncLimiter(5, clock)
    assert limiter.can_sync() is True
    assert limiter.can_sync() is False
    clock.now += 4.9
    assert limiter.can_sync() is False


def test_allows_again_after_interval():
    clock = Clock()
    limiter = SyncLimiter(5, clock)
    assert limiter.can_sync()
    clock.now += 5
    assert limiter.can_sync()
    assert not limiter.can_sync()


def test_interval_taken_from_options():
    options = CoreOptions(sync_interval=2, max_message_size=10)
    clock = Clock()
    limiter = SyncLimiter(options.sync_interval, clock)
    assert limiter.interval == options.sync_interval
    assert limiter.can_sync()
    assert not limiter.can_sync()