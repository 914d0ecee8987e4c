#tests/test_ratelimit.py
import threading

from tracker.ratelimit import RateLimiter

class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

def test_blocks_after_max_attempts_within_window():
    clock = FakeClock()
    limiter = RateLimiter(3, 60, clock=clock)
    assert [limiter.allow("10.0.0.1") for _ in range(4)] == [True, True, True, False]
    assert limiter.allow("10.0.0.2")

def test_window_slides():
    clock = FakeClock()
    limiter = RateLimiter(2, 60, clock=clock)
    assert limiter.allow("10.0.0.1") and limiter.allow("10.0.0.1")
    assert not limiter.allow("10.0.0.1")
    clock.now += 61
    assert limiter.allow("10.0.0.1")

def test_localhost_is_exempt():
    limiter = RateLimiter(1, 60, clock=FakeClock())
    assert all(limiter.allow("127.0.0.1") for _ in range(5))

def test_reset_clears_attempts():
    limiter = RateLimiter(1, 60, clock=FakeClock())
    assert limiter.allow("10.0.0.1")
    assert not limiter.allow("10.0.0.1")
    limiter.reset()
    assert limiter.allow("10.0.0.1")

def test_idle_addresses_are_dropped():
    clock = FakeClock()
    limiter = RateLimiter(2, 60, clock=clock)
    for i in range(5):
        limiter.allow(f"10.0.1.{i}")
    assert len(limiter._attempts) == 5
    clock.now += 61
    assert limiter.allow("10.0.2.1")
    assert list(limiter._attempts) == ["10.0.2.1"]

def test_sweep_keeps_addresses_still_in_window():
    clock = FakeClock()
    limiter = RateLimiter(1, 60, clock=clock)
    limiter.allow("10.0.0.1")
    clock.now += 59
    limiter.allow("10.0.0.2")
    clock.now += 2
    # first address is stale, second still blocked
    assert not limiter.allow("10.0.0.2")
    assert list(limiter._attempts) == ["10.0.0.2"]

def test_concurrent_attempts_never_exceed_limit():
    limiter = RateLimiter(50, 60, clock=FakeClock())
    results = []
    lock = threading.Lock()

    def hammer():
        for _ in range(20):
            ok = limiter.allow("10.0.0.9")
            with lock:
                results.append(ok)

    threads = [threading.Thread(target=hammer) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results.count(True) == 50
