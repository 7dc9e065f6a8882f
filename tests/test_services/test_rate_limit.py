"""Tests for the per-client enquiry rate limiter."""

import time

from pg_discovery.services.rate_limit import EnquiryRateLimiter


class TestEnquiryRateLimiter:
    def test_allows_up_to_limit(self):
        limiter = EnquiryRateLimiter(limit=3, window_seconds=60)
        assert [limiter.hit("1.2.3.4") for _ in range(3)] == [None, None, None]
        retry_after = limiter.hit("1.2.3.4")
        assert retry_after is not None
        assert 0 < retry_after <= 60

    def test_remaining_counts_down(self):
        limiter = EnquiryRateLimiter(limit=2, window_seconds=60)
        assert limiter.remaining("ip") == 2
        limiter.hit("ip")
        assert limiter.remaining("ip") == 1

    def test_rejected_hits_are_not_counted(self):
        limiter = EnquiryRateLimiter(limit=1, window_seconds=60)
        limiter.hit("ip")
        first_retry = limiter.hit("ip")
        for _ in range(5):
            assert limiter.hit("ip") is not None
        assert limiter.remaining("ip") == 0
        # Still measured from the single accepted hit.
        assert limiter.hit("ip") <= first_retry

    def test_window_moves(self):
        limiter = EnquiryRateLimiter(limit=1, window_seconds=1)
        assert limiter.hit("ip") is None
        assert limiter.hit("ip") is not None
        time.sleep(1.1)
        assert limiter.hit("ip") is None

    def test_keys_are_independent(self):
        limiter = EnquiryRateLimiter(limit=1, window_seconds=60)
        assert limiter.hit("a") is None
        assert limiter.hit("b") is None
        assert limiter.hit("a") is not None

    def test_reset(self):
        limiter = EnquiryRateLimiter(limit=1, window_seconds=60)
        limiter.hit("a")
        limiter.reset()
        assert limiter.hit("a") is None
