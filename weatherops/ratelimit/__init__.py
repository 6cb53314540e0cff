"""Per-client rate limiting backed by the access log."""

from .decider import BLOCKED, EXCEEDED, RateLimitDecider, RateLimitDecision

__all__ = ["BLOCKED", "EXCEEDED", "RateLimitDecider", "RateLimitDecision"]
