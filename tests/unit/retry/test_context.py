from __future__ import annotations

from preemptive.retry import RetryContext

##################################
#     Tests for RetryContext     #
##################################


def test_retry_context_defaults() -> None:
    context = RetryContext(max_retries=3)
    assert context.max_retries == 3
    assert context.attempt == 1
    assert context.sends == 0
    assert context.redirects == 0


def test_retry_context_next_attempt() -> None:
    context = RetryContext(max_retries=3)
    assert context.next_attempt() == 2
    assert context.next_attempt() == 3
    assert context.attempt == 3


def test_retry_context_instances_are_independent() -> None:
    context1 = RetryContext(max_retries=3)
    context2 = RetryContext(max_retries=3)
    context1.next_attempt()
    assert context2.attempt == 1
