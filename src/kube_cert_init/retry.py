"""Wait policy for the blocking retry loops.

Every loop that waits on the control plane (secret preflight, approval
polling) asks a WaitPolicy to pause between attempts. The default policy
waits a fixed five seconds forever; tests inject a no-op sleep, and callers
that need a bound can set a deadline or a cancellation event.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from kube_cert_init.exceptions import WaitCancelledError

DEFAULT_INTERVAL = 5.0


@dataclass(frozen=True, slots=True)
class WaitPolicy:
    """Fixed-interval wait policy with an optional deadline and cancellation.

    Attributes:
        interval: Seconds to wait between attempts.
        max_wait: Total seconds a single wait loop may spend waiting.
            None waits forever.
        cancel: Event that aborts the loop as soon as it is set.
        sleep: Sleep function, injectable so tests never block.
        clock: Monotonic clock used to measure the deadline.

    """

    interval: float = DEFAULT_INTERVAL
    max_wait: float | None = None
    cancel: threading.Event | None = None
    sleep: Callable[[float], None] = time.sleep
    clock: Callable[[], float] = time.monotonic

    def start(self) -> "WaitTracker":
        """Begin a new wait loop.

        Returns:
            A tracker measuring elapsed time for this loop only.

        """
        return WaitTracker(policy=self, started=self.clock())


class WaitTracker:
    """Per-loop state for a WaitPolicy."""

    def __init__(self, policy: WaitPolicy, started: float) -> None:
        self.policy = policy
        self.started = started
        self.attempts = 0

    def wait(self, reason: str) -> None:
        """Pause before the next attempt.

        Args:
            reason: What the loop is waiting for, used in the error message.

        Raises:
            WaitCancelledError: If the deadline has passed or the cancel
                event is set.

        """
        policy = self.policy
        self.attempts += 1

        if policy.cancel is not None and policy.cancel.is_set():
            raise WaitCancelledError(f"Cancelled while waiting for {reason}")

        if policy.max_wait is not None:
            elapsed = policy.clock() - self.started
            if elapsed + policy.interval > policy.max_wait:
                raise WaitCancelledError(
                    f"Gave up waiting for {reason} after {elapsed:.0f}s ({self.attempts} attempt(s))"
                )

        if policy.cancel is not None:
            # Event.wait returns early when the event is set
            if policy.cancel.wait(policy.interval):
                raise WaitCancelledError(f"Cancelled while waiting for {reason}")
        else:
            policy.sleep(policy.interval)
