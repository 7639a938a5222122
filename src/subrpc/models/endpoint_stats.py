"""Running health counters for a single endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, NonNegativeFloat, NonNegativeInt


class EndpointStats(BaseModel):
    """Simple stats to help pick the best endpoint.

    Owned by exactly one [Endpoint][subrpc.models.endpoint.Endpoint] and
    mutated only through [record()][subrpc.models.endpoint_stats.EndpointStats.record].

    Attributes:
        failures: Number of failed probes.
        success: Number of successful probes.
        latency: Blended latency in seconds (``0.0`` until a timed
            success has been recorded).
    """

    model_config = ConfigDict(validate_assignment=True)

    failures: NonNegativeInt = 0
    success: NonNegativeInt = 0
    latency: NonNegativeFloat = 0.0

    def record(self, success: bool, latency: float | None = None) -> None:
        """Fold one probe outcome into the counters.

        On success the ``success`` counter is incremented first and, when a
        latency sample is given, the stored latency becomes
        ``(sample * success + sample) / success`` using the incremented
        count. This is not a running mean: it weights the latest sample
        only. A failure only increments ``failures``.
        """
        if success:
            self.success += 1
            if latency is not None:
                self.latency = (latency * self.success + latency) / self.success
        else:
            self.failures += 1

    def score(self) -> float | None:
        """Ranking value, higher is better.

        Computed as ``(success - failures) / latency / 10`` with signed
        arithmetic, so more failures than successes gives a negative score.

        Returns:
            The score, or ``None`` when no timed success was ever recorded
            (``latency == 0``). Such endpoints are unranked.
        """
        if self.latency == 0:
            return None
        return (self.success - self.failures) * 1.0 / self.latency / 10.0
