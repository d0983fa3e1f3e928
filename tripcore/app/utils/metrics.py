"""Prometheus metrics for itinerary mutations."""

from prometheus_client import Counter, Histogram

itinerary_mutations_total = Counter(
    "itinerary_mutations_total",
    "Total itinerary mutations by final outcome",
    ["mutation", "outcome"],
)

itinerary_write_conflicts_total = Counter(
    "itinerary_write_conflicts_total",
    "Conditional writes rejected because the document version moved on",
    ["mutation"],
)

itinerary_mutation_latency_ms = Histogram(
    "itinerary_mutation_latency_ms",
    "Itinerary mutation latency in milliseconds, all attempts included",
    ["mutation", "outcome"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000, 2500],
)


class PrometheusMutationMetrics:
    """Prometheus-based mutation metrics implementation."""

    def record(self, mutation: str, outcome: str, latency_ms: float) -> None:
        """Record the final outcome and latency of a mutation."""
        itinerary_mutations_total.labels(mutation=mutation, outcome=outcome).inc()
        itinerary_mutation_latency_ms.labels(mutation=mutation, outcome=outcome).observe(
            latency_ms
        )

    def inc_conflict(self, mutation: str) -> None:
        """Increment write-conflict counter."""
        itinerary_write_conflicts_total.labels(mutation=mutation).inc()
