from prometheus_client import Counter, Gauge, Histogram


class ReservationMetrics:
    """
    Reservation core metrics collector

    Tracks reserve/cancel outcomes, compensating rollbacks and seat lock contention.
    """

    def __init__(self) -> None:
        self.reservation_requests = Counter(
            'bus_reservation_requests_total',
            'Total seat reservation requests',
            ['result'],  # result: success/seat_unavailable/invalid/not_found/storage_failure
        )

        self.reservation_duration = Histogram(
            'bus_reservation_duration_seconds',
            'Seat reservation processing time',
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        self.cancellation_requests = Counter(
            'bus_cancellation_requests_total',
            'Total booking cancellation requests',
            ['result'],
        )

        self.compensating_rollbacks = Counter(
            'bus_reservation_compensations_total',
            'Ledger records deleted because the seat could not be occupied',
        )

        self.storage_retries = Counter(
            'bus_reservation_storage_retries_total',
            'Reserve units retried after transient storage contention',
        )

        self.lock_timeouts = Counter(
            'bus_seat_lock_timeouts_total',
            'Seat lock acquisitions that exceeded the bounded wait',
        )

        self.seats_in_flight = Gauge(
            'bus_seat_reservations_in_flight',
            'Reserve/cancel operations currently holding a seat lock',
        )

    def record_reservation(self, *, result: str, duration: float) -> None:
        self.reservation_requests.labels(result=result).inc()
        self.reservation_duration.observe(duration)

    def record_cancellation(self, *, result: str) -> None:
        self.cancellation_requests.labels(result=result).inc()


# Global metrics instance
metrics = ReservationMetrics()
