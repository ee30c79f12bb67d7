from prometheus_client import Counter, Histogram


class ReservationMetrics:
    """
    Reservation engine core metrics collector

    Tracks admission outcomes, lifecycle transitions and authorization
    denials. Labels stay low-cardinality: outcomes are error codes, never ids.
    """

    def __init__(self) -> None:
        # ========== Admission ==========
        self.admission_requests = Counter(
            'reservation_admission_requests_total',
            'Reservation admission attempts by outcome',
            ['result'],  # admitted / category_full / event_closed / ...
        )

        self.admission_duration = Histogram(
            'reservation_admission_duration_seconds',
            'Time spent admitting a reservation, including the category lock wait',
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
        )

        # ========== Lifecycle ==========
        self.lifecycle_transitions = Counter(
            'reservation_lifecycle_transitions_total',
            'Reservation state transitions by operation and outcome',
            ['operation', 'result'],  # operation: cancel / check_in
        )

        self.capacity_changes = Counter(
            'reservation_capacity_changes_total',
            'Category capacity and removal operations by outcome',
            ['operation', 'result'],  # operation: set_capacity / delete_category / delete_event / deactivate_event
        )

        # ========== Authorization ==========
        self.authorization_denials = Counter(
            'reservation_authorization_denials_total',
            'Requests rejected by principal resolution or authorization',
            ['operation', 'code'],
        )

    # ========== Helper Methods ==========

    def record_admission(self, *, result: str, duration: float) -> None:
        self.admission_requests.labels(result=result).inc()
        self.admission_duration.observe(duration)

    def record_transition(self, *, operation: str, result: str) -> None:
        self.lifecycle_transitions.labels(operation=operation, result=result).inc()

    def record_capacity_change(self, *, operation: str, result: str) -> None:
        self.capacity_changes.labels(operation=operation, result=result).inc()

    def record_denial(self, *, operation: str, code: str) -> None:
        self.authorization_denials.labels(operation=operation, code=code).inc()


# Global metrics instance
metrics = ReservationMetrics()
