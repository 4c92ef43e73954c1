"""
Prometheus metrics for the ruleguard service.
"""
from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry


class Metrics:
    """
    Centralized metrics: HTTP traffic plus validation outcomes.
    """

    def __init__(self, service_name: str = "ruleguard", version: str = "0.1.0", registry=None):
        self.service_name = service_name
        self.version = version
        self.registry = registry or CollectorRegistry()

        # HTTP Metrics
        self.http_requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["service", "method", "path", "status"],
            registry=self.registry,
        )

        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["service", "method", "path"],
            registry=self.registry,
        )

        self.http_requests_active = Gauge(
            "http_requests_active",
            "Number of active HTTP requests",
            ["service"],
            registry=self.registry,
        )
        self.http_requests_active.labels(service=service_name).set(0)

        # Application Info
        self.app_info = Info(
            "app",
            "Application information",
            registry=self.registry,
        )
        self.app_info.info({"service": service_name, "version": version})

        self.app_up = Gauge(
            "app_up",
            "Application up status (1=up, 0=down)",
            ["service", "version"],
            registry=self.registry,
        )
        self.app_up.labels(service=service_name, version=version).set(1)

        # Validation metrics
        self.validations_total = Counter(
            "ruleguard_validations_total",
            "Payload sections validated",
            ["section", "outcome"],
            registry=self.registry,
        )

        self.validation_errors_total = Counter(
            "ruleguard_validation_errors_total",
            "Validation errors reported",
            ["section"],
            registry=self.registry,
        )

        self.unsafe_expressions_total = Counter(
            "ruleguard_unsafe_expressions_total",
            "Condition expressions rejected by the safety guard",
            registry=self.registry,
        )

    def record_validation(self, section: str, valid: bool, error_count: int = 0):
        """Record the outcome of validating one payload section."""
        outcome = "valid" if valid else "invalid"
        self.validations_total.labels(section=section, outcome=outcome).inc()
        if error_count:
            self.validation_errors_total.labels(section=section).inc(error_count)

    def record_unsafe_expression(self):
        """Record a safety guard rejection."""
        self.unsafe_expressions_total.inc()
