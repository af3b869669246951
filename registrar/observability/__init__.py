"""Observability layer: in-process enrollment metrics. No external SaaS."""

from registrar.observability.metrics import EnrollmentMetrics

__all__ = [
    "EnrollmentMetrics",
]
