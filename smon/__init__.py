"""Service Monitor (smon).

Single-process demo service that:
 - republishes an editable TOML roster of up/down services as a labeled gauge
 - generates synthetic request/latency/error telemetry on ``GET /``
 - exposes everything on ``/metrics`` for a Prometheus scrape

Background threads and the FastAPI worker pool share one MetricSet.
"""
