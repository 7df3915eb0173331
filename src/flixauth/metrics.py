import prometheus_client
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Guard against duplicated metric registration when the module is imported
# multiple times (for example, when running uvicorn with the reloader).
REQUEST_COUNT = getattr(prometheus_client, "flixauth_REQUEST_COUNT", None)
REQUEST_LATENCY = getattr(prometheus_client, "flixauth_REQUEST_LATENCY", None)
AUTH_FLOW_OUTCOMES = getattr(prometheus_client, "flixauth_AUTH_FLOW_OUTCOMES", None)
EMAILS_SENT = getattr(prometheus_client, "flixauth_EMAILS_SENT", None)

if REQUEST_COUNT is None:
    # HTTP Metrics
    REQUEST_COUNT = Counter(
        "http_requests_total", "Total HTTP requests", ["method", "endpoint", "http_status"]
    )
    REQUEST_LATENCY = Histogram(
        "http_request_latency_seconds", "HTTP request latency in seconds", ["method", "endpoint"]
    )

    # Credential flow metrics
    AUTH_FLOW_OUTCOMES = Counter(
        "auth_flow_outcomes_total",
        "Outcomes of credential flows",
        ["flow", "outcome"],  # outcome: success or a FlowErrorKind value
    )
    EMAILS_SENT = Counter(
        "emails_sent_total",
        "Transactional emails handed to the mail provider",
        ["kind"],  # kind: verification/password_reset
    )

    prometheus_client.flixauth_REQUEST_COUNT = REQUEST_COUNT  # type: ignore[attr-defined]
    prometheus_client.flixauth_REQUEST_LATENCY = REQUEST_LATENCY  # type: ignore[attr-defined]
    prometheus_client.flixauth_AUTH_FLOW_OUTCOMES = AUTH_FLOW_OUTCOMES  # type: ignore[attr-defined]
    prometheus_client.flixauth_EMAILS_SENT = EMAILS_SENT  # type: ignore[attr-defined]


def record_flow_outcome(flow: str, result) -> None:
    outcome = "success" if result.ok else str(result.kind)
    AUTH_FLOW_OUTCOMES.labels(flow=flow, outcome=outcome).inc()


def metrics_response():
    data = generate_latest()
    return data, CONTENT_TYPE_LATEST
