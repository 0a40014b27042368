from prometheus_client import start_http_server, Gauge, Counter
import logging
import socket

logger = logging.getLogger(__name__)

# Metric objects live at module level: prometheus_client refuses to register
# the same name twice in the default registry.
STATUSES_APPLIED = Counter(
    'alert_statuses_applied_total',
    'Region statuses merged into the alert data',
    ['source']
)

STATUSES_STALE = Counter(
    'alert_statuses_stale_total',
    'Region statuses skipped because a newer one was already on file'
)

UPDATES_FORWARDED = Counter(
    'alert_updates_forwarded_total',
    'Live status changes delivered to the updates feed'
)

UPDATES_DISCARDED = Counter(
    'alert_updates_discarded_total',
    'Live status changes dropped after the discard timeout'
)

RELAY_FAILURES = Counter(
    'alert_relay_failures_total',
    'Status changes that could not be relayed to Telegram'
)

ACTIVE_REGIONS = Gauge(
    'alert_active_regions',
    'Number of regions with an alert currently enabled'
)


class MetricsServer:
    """
    Exposes Prometheus metrics over HTTP.
    """

    def __init__(self, port: int = 8000):
        self.port = port
        self._server_started = False

    def _is_port_in_use(self) -> bool:
        """Check if port is already bound."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            return s.connect_ex(('localhost', self.port)) == 0

    def start(self):
        """Start Prometheus HTTP server with collision handling."""
        if self._server_started:
            logger.info(f"Metrics server already running on port {self.port}")
            return

        if self._is_port_in_use():
            logger.warning(f"Port {self.port} already in use. Assuming metrics server is external.")
            self._server_started = True
            return

        try:
            start_http_server(self.port)
            self._server_started = True
            logger.info(f"Metrics server exposed at port {self.port}")
        except OSError as e:
            logger.error(f"Failed to start metrics server: {e}")
