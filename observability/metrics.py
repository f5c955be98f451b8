import time
from prometheus_client import Counter, Histogram, start_http_server
import logging

# Configure logger
logger = logging.getLogger(__name__)

# Define metrics
REQUESTS_TOTAL = Counter(
    'replicapage_requests_total',
    'Total number of HTTP requests answered',
    ['handler', 'method', 'status']
)

REQUEST_DURATION = Histogram(
    'replicapage_request_duration_seconds',
    'Time spent answering HTTP requests',
    ['handler'],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)


class MetricsCollector:
    """
    Metrics collector for ReplicaPage.
    Provides methods for recording request metrics and exposing them.
    """

    @staticmethod
    def record_request(handler, method, status, duration):
        """
        Record an answered request.

        Args:
            handler (str): "images" or "page"
            method (str): HTTP method
            status (int): Response status code
            duration (float): Time to produce the response in seconds
        """
        REQUESTS_TOTAL.labels(handler=handler, method=method, status=str(status)).inc()
        REQUEST_DURATION.labels(handler=handler).observe(duration)
        logger.debug(f"Recorded {method} request for {handler}: {status} in {duration:.3f}s")

    @staticmethod
    def request_timer():
        """
        Context manager measuring elapsed time.

        Returns:
            context manager: Timer whose `duration` is set on exit
        """
        class Timer:
            def __enter__(self):
                self.start_time = time.time()
                self.duration = 0.0
                return self

            def __exit__(self, exc_type, exc_val, exc_tb):
                self.duration = time.time() - self.start_time

        return Timer()

    @staticmethod
    def start_exporter(port):
        """
        Expose metrics over HTTP on a dedicated port.

        Args:
            port (int): Port for the Prometheus scrape endpoint
        """
        start_http_server(port)
        logger.info(f"Metrics exposed on port {port}")


# Create a singleton instance
metrics = MetricsCollector()
