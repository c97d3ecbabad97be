import logging
import sys

def setup_logging():
    """
    Configure logging for the application.

    Sets up logging to stdout. Works well with Docker and Kubernetes log
    collectors, which add their own timestamps.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # Reduce HTTP client noise in logs (request lines include query strings)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logging.getLogger("route_optimizer")


# Create global logger instance
logger = setup_logging()
