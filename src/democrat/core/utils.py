import logging
from typing import Optional


def set_logging_level(
    level: int,
    service_name: Optional[str] = None,
    environment: Optional[str] = None,
) -> None:
    """Set logging level for all democrat loggers.

    Args:
        level: The logging level to set
        service_name: Name of the service (e.g., "api", "pipeline")
        environment: Environment name (e.g., "localhost", "dev", "prod")
    """
    logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    for name in ("democrat", "backend", "__main__"):
        logging.getLogger(name).setLevel(level)

    # Suppress noisy loggers
    for name in ("httpx", "httpcore", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)

    if service_name:
        logging.getLogger(__name__).debug(
            f"Logging configured for {service_name}",
            extra={"service": service_name, "environment": environment},
        )


def truncate(text: Optional[str], limit: int) -> str:
    """Return at most `limit` leading characters of `text` ("" for None)."""
    if not text:
        return ""
    return text[:limit]
