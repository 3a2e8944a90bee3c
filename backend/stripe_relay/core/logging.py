import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("stripe_relay").setLevel(level.upper())
    # httpx logs every request URL at INFO, which would include the proxy secret
    logging.getLogger("httpx").setLevel(logging.WARNING)
