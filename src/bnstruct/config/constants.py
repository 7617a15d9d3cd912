DEFAULTS = {
    # Laplace count used when a call does not pass one
    "LAPLACE_COUNT": 1,
    # Root log level applied by configure_logging()
    "LOG_LEVEL": "INFO",
    # Record format applied by configure_logging()
    "LOG_FORMAT": "%(asctime)s %(levelname)s %(name)s %(message)s",
}
