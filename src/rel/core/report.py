from collections.abc import Iterable

from loguru import logger


def log_summary(label: str, values: Iterable[str]) -> None:
    """Log a one-line listing such as ``Products: [foo:Foo, bar:Bar]``."""
    logger.info("{}: [{}]", label, ", ".join(values))
