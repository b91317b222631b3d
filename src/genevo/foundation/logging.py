from __future__ import annotations

import logging


def configure_genevo_logging(*, level: int = logging.INFO) -> None:
    """
    Configure a minimal console logger for genevo.

    Notes:
        - Opt-in only; library modules never call logging.basicConfig().
        - The handler is only attached if neither the root logger nor the "genevo" logger has handlers.
    """
    root = logging.getLogger()
    genevo_logger = logging.getLogger("genevo")

    if root.handlers or genevo_logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    genevo_logger.addHandler(handler)
    genevo_logger.setLevel(level)
    genevo_logger.propagate = False


__all__ = ["configure_genevo_logging"]
