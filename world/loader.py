"""
fishtank module: world/loader.py

Plug in an external simulation engine by dotted path ("pkg.module:factory").
"""

from __future__ import annotations
import importlib
import logging

log = logging.getLogger(__name__)


def load_simulation(path: str, **kwargs):
    """
    Import ``module:attr`` and call it to build a simulation collaborator.

    The result must expose step() and world().
    """
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"expected 'module:factory', got {path!r}")

    module = importlib.import_module(module_name)
    factory = module
    for part in attr.split("."):
        factory = getattr(factory, part)

    sim = factory(**kwargs)
    for name in ("step", "world"):
        if not callable(getattr(sim, name, None)):
            raise TypeError(f"{path} built {type(sim).__name__}, which has no {name}()")

    log.info("loaded simulation %s (%s)", path, type(sim).__name__)
    return sim
