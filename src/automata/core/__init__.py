"""Automata Core -- engine-independent primitives.

Architecture::

    errors.py      Structured error hierarchy (AutomataError, HandlerError, ...)
    logging.py     structlog configuration and scoped log context
    settings.py    AUTOMATA_* environment settings (pydantic-settings)
    data.py        Data cell and its accessor
    events.py      Per-machine listener registry (emit / destroy channels)
"""
