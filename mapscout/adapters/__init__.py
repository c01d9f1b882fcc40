"""Adapter package for external I/O implementations.

Purpose:
    Collect concrete implementations for domain ports (geocoding, routing,
    street-level scenes and device location) used by use cases.

Dependencies:
    HTTP adapters depend on ``requests`` through ``http_client.RetryingSession``
    and on the domain protocol definitions.

Call context:
    Imported by ``mapscout.web_ui.runtime`` for runtime wiring and by tests for
    transport-level behavior verification.
"""
