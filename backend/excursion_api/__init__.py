"""Excursion booking API: authentication and refresh-token core.

Exposes :func:`excursion_api.factory.create_app` so WSGI servers and the
``flask`` CLI can use ``excursion_api:create_app()`` directly.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
