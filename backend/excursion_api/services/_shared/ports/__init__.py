"""
excursion_api.services._shared.ports
====================================

*Ports* (hexagonal interfaces) that keep the service layer independent from
token infrastructure.

Modules
-------
- :mod:`token_signer`:
    Defines :class:`~.TokenSigner` and :class:`~.AccessClaims`: minting
    access tokens and extracting claims from expired ones.

Concrete adapters live under ``excursion_api.infra``.
"""

from __future__ import annotations

from .token_signer import AccessClaims, ClaimsSource, TokenSigner

__all__ = [
    "AccessClaims",
    "ClaimsSource",
    "TokenSigner",
]
