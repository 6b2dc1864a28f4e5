"""Revocation status responder."""

from .ocsp import OCSPService

__all__ = ["OCSPService"]
