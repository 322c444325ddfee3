"""Verification Service - FastAPI application for certificate preflight checks."""

from .main import app

__all__ = ['app']
