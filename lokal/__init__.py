"""Lokal community platform backend.

The notification subsystem lives under ``lokal.application.use_cases.notifications``;
HTTP routes are registered from ``lokal.interfaces.api.routes``.
"""
