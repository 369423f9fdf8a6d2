"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Run statuses, defaults, and other named constants
- exceptions: Custom exception hierarchy
- ingress: HTTP boundary helpers for the proxy routes
"""
