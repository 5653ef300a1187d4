# ABOUTME: Cross-cutting utilities and shared infrastructure
# ABOUTME: Supporting services: logging, rich console tables, progress display

"""
Utils Layer: Shared infrastructure and cross-cutting concerns

This layer provides:
- Logging configuration and progress tracking
- Rich table builders for the CLI
- Shared helpers used across layers

Data Flow: Supporting services for all other layers
"""

from . import logging

__all__ = [
    "logging",
]
