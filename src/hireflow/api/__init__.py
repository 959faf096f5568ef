"""
HTTP API.
"""

from hireflow.api.app import create_app

__all__ = ["create_app"]
