"""
Web viewer transport.
"""

from dircompare.web.api import CompareAPI, create_app, run_server

__all__ = [
    'CompareAPI',
    'create_app',
    'run_server',
]
