"""
Error taxonomy shared by repositories, view models and routes.

ConfigurationError is fatal and raised while the application is created.
RemoteError wraps any failure reported by Supabase for a single operation.
ValidationError is raised locally, before any network call is made.
"""

from typing import List, Optional


class PortfolioError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(PortfolioError):
    status_code = 500


class RemoteError(PortfolioError):
    status_code = 502

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, status_code=status_code)
        self.table = table
        self.operation = operation


class ValidationError(PortfolioError):
    status_code = 422

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)
