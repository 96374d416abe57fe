"""
Router utility functions.

Contains helpers shared by the translation job and translation routers.
"""

from i18n_backend.api.routers.router_utils.error_handling import handle_translation_errors

__all__ = ["handle_translation_errors"]
