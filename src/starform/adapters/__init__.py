"""
Web adapters

Framework bindings for the creation form.
"""

from .fasthtml import RecordFormView, RecordListView, FormDispatcher, configure_app, datastar_script, malformed_body_handler

__all__ = ["RecordFormView", "RecordListView", "FormDispatcher", "configure_app", "datastar_script", "malformed_body_handler"]
