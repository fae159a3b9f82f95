"""
Infrastructure Adapters

Integrations between the form model and web frameworks.

Key adapters:
- fasthtml: FastHTML component conversion, posted data and session storage
"""

from .fasthtml import (
    apply_form_data,
    control_from_ft,
    form_from_ft,
    location_from_request,
    session_storage,
)

__all__ = [
    "apply_form_data",
    "control_from_ft",
    "form_from_ft",
    "location_from_request",
    "session_storage",
]
