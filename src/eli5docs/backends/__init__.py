"""Explanation backends: remote provider, placeholder, selection."""

from eli5docs.backends.base import ExplanationBackend, ExplanationRequest
from eli5docs.backends.remote import RemoteBackend
from eli5docs.backends.selector import BackendSelector, default_selector
from eli5docs.backends.stub import StubBackend, placeholder_explanation

__all__ = [
    "BackendSelector",
    "ExplanationBackend",
    "ExplanationRequest",
    "RemoteBackend",
    "StubBackend",
    "default_selector",
    "placeholder_explanation",
]
