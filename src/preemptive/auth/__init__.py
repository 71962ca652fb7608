r"""Credential storage, per-host auth state and preemptive
authentication."""

from __future__ import annotations

__all__ = [
    "AuthCache",
    "AuthScope",
    "AuthState",
    "BasicScheme",
    "CredentialStore",
    "Credentials",
    "PreemptiveAuthInjector",
]

from preemptive.auth.cache import AuthCache, AuthState, BasicScheme
from preemptive.auth.credentials import AuthScope, CredentialStore, Credentials
from preemptive.auth.preemptive import PreemptiveAuthInjector
