"""
Client module - Python client for the Talent Portal API.

Usage:
    from talent_portal.client import PortalClient, SessionStore

    client = PortalClient("http://localhost:8000/api", SessionStore("~/.talent_portal/session.json"))
    client.login("a@b.com", "Abcd123!")
"""
from talent_portal.client.api_client import PortalAPIError, PortalClient
from talent_portal.client.session_cache import SessionData, SessionStore
from talent_portal.client.session_timeout import SessionTimeout

__all__ = [
    "PortalAPIError",
    "PortalClient",
    "SessionData",
    "SessionStore",
    "SessionTimeout",
]
