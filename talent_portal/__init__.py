"""
Talent Portal
Recruitment platform backend: registration, JWT login, candidate profile.

Architecture:
- MongoDB: one document per user (identity + profile)
- FastAPI: auth and profile routes under /api
- talent_portal.client: Python client with a local session cache
"""

__version__ = "1.0.0"
