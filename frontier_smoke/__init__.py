"""
Frontier auth smoke test.

Walks a local Frontier deployment through mail OTP login, session and bearer
token access, service-account token access and logout.
"""

__version__ = "0.1.0"
