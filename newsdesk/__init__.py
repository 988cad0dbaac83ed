"""newsdesk: cache-aside topic search over a rate-limited news API."""

__version__ = "0.1.0"
