"""
Shared HTTP plumbing: session factory, URL building and capped body reads.
"""

from unleashed_web.network.client import base_url, build_session, host_has_cookie, read_limited

__all__ = ["base_url", "build_session", "host_has_cookie", "read_limited"]
