"""
selfserve_api.api.routers.guest

Guest-facing API package.

Responsibilities:
- Group the routers guests use for their own profile, messages,
  general requests and hotel.
"""
