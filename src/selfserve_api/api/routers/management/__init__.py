"""
selfserve_api.api.routers.management

Staff-facing management API package.

Responsibilities:
- Group the routers hotel employees use to administer their hotel.
"""
