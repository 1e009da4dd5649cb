"""
selfserve_api.auth

Identity resolution and authorization package.

Responsibilities:
- Verify bearer tokens issued by the identity provider.
- Resolve external subject ids to guest/employee principals.
- Compose authorization guards and expose them as FastAPI dependencies.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only `deps` and `identity` know about FastAPI; the rest of the package is
# framework-free so it can be unit tested with in-memory stores.
