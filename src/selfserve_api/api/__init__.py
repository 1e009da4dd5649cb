"""
selfserve_api.api

API package for the SelfServe hotel-services API.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, request/response models and error rendering.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + auth guards + repositories.
