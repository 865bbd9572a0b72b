"""Versioned API (v1). Routers live in `videotube.api.v1.routers`."""
