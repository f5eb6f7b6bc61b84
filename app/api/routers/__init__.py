"""
app/api/routers package marker.
"""

from app.api.routers.custom_audience import router as custom_audience_router
from app.api.routers.meta_ads import router as meta_ads_router

__all__ = [
    "custom_audience_router",
    "meta_ads_router",
]
