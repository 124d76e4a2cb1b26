"""Services module - Implementation layer with all components"""

from pricewatch.services.extractors import ExtractorRegistry, SiteExtractor
from pricewatch.services.gateway import RenderGateway
from pricewatch.services.notifier import PriceNotifier
from pricewatch.services.products import ProductService
from pricewatch.services.storage import SupabaseProductStore
from pricewatch.services.tracking import TrackingService
from pricewatch.services.utils import BrowserSessionManager

__all__ = [
    "TrackingService",
    "ProductService",
    "RenderGateway",
    "SupabaseProductStore",
    "PriceNotifier",
    "ExtractorRegistry",
    "SiteExtractor",
    "BrowserSessionManager",
]
