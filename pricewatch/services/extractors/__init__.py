"""
Site extractors for product pages.

Each extractor handles one registrable domain:
- AmazonExtractor: whole/fraction split price
- MercadoLivreExtractor: price in a meta attribute
- OlxExtractor: currency-prefixed price text
- MagazineLuizaExtractor: label-prefixed price text
- RelogioOnlineExtractor: colon-delimited clock field (testing)
"""

from typing import List, Optional

from .amazon_extractor import AmazonExtractor
from .base import SiteExtractor
from .magazineluiza_extractor import MagazineLuizaExtractor
from .mercadolivre_extractor import MercadoLivreExtractor
from .olx_extractor import OlxExtractor
from .registry import ExtractorRegistry
from .relogioonline_extractor import RelogioOnlineExtractor


def build_default_registry() -> ExtractorRegistry:
    return ExtractorRegistry(
        [
            AmazonExtractor(),
            MercadoLivreExtractor(),
            OlxExtractor(),
            MagazineLuizaExtractor(),
            RelogioOnlineExtractor(),
        ]
    )


default_registry = build_default_registry()


def resolve(domain: Optional[str]) -> Optional[SiteExtractor]:
    return default_registry.resolve(domain)


def supported_domains() -> List[str]:
    return default_registry.domains()


__all__ = [
    "SiteExtractor",
    "ExtractorRegistry",
    "AmazonExtractor",
    "MercadoLivreExtractor",
    "OlxExtractor",
    "MagazineLuizaExtractor",
    "RelogioOnlineExtractor",
    "build_default_registry",
    "default_registry",
    "resolve",
    "supported_domains",
]
