"""Registry mapping registrable domains to site extractors."""

from typing import Dict, Iterable, List, Optional

from pricewatch.services.extractors.base import SiteExtractor


class ExtractorRegistry:
    """Lookup table of extractors keyed by normalized registrable domain."""

    def __init__(self, extractors: Iterable[SiteExtractor] = ()):
        self._extractors: Dict[str, SiteExtractor] = {}
        for extractor in extractors:
            self.register(extractor)

    def register(self, extractor: SiteExtractor) -> SiteExtractor:
        if not extractor.domain:
            raise ValueError(f"{type(extractor).__name__} has no domain")
        self._extractors[extractor.domain.lower()] = extractor
        return extractor

    def resolve(self, domain: Optional[str]) -> Optional[SiteExtractor]:
        if not domain:
            return None
        return self._extractors.get(domain.strip().lower())

    def domains(self) -> List[str]:
        return sorted(self._extractors)

    def __contains__(self, domain: object) -> bool:
        return isinstance(domain, str) and self.resolve(domain) is not None

    def __len__(self) -> int:
        return len(self._extractors)
