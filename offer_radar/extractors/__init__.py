from offer_radar.extractors.offer import ExtractionTimeout, OfferExtractor, normalize_link

__all__ = ["ExtractionTimeout", "OfferExtractor", "normalize_link"]
