from .models import CatalogEntry, CatalogEnvelope, ErrorBody, CODE_EMPTY, CODE_OK
from .detail import DirectoryDetail, DirectoryDetailFetcher, EpisodeRecord, ImageResolver
from .images import tmdb_image_url
from .synthesizer import CatalogSynthesizer, PLAY_FROM
from .rewrite import rewrite_catalog_payload

__all__ = [
    "CatalogEntry",
    "CatalogEnvelope",
    "ErrorBody",
    "CODE_EMPTY",
    "CODE_OK",
    "DirectoryDetail",
    "DirectoryDetailFetcher",
    "EpisodeRecord",
    "ImageResolver",
    "tmdb_image_url",
    "CatalogSynthesizer",
    "PLAY_FROM",
    "rewrite_catalog_payload",
]
