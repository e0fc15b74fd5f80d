# movie_resolver/_singletons.py
from functools import lru_cache
from .config import FetcherConfig
from .http_fetch import Fetcher
from .pipeline import MovieResolver

@lru_cache(maxsize=1)
def get_fetcher_config() -> FetcherConfig:
    return FetcherConfig.from_env()

@lru_cache(maxsize=1)
def get_resolver() -> MovieResolver:
    # the API layer's shared resolver; the pipeline itself holds no globals
    return MovieResolver(Fetcher(get_fetcher_config()))
