"""Backend providers feeding the synthesized catalog."""

from typing import Optional

from app.config import OpenListConfig, get_openlist_config

from .openlist import OpenListClient, OpenListDetailFetcher


def get_detail_fetcher(
    base_url: str, config: Optional[OpenListConfig] = None
) -> Optional[OpenListDetailFetcher]:
    """Return the directory detail fetcher for the configured store, if any.

    Parameters:
        base_url (str): Origin the generated play URLs point at.
        config (OpenListConfig | None): Explicit configuration; read from the environment when omitted.

    Returns:
        OpenListDetailFetcher | None: None when the store is not configured.
    """
    cfg = config or get_openlist_config()
    if cfg is None:
        return None
    client = OpenListClient(cfg.url, cfg.username, cfg.password)
    return OpenListDetailFetcher(client, root_path=cfg.root_path, base_url=base_url)


__all__ = ["get_detail_fetcher"]
