from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import ValidationError

from app.core.playlist import RewriteRule, rewrite_playlist
from .models import CatalogEntry, CatalogEnvelope


def _rewrite_entry(raw: Any, rewrite_rule: RewriteRule) -> Any:
    """
    Rewrite one upstream entry; entries that are not catalog entries come back untouched.
    """
    if not isinstance(raw, dict):
        return raw
    try:
        entry = CatalogEntry.model_validate(raw)
    except ValidationError as exc:
        logger.warning(
            "Upstream entry {} is not a catalog entry ({} errors); passing through.",
            raw.get("vod_id"),
            exc.error_count(),
        )
        return raw
    play_url = entry.vod_play_url
    if not isinstance(play_url, str) or not play_url:
        return raw
    source = entry.vod_play_from if isinstance(entry.vod_play_from, str) else ""
    try:
        entry.vod_play_url = rewrite_playlist(play_url, source, rewrite_rule)
    except Exception as exc:
        logger.error("Play URL rewrite failed for {}: {}", entry.vod_name, exc)
        return raw
    logger.trace(
        "Play URL rewrite {}: from={} length {} -> {}",
        entry.vod_name,
        source or "<none>",
        len(play_url),
        len(entry.vod_play_url),
    )
    return entry.dump()


def rewrite_catalog_payload(data: Any, rewrite_rule: RewriteRule) -> Any:
    """
    Return a copy of an upstream catalog payload with its playback URLs rewritten.

    The envelope fields are validated apart from `list`; every entry is then
    validated and rewritten on its own, using its `vod_play_from` as source
    label. An entry that does not validate is passed through unchanged
    without affecting its siblings. Payloads that are not catalog envelopes
    are returned unchanged.

    Parameters:
        data (Any): Decoded upstream JSON body.
        rewrite_rule (RewriteRule): Rule bound to the request origin.

    Returns:
        Any: The rewritten payload as plain JSON data.
    """
    if not isinstance(data, dict):
        logger.debug("Upstream payload is not an object; passing through.")
        return data
    shell = {k: v for k, v in data.items() if k != "list"}
    try:
        envelope = CatalogEnvelope.model_validate(shell)
    except ValidationError as exc:
        logger.warning(
            "Upstream payload is not a catalog envelope ({} errors); passing through.",
            exc.error_count(),
        )
        return data

    result = envelope.dump()
    if "list" not in data:
        return result
    entries = data["list"]
    if not isinstance(entries, list):
        result["list"] = entries
        return result
    rewritten = [_rewrite_entry(raw, rewrite_rule) for raw in entries]
    logger.debug("Processed play URLs of {} upstream entries", len(entries))
    result["list"] = rewritten
    return result
