from __future__ import annotations

from typing import Callable, Iterable

from loguru import logger

from .types import (
    EPISODE_DELIMITER,
    FIELD_DELIMITER,
    SOURCE_DELIMITER,
    PlaylistDocument,
    PlaylistEpisode,
    PlaylistSource,
)

# Receives (url, source_label) and returns the replacement URL.
RewriteRule = Callable[[str, str], str]


def parse_episode(segment: str) -> PlaylistEpisode:
    """
    Parse one episode segment (`URL`, `Title$URL` or `Title$URL$Extra`).

    Only the first field delimiter separates the title; a delimiter at
    position 0 does not count, so the segment is then a bare URL. Inside the
    remainder a second delimiter (again not at position 0) starts the opaque
    Extra, which is kept including that delimiter.

    Parameters:
        segment (str): Raw episode text between two episode delimiters.

    Returns:
        PlaylistEpisode: Parsed episode that serializes back to `segment`.
    """
    title_end = segment.find(FIELD_DELIMITER)
    if title_end > 0:
        title = segment[:title_end]
        rest = segment[title_end + 1 :]
        url_end = rest.find(FIELD_DELIMITER)
        if url_end > 0:
            return PlaylistEpisode(
                raw=segment, title=title, url=rest[:url_end], extra=rest[url_end:]
            )
        return PlaylistEpisode(raw=segment, title=title, url=rest)
    if segment.strip():
        return PlaylistEpisode(raw=segment, url=segment)
    return PlaylistEpisode(raw=segment)


def parse_source(text: str) -> PlaylistSource:
    return PlaylistSource(
        episodes=tuple(parse_episode(seg) for seg in text.split(EPISODE_DELIMITER))
    )


def parse_playlist(document: str) -> PlaylistDocument:
    """
    Parse a playlist document into its `Document -> Source[] -> Episode[]` tree.

    Sources are split first on `$$$`, then episodes on `#`.
    """
    return PlaylistDocument(
        sources=tuple(parse_source(src) for src in document.split(SOURCE_DELIMITER))
    )


def serialize_episode(episode: PlaylistEpisode) -> str:
    return episode.raw


def serialize_playlist(document: PlaylistDocument) -> str:
    """Join a parsed document back with the same delimiters in the same nesting order."""
    return SOURCE_DELIMITER.join(
        EPISODE_DELIMITER.join(serialize_episode(ep) for ep in src.episodes)
        for src in document.sources
    )


def rewrite_episode(
    episode: PlaylistEpisode, source_label: str, rewrite_rule: RewriteRule
) -> PlaylistEpisode:
    """
    Pass the episode URL through `rewrite_rule`.

    The URL is stripped before it is handed to the rule. When the rule returns
    the stripped URL unchanged the original episode is returned so its bytes
    survive exactly.
    """
    if episode.url is None:
        return episode
    candidate = episode.url.strip()
    if not candidate:
        return episode
    replaced = rewrite_rule(candidate, source_label)
    if replaced == candidate:
        return episode
    return episode.with_url(replaced)


def rewrite_document(
    document: PlaylistDocument, source_label: str, rewrite_rule: RewriteRule
) -> PlaylistDocument:
    """
    Rewrite every episode URL of a parsed document.

    An episode whose rewrite raises keeps its original text; its siblings are
    still processed.
    """
    sources: list[PlaylistSource] = []
    failures = 0
    for src in document.sources:
        episodes: list[PlaylistEpisode] = []
        for ep in src.episodes:
            try:
                episodes.append(rewrite_episode(ep, source_label, rewrite_rule))
            except Exception as exc:
                failures += 1
                logger.warning("Playlist episode rewrite failed, keeping original: {}", exc)
                episodes.append(ep)
        sources.append(PlaylistSource(episodes=tuple(episodes)))
    if failures:
        logger.debug("Playlist rewrite kept {} episode(s) unchanged after errors", failures)
    return PlaylistDocument(sources=tuple(sources))


def rewrite_playlist(
    document: str, source_label: str, rewrite_rule: RewriteRule
) -> str:
    """
    Rewrite the playable URLs embedded in a playlist document.

    Parameters:
        document (str): Playlist text (`Title$URL#Title$URL$$$...`).
        source_label (str): Originating backend name, handed to the rule with each URL.
        rewrite_rule (RewriteRule): Callable `(url, source_label) -> url`.

    Returns:
        str: The rewritten document; identical to `document` when the rule changes nothing.
    """
    if not document:
        return document
    parsed = parse_playlist(document)
    logger.trace(
        "Rewriting playlist ({} sources, {} episodes, source={})",
        len(parsed.sources),
        len(parsed.episodes()),
        source_label or "<none>",
    )
    return serialize_playlist(rewrite_document(parsed, source_label, rewrite_rule))


def build_playlist(items: Iterable[tuple[str, str]]) -> str:
    """
    Build a one-source document from ordered `(title, url)` pairs joined with `#`.
    """
    return EPISODE_DELIMITER.join(
        f"{title}{FIELD_DELIMITER}{url}" for title, url in items
    )
