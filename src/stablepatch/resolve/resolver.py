"""Turn patch documents and their sources into bytes.

The resolver reads documents from disk, standard input or HTTP,
resolves every source they name (recursing into nested patch
documents), and hands the flat result to the engine. Sources of one
document are fetched concurrently; the edit list keeps document order.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

import aiohttp

from stablepatch.core.config import FetchConfig
from stablepatch.core.errors import DocumentError, ResolveError
from stablepatch.core.log import logger
from stablepatch.patch.engine import apply
from stablepatch.patch.models import Edit
from stablepatch.resolve.document import (
    InsertSpec,
    PatchDocument,
    SourceKind,
    SourceSpec,
    parse_document,
)

STDIN = "-"


@dataclass
class LoadedDocument:
    """A parsed document plus what is needed to resolve its sources.

    Attributes:
        document: The parsed document
        location: Canonical location (absolute path, URL, or <stdin>)
        base: Directory relative file sources resolve against, or None
            for the current working directory
    """

    document: PatchDocument
    location: str
    base: Path | None


def is_url(location: str) -> bool:
    return urlparse(location).scheme in ("http", "https")


class Resolver:
    """Resolves patch documents into bytes.

    Use as an async context manager so the HTTP session is closed:

        async with Resolver(config.fetch) as resolver:
            result = await resolver.render_location("patch.toml")
    """

    def __init__(self, fetch: FetchConfig | None = None):
        self.fetch = fetch or FetchConfig()
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> Resolver:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        await self.close()
        return False

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.fetch.timeout),
                headers={"User-Agent": self.fetch.user_agent},
            )
        return self._session

    # ============================================================
    # DOCUMENTS
    # ============================================================

    async def load(
        self, location: str, base: Path | None = None
    ) -> LoadedDocument:
        """Read and parse the document at location.

        Args:
            location: File path, http(s) URL, or "-" for standard input
            base: Directory a relative path resolves against

        Returns:
            LoadedDocument with the parsed document

        Raises:
            ResolveError: If the document cannot be read
            DocumentError: If the document is not a valid patch document
        """
        if location == STDIN:
            data = sys.stdin.buffer.read()
            canonical, doc_base = "<stdin>", None
        elif is_url(location):
            data = await self._fetch(location)
            canonical, doc_base = location, None
        else:
            path = self._path(location, base)
            data = self._read_file(path)
            canonical, doc_base = str(path.resolve()), path.parent

        logger.debug(
            "Loaded patch document", location=canonical, size=len(data)
        )

        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DocumentError(
                "document is not UTF-8 text", canonical
            ) from e

        return LoadedDocument(
            document=parse_document(text, canonical),
            location=canonical,
            base=doc_base,
        )

    async def render_location(self, location: str) -> bytes:
        """Load the document at location and render it."""
        loaded = await self.load(location)
        return await self.render(
            loaded.document, loaded.base, (loaded.location,)
        )

    async def render(
        self,
        document: PatchDocument,
        base: Path | None = None,
        trail: tuple[str, ...] = (),
    ) -> bytes:
        """Resolve every source of document and apply its edits.

        Args:
            document: Parsed patch document
            base: Directory relative file sources resolve against
            trail: Locations of the documents being rendered above this
                one, outermost first

        Returns:
            The patched bytes
        """
        source, edits = await self.resolve_edits(document, base, trail)
        with logger.span(
            "Applying edits", edits=len(edits), source_size=len(source)
        ):
            return apply(source, edits)

    async def resolve_edits(
        self,
        document: PatchDocument,
        base: Path | None = None,
        trail: tuple[str, ...] = (),
    ) -> tuple[bytes, list[Edit]]:
        """Resolve the source and insert payloads of document.

        Returns:
            (source bytes, edits in document order)
        """
        resolved = await asyncio.gather(*(
            self.resolve_source(spec, base, trail)
            for spec in document.sources
        ))

        source = resolved[0]
        payloads = iter(resolved[1:])
        edits: list[Edit] = [
            spec.to_edit(next(payloads))
            if isinstance(spec, InsertSpec)
            else spec.to_edit()
            for spec in document.patch
        ]
        return source, edits

    # ============================================================
    # SOURCES
    # ============================================================

    async def resolve_source(
        self,
        spec: SourceSpec,
        base: Path | None = None,
        trail: tuple[str, ...] = (),
    ) -> bytes:
        """Turn one source table into bytes.

        Raises:
            ResolveError: If a file, URL or nested document cannot be
                resolved
        """
        kind, value = spec.kind, spec.value
        logger.trace("Resolving source", kind=kind.value)

        if kind is SourceKind.BYTES:
            return bytes(value)
        if kind is SourceKind.TEXT:
            return value.encode("utf-8")
        if kind is SourceKind.FILE:
            return self._read_file(self._path(value, base))
        if kind is SourceKind.URL:
            return await self._fetch(value)
        if kind is SourceKind.PATCH_FILE:
            return await self._render_nested(value, base, trail)
        return await self._render_nested(value, None, trail)

    async def _render_nested(
        self, location: str, base: Path | None, trail: tuple[str, ...]
    ) -> bytes:
        if len(trail) >= self.fetch.max_depth:
            raise ResolveError(
                f"patch documents nested deeper than "
                f"{self.fetch.max_depth} levels",
                location,
            )

        loaded = await self.load(location, base)
        if loaded.location in trail:
            chain = " -> ".join((*trail, loaded.location))
            raise ResolveError(f"circular patch document: {chain}")

        with logger.span(
            "Rendering nested document", location=loaded.location
        ):
            return await self.render(
                loaded.document, loaded.base, (*trail, loaded.location)
            )

    def _path(self, value: str, base: Path | None) -> Path:
        path = Path(value).expanduser()
        if base is not None and not path.is_absolute():
            path = base / path
        return path

    def _read_file(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            reason = e.strerror or str(e)
            raise ResolveError(
                f"cannot read file: {reason}", str(path)
            ) from e

    async def _fetch(self, url: str) -> bytes:
        with logger.span("Fetching", url=url):
            try:
                async with self.session.get(url) as response:
                    response.raise_for_status()
                    return await response.read()
            except (
                aiohttp.ClientError, asyncio.TimeoutError, ValueError
            ) as e:
                raise ResolveError(f"cannot fetch: {e}", url) from e


__all__ = ["LoadedDocument", "Resolver", "STDIN", "is_url"]
