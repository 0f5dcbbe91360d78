# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Baseline generation, merging, and on-disk persistence."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..core.models import Finding
from ..errors import CorruptBaselineError
from .fingerprint import fingerprint, relative_source_path
from .models import BASELINE_VERSION, BaselineDocument, BaselineEntry, utc_timestamp

logger = logging.getLogger(__name__)


def _ordered_union(*groups: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for group in groups:
        for item in group:
            seen.setdefault(item, None)
    return tuple(seen)


def _union_entries(*groups: Iterable[BaselineEntry]) -> tuple[BaselineEntry, ...]:
    by_hash: dict[str, BaselineEntry] = {}
    for group in groups:
        for entry in group:
            by_hash.setdefault(entry.hash, entry)
    return tuple(by_hash.values())


def entry_for(finding: Finding, root: Path | None = None) -> BaselineEntry:
    """Return the baseline entry recording ``finding``."""

    path = relative_source_path(finding.source_path, root)
    return BaselineEntry(
        path=path,
        line=finding.line,
        message=finding.message,
        hash=fingerprint(path, finding.line, finding.message),
    )


def generate(
    findings_by_analyzer: Mapping[str, Iterable[Finding]],
    failed_without_findings: Iterable[str] = (),
    *,
    root: Path | None = None,
    generated_at: str | None = None,
) -> BaselineDocument:
    """Build a baseline document from the findings of one run.

    Args:
        findings_by_analyzer: Findings keyed by analyzer id. Analyzers with no
            findings produce no ``errors`` key.
        failed_without_findings: Ids of analyzers that failed as a whole without
            itemised findings. They are recorded in ``dont_report``.
        root: Project root used to relativise absolute finding paths.
            Defaults to the current working directory.
        generated_at: Timestamp override; the current UTC time by default.

    Returns:
        BaselineDocument: Entries deduplicated by fingerprint per analyzer.
    """

    errors: dict[str, tuple[BaselineEntry, ...]] = {}
    for analyzer_id, findings in findings_by_analyzer.items():
        entries = _union_entries(entry_for(finding, root) for finding in findings)
        if entries:
            errors[analyzer_id] = entries
    return BaselineDocument(
        generated_at=generated_at or utc_timestamp(),
        version=BASELINE_VERSION,
        errors=errors,
        dont_report=_ordered_union(failed_without_findings),
    )


def merge(existing: BaselineDocument, fresh: BaselineDocument) -> BaselineDocument:
    """Combine a previously persisted baseline with a freshly generated one.

    ``dont_report`` and each analyzer's entries are unioned with ``existing``
    order first; entries are identified by hash alone. Metadata comes from
    ``fresh``. ``merge(merge(a, b), b) == merge(a, b)``.
    """

    errors: dict[str, tuple[BaselineEntry, ...]] = {}
    for analyzer_id in _ordered_union(existing.errors, fresh.errors):
        errors[analyzer_id] = _union_entries(
            existing.errors.get(analyzer_id, ()),
            fresh.errors.get(analyzer_id, ()),
        )
    return BaselineDocument(
        generated_at=fresh.generated_at,
        generator=fresh.generator,
        version=fresh.version,
        errors=errors,
        dont_report=_ordered_union(existing.dont_report, fresh.dont_report),
    )


def parse_document(payload: Any) -> BaselineDocument:
    """Validate a decoded JSON payload as a baseline document.

    Raises:
        ValueError: If ``payload`` does not describe a baseline.
    """

    if not isinstance(payload, Mapping):
        raise ValueError("top-level value must be an object")
    try:
        return BaselineDocument.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc


class BaselineStore:
    """Read-mostly access to the baseline file at ``path``.

    Normal runs only read; :meth:`write` is reserved for the explicit
    generate/merge workflow. The parsed document is cached after the first
    load.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._document: BaselineDocument | None = None
        self._corrupt_reason: str | None = None

    @property
    def path(self) -> Path:
        """Return the baseline file location."""

        return self._path

    @property
    def exists(self) -> bool:
        """Return ``True`` when the baseline file is present."""

        return self._path.is_file()

    @property
    def corrupt(self) -> bool:
        """Return ``True`` when the last load found an unparseable document."""

        return self._corrupt_reason is not None

    @property
    def corrupt_reason(self) -> str | None:
        """Return why the last load rejected the document, if it did."""

        return self._corrupt_reason

    def load(self) -> BaselineDocument:
        """Return the persisted document, or an empty one when unavailable.

        Missing, unreadable, and corrupt files all yield an empty document;
        corruption is additionally recorded on :attr:`corrupt`.
        """

        if self._document is None:
            self._document = self._read()
        return self._document

    def load_strict(self) -> BaselineDocument:
        """Return the persisted document, refusing to discard a corrupt file.

        Raises:
            CorruptBaselineError: If the file exists but cannot be parsed.
        """

        document = self.load()
        if self._corrupt_reason is not None:
            raise CorruptBaselineError(self._path, self._corrupt_reason)
        return document

    def reload(self) -> BaselineDocument:
        """Discard the cached document and read the file again."""

        self._document = None
        self._corrupt_reason = None
        return self.load()

    def is_baselined(self, analyzer_id: str, fingerprint: str) -> bool:
        """Return ``True`` when ``fingerprint`` is accepted for ``analyzer_id``."""

        return fingerprint in self.load().hashes(analyzer_id)

    def is_dont_report(self, analyzer_id: str) -> bool:
        """Return ``True`` when ``analyzer_id`` is suppressed wholesale."""

        return analyzer_id in self.load().dont_report

    def write(self, document: BaselineDocument) -> Path:
        """Persist ``document`` as indented JSON and cache it.

        The document is written to a sibling temporary file that replaces the
        baseline in one step, so an interrupted write leaves the previous file
        intact.

        Raises:
            OSError: If the file cannot be written.
        """

        self._path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(document.to_payload(), indent=2) + "\n"
        staging: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                staging = Path(handle.name)
                handle.write(content)
            os.replace(staging, self._path)
        except OSError:
            if staging is not None:
                staging.unlink(missing_ok=True)
            raise
        self._document = document
        self._corrupt_reason = None
        return self._path

    def _read(self) -> BaselineDocument:
        if not self._path.is_file():
            return BaselineDocument()
        try:
            raw = self._path.read_bytes()
        except OSError as exc:
            logger.debug("Baseline at %s is unreadable: %s", self._path, exc)
            return BaselineDocument()
        try:
            return parse_document(json.loads(raw))
        except ValueError as exc:
            self._corrupt_reason = str(exc)
            logger.warning("Ignoring corrupt baseline at %s: %s", self._path, exc)
            return BaselineDocument()


__all__ = ["BaselineStore", "entry_for", "generate", "merge", "parse_document"]
