"""Reconciliation of a base title record with independently fetched fragments.

A :class:`CompositeRecord` starts as the base title plus placeholder values.
Each enrichment fragment owns a disjoint set of fields (``FRAGMENT_FIELDS``);
applying a fragment copies only those fields and never touches the others, so
a failed or late fragment cannot corrupt data another fragment already
applied.

:class:`ReconciliationAccumulator` is the single join point for a set of
concurrent fetches. It owns the resolution counter and fires the completion
callback exactly once, after the last expected fragment resolves, whatever
the order and whether fragments succeed or fail. All mutation happens on the
event loop thread, so each ``resolve`` call is atomic with respect to other
resolutions without a lock.

Example usage:
    record = create_composite(title)
    accumulator = await enrich(record, client.enrichment_sources(), on_complete=done)
"""

import asyncio
import logging
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Iterable, Optional, Sequence

from cfr_analytics.models.changes import HistoricalChangeEntry
from cfr_analytics.models.titles import TitleSummary
from cfr_analytics.sources.base import EnrichmentSource, FragmentKind, FragmentResult

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

FRAGMENT_FIELDS: dict[FragmentKind, frozenset[str]] = {
    FragmentKind.WORD_COUNT: frozenset({"word_count", "part_count", "burden_level"}),
    FragmentKind.REDUNDANCY: frozenset(
        {"redundancy_score", "redundant_sections", "deregulation_opportunities"}
    ),
    FragmentKind.HISTORICAL_CHANGES: frozenset(
        {"recent_changes", "change_trend", "historical_changes"}
    ),
}

BASE_FIELDS = frozenset({"number", "name", "agency"})


@dataclass
class CompositeRecord:
    """A title record progressively enriched by fragments.

    ``number``, ``name`` and ``agency`` come from the base record and are not
    written after creation. Every other field belongs to exactly one fragment
    kind and keeps its placeholder until that fragment applies.
    """

    number: int
    name: str
    agency: str

    # word_count fragment
    word_count: int = 0
    part_count: int = 0
    burden_level: str = NOT_AVAILABLE

    # redundancy fragment
    redundancy_score: int = 0
    redundant_sections: int = 0
    deregulation_opportunities: int = 0

    # historical_changes fragment
    recent_changes: int = 0
    change_trend: str = NOT_AVAILABLE
    historical_changes: tuple[HistoricalChangeEntry, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "historical_changes":
                value = [entry.model_dump(mode="json") for entry in value]
            data[f.name] = value
        return data


def create_composite(base: TitleSummary) -> CompositeRecord:
    """Create a composite record with placeholders for all enrichment fields."""
    return CompositeRecord(
        number=base.number,
        name=base.name,
        agency=base.agency,
        part_count=base.part_count or 0,
    )


def apply_fragment(record: CompositeRecord, result: FragmentResult) -> bool:
    """Apply one fragment result to *record*.

    On success, copies only the fields declared for ``result.kind``; keys
    outside that set are ignored with a warning. On failure the record is left
    untouched. Never raises.

    Returns:
        True if at least one field was written.
    """
    if not result.ok:
        logger.warning(
            "Fragment %s failed for title %s; keeping existing values: %s",
            result.kind.value,
            record.number,
            result.error,
        )
        return False

    allowed = FRAGMENT_FIELDS[result.kind]
    stray = set(result.fields) - allowed
    if stray:
        logger.warning(
            "Ignoring fields %s outside the %s fragment", sorted(stray), result.kind.value
        )

    # Validate every value before writing any, so a fragment applies whole or not at all
    updates = {name: value for name, value in result.fields.items() if name in allowed}
    for name, value in updates.items():
        if value is None:
            logger.warning("Fragment %s sent null for %s; skipping fragment", result.kind.value, name)
            return False

    for name, value in updates.items():
        setattr(record, name, value)
    return bool(updates)


class ReconciliationAccumulator:
    """Join point for ``expected`` fragment resolutions on one record.

    Args:
        record: Composite record to mutate in place
        expected: Number of fragment resolutions to wait for
        on_complete: Called exactly once, after the last resolution
            (immediately when ``expected`` is 0)
    """

    def __init__(
        self,
        record: CompositeRecord,
        expected: int,
        on_complete: Optional[Callable[[CompositeRecord], None]] = None,
    ):
        if expected < 0:
            raise ValueError("expected must be >= 0")
        self.record = record
        self.expected = expected
        self._on_complete = on_complete
        self._resolved = 0
        self._completed = False
        self.applied_kinds: list[FragmentKind] = []
        self.failed_kinds: list[FragmentKind] = []
        self._done = asyncio.Event()

        if expected == 0:
            self._complete()

    @property
    def pending(self) -> int:
        return self.expected - self._resolved

    @property
    def completed(self) -> bool:
        return self._completed

    def resolve(self, result: FragmentResult) -> None:
        """Record one fragment resolution (success or failure)."""
        if self._completed:
            logger.warning(
                "Ignoring %s fragment for title %s: all %d fragments already resolved",
                result.kind.value,
                self.record.number,
                self.expected,
            )
            return

        if apply_fragment(self.record, result):
            self.applied_kinds.append(result.kind)
        elif not result.ok:
            self.failed_kinds.append(result.kind)

        self._resolved += 1
        if self._resolved >= self.expected:
            self._complete()

    async def wait(self) -> CompositeRecord:
        """Wait until every expected fragment has resolved."""
        await self._done.wait()
        return self.record

    def _complete(self) -> None:
        self._completed = True
        self._done.set()
        logger.debug(
            "Title %s reconciled: applied=%s failed=%s",
            self.record.number,
            [k.value for k in self.applied_kinds],
            [k.value for k in self.failed_kinds],
        )
        if self._on_complete is not None:
            try:
                self._on_complete(self.record)
            except Exception:
                logger.exception("Completion callback failed for title %s", self.record.number)


async def enrich(
    record: CompositeRecord,
    sources: Sequence[EnrichmentSource],
    on_complete: Optional[Callable[[CompositeRecord], None]] = None,
) -> ReconciliationAccumulator:
    """Fetch every source concurrently and reconcile results as they land.

    Fetches are issued together and each result is handed to the accumulator
    the moment it resolves, so fragment application order follows arrival
    order. Returns once all fragments have resolved.
    """
    accumulator = ReconciliationAccumulator(record, len(sources), on_complete)
    tasks = [asyncio.ensure_future(_guarded_fetch(source, record.number)) for source in sources]
    for next_done in asyncio.as_completed(tasks):
        accumulator.resolve(await next_done)
    await accumulator.wait()
    return accumulator


async def _guarded_fetch(source: EnrichmentSource, title_number: int) -> FragmentResult:
    # A fetch that raises still resolves its slot, so the join always completes
    try:
        return await source.fetch(title_number)
    except Exception as e:
        logger.error("%s fetch raised for title %s: %s", source.kind.value, title_number, e)
        return FragmentResult.failure(source.kind, e)


def resolve_all(
    accumulator: ReconciliationAccumulator, results: Iterable[FragmentResult]
) -> ReconciliationAccumulator:
    """Feed already-available results into *accumulator* in the given order."""
    for result in results:
        accumulator.resolve(result)
    return accumulator
