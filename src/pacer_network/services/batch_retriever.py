"""
Batch Retriever

Applies DocketRetrievalSession to a list of case numbers with:
- Resume-skip: cases whose XML already exists make no network calls
- One log entry per case regardless of outcome
- Periodic checkpoints of the log (crash-recovery aid)
- A randomized politeness delay after each case that hit the portal

Cases are processed strictly sequentially on a single PacerSession.
"""

import logging
import random
import time
from typing import Callable, Iterable, List, Optional

from pacer_network.models.requests import RetrievalSettings
from pacer_network.models.retrieval import (
    RetrievalLogEntry,
    RetrievalOutcome,
    RetrievalStatus,
)
from pacer_network.services.docket_session import DocketRetrievalSession, PacerSession
from pacer_network.services.storage_service import StorageService
from pacer_network.validators import normalize_case_numbers

logger = logging.getLogger(__name__)


class BatchRetriever:
    """
    Sequential docket retrieval over many cases.

    Usage:
        with PacerSession.open(token, "cadc") as session:
            retriever = BatchRetriever(session, RetrievalSettings(output_dir="out"))
            log = retriever.retrieve(["20-1234", "20-1235"])

    The sleep function and random source are injectable so tests can observe
    delays without waiting.
    """

    def __init__(
        self,
        session: PacerSession,
        settings: Optional[RetrievalSettings] = None,
        storage: Optional[StorageService] = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None
    ):
        self.session = session
        self.settings = settings or RetrievalSettings()
        self.storage = storage or StorageService(self.settings.output_dir)
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._docket_session = DocketRetrievalSession(session)
        self._progress = logger.info if self.settings.verbose else logger.debug

    def retrieve(self, case_numbers: Iterable[object]) -> List[RetrievalLogEntry]:
        """
        Retrieve every case and return the retrieval log.

        Args:
            case_numbers: Case numbers; blanks and duplicates are dropped

        Returns:
            Log entries in processing order (also written to
            retrieval_log_final.csv)

        Raises:
            NoValidCasesError: If no valid case numbers remain
        """
        cases = normalize_case_numbers(case_numbers)
        total = len(cases)
        interval = self.settings.checkpoint_interval

        self._progress("=" * 40)
        self._progress("PACER CASE RETRIEVAL")
        self._progress(f"Circuit: {self.session.circuit}")
        self._progress(f"Total cases: {total}")
        self._progress(f"Output directory: {self.storage.output_dir}")
        self._progress("=" * 40)

        entries: List[RetrievalLogEntry] = []

        for index, case_number in enumerate(cases, start=1):
            self._progress(f"[{index}/{total}] Processing: {case_number}")

            entry = self._process_case(case_number)
            entries.append(entry)

            if interval and index % interval == 0:
                checkpoint = self.storage.write_checkpoint(entries, index)
                self._progress(f"*** Progress saved: {checkpoint} ***")

            # Skipped cases made no request, so there is nothing to throttle.
            if index < total and entry.status != RetrievalStatus.SKIPPED_EXISTS:
                wait_time = self.next_wait_time()
                self._progress(f"  [WAIT] Waiting {wait_time} seconds...")
                self._sleep(wait_time)

        final_log = self.storage.write_final_log(entries)
        self._report(entries, final_log)
        return entries

    def next_wait_time(self):
        """Delay before the next case: fixed value or uniform integer in [min, max]."""
        rate_limit = self.settings.rate_limit
        if isinstance(rate_limit, tuple):
            low, high = rate_limit
            return self._rng.randint(low, high)
        return rate_limit

    def _process_case(self, case_number: str) -> RetrievalLogEntry:
        xml_path = self.storage.xml_path(case_number)

        if self.settings.resume_if_exists and self.storage.has_xml(case_number):
            self._progress("  [SKIP] XML already exists, skipping...")
            return RetrievalLogEntry(
                case_number=case_number,
                status=RetrievalStatus.SKIPPED_EXISTS,
                xml_path=str(xml_path),
            )

        outcome: RetrievalOutcome = self._docket_session.retrieve(case_number)

        if outcome.is_success:
            try:
                saved = self.storage.save_xml(case_number, outcome.xml)
            except OSError as e:
                logger.error(f"{case_number}: could not save XML to {xml_path}: {e}")
                self._progress(f"  ✗ Error: {e}")
                return RetrievalLogEntry(
                    case_number=case_number,
                    status=RetrievalStatus.ERROR,
                    error=f"Failed to save XML: {e}",
                )
            self._progress(f"  ✓ Saved to: {saved.name}")
            return RetrievalLogEntry(
                case_number=case_number,
                status=outcome.status,
                xml_path=str(saved),
            )

        if outcome.status == RetrievalStatus.NOT_FOUND:
            self._progress("  ✗ Case not found")
        elif outcome.status == RetrievalStatus.NO_DOCKET:
            self._progress("  ✗ No full docket available")
        else:
            self._progress(f"  ✗ Error: {outcome.error}")

        return RetrievalLogEntry(
            case_number=case_number,
            status=outcome.status,
            error=outcome.error,
        )

    def _report(self, entries: List[RetrievalLogEntry], final_log) -> None:
        counts = {status: 0 for status in RetrievalStatus}
        for entry in entries:
            counts[entry.status] += 1
        failed = len(entries) - counts[RetrievalStatus.SUCCESS] - counts[RetrievalStatus.SKIPPED_EXISTS]

        self._progress("=" * 40)
        self._progress("RETRIEVAL COMPLETE")
        self._progress(f"Total processed: {len(entries)}")
        self._progress(f"Successful: {counts[RetrievalStatus.SUCCESS]}")
        self._progress(f"Failed: {failed}")
        self._progress(f"Skipped: {counts[RetrievalStatus.SKIPPED_EXISTS]}")
        self._progress(f"Final log: {final_log}")
        self._progress("=" * 40)
