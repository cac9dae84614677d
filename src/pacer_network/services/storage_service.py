"""
Artifact Storage Service

Single writer for a retrieval output directory:
    {output_dir}/
        docket_20_1234.xml                  # one per retrieved case
        progress_log_50_20250115_143022.csv  # periodic checkpoints
        retrieval_log_final.csv              # full log at completion

Network discovery uses the same service for its CSV artifacts.
"""

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union
import logging

import pandas as pd

from pacer_network.models.retrieval import LOG_COLUMNS, RetrievalLogEntry
from pacer_network.validators import case_number_to_filename

logger = logging.getLogger(__name__)

FINAL_LOG_NAME = "retrieval_log_final.csv"
CHECKPOINT_PREFIX = "progress_log"


class StorageService:
    """
    File-system storage for XML dockets and tabular logs.

    Usage:
        storage = StorageService("pacer_xml_output")
        if not storage.has_xml("20-1234"):
            storage.save_xml("20-1234", xml_text)
        storage.write_final_log(entries)
    """

    def __init__(self, output_dir: Union[str, Path]):
        """
        Initialize storage, creating the output directory if needed.

        Args:
            output_dir: Directory receiving all artifacts
        """
        self.output_dir = Path(output_dir)
        if not self.output_dir.exists():
            self.output_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"✓ Created output directory: {self.output_dir}")

    def xml_path(self, case_number: str) -> Path:
        """Deterministic XML artifact path for a case."""
        return self.output_dir / case_number_to_filename(case_number)

    def has_xml(self, case_number: str) -> bool:
        return self.xml_path(case_number).is_file()

    def save_xml(self, case_number: str, xml: Union[str, bytes]) -> Path:
        """
        Write a docket's XML.

        Bytes are written as served so the XML declaration keeps governing
        the encoding; text is written as UTF-8.

        The file appears under its final name only once fully written, so
        an interrupted run never leaves a partial docket that resume-skip
        would later trust. A failed write removes the partial file and
        re-raises.
        """
        if isinstance(xml, str):
            xml = xml.encode('utf-8')
        path = self.xml_path(case_number)
        partial = path.with_name(path.name + ".part")
        try:
            partial.write_bytes(xml)
            partial.replace(path)
        except OSError:
            partial.unlink(missing_ok=True)
            raise
        return path

    @staticmethod
    def log_to_frame(entries: Iterable[RetrievalLogEntry]) -> pd.DataFrame:
        """Retrieval log as a DataFrame with LOG_COLUMNS."""
        rows = [entry.to_row() for entry in entries]
        return pd.DataFrame(rows, columns=LOG_COLUMNS)

    def write_checkpoint(
        self,
        entries: List[RetrievalLogEntry],
        processed: int,
        timestamp: Optional[datetime] = None
    ) -> Path:
        """Write a timestamped snapshot of the log after `processed` cases."""
        stamp = (timestamp or datetime.now()).strftime("%Y%m%d_%H%M%S")
        path = self.output_dir / f"{CHECKPOINT_PREFIX}_{processed}_{stamp}.csv"
        self.log_to_frame(entries).to_csv(path, index=False, encoding='utf-8')
        return path

    def write_final_log(self, entries: List[RetrievalLogEntry]) -> Path:
        path = self.output_dir / FINAL_LOG_NAME
        self.log_to_frame(entries).to_csv(path, index=False, encoding='utf-8')
        return path

    def write_frame(self, frame: pd.DataFrame, filename: str) -> Path:
        """Write an arbitrary table (network artifacts) to the output directory."""
        path = self.output_dir / filename
        frame.to_csv(path, index=False, encoding='utf-8')
        return path

    def write_case_list(self, case_numbers: Iterable[str], filename: str) -> Path:
        """Write a sorted single-column case list (column: case_number)."""
        frame = pd.DataFrame({'case_number': sorted(case_numbers)}, columns=['case_number'])
        return self.write_frame(frame, filename)
