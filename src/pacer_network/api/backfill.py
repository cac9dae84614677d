"""
Backfill utility for extracting associations from existing XML dockets.

Use this when:
- Dockets were downloaded by an earlier run but associations were never extracted
- A discovery run was interrupted before writing case_associations.csv
- You want to re-extract associations with an updated parser

No network access is made.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union
import logging

import pandas as pd

from pacer_network.models.association import Association
from pacer_network.parsers.association_parser import associations_to_frame, extract_associations

logger = logging.getLogger(__name__)

BACKFILL_FILE = "case_associations_backfill.csv"
XML_PATTERN = "docket_*.xml"


class BackfillService:
    """
    Service for rebuilding association tables from a directory of dockets.

    Usage:
        backfill = BackfillService("pacer_network_output/xml_files")
        stats = backfill.backfill()
        frame = backfill.collect_associations(edges_only=True)
    """

    def __init__(self, xml_dir: Union[str, Path]):
        """
        Initialize BackfillService with a docket directory.

        Args:
            xml_dir: Directory containing docket_*.xml files

        Raises:
            ValueError: If the directory does not exist
        """
        self.xml_dir = Path(xml_dir)
        if not self.xml_dir.is_dir():
            raise ValueError(f"Directory not found: {xml_dir}")
        self._stats: Dict[str, int] = {}

    def xml_files(self) -> List[Path]:
        return sorted(self.xml_dir.glob(XML_PATTERN))

    def collect_associations(self, edges_only: bool = False) -> pd.DataFrame:
        """
        Extract associations from every docket in the directory.

        Args:
            edges_only: Drop the "no associations" marker records

        Returns:
            DataFrame with columns main_case, associated_case,
            association_type, date_start
        """
        stats = {
            'scanned': 0,
            'with_associations': 0,
            'without_associations': 0,
            'failed': 0
        }
        associations: List[Association] = []

        for xml_path in self.xml_files():
            stats['scanned'] += 1
            found = extract_associations(xml_path)

            if not found:
                logger.error(f"✗ Failed to extract associations from {xml_path.name}")
                stats['failed'] += 1
                continue

            edges = [a for a in found if a.is_edge]
            if edges:
                stats['with_associations'] += 1
                logger.debug(f"✓ {xml_path.name}: {len(edges)} association(s)")
            else:
                stats['without_associations'] += 1

            associations.extend(edges if edges_only else found)

        self._stats = stats
        return associations_to_frame(associations)

    def backfill(
        self,
        output_path: Optional[Union[str, Path]] = None,
        edges_only: bool = False
    ) -> Dict[str, int]:
        """
        Re-extract associations and write them to CSV.

        Args:
            output_path: Destination CSV (default: xml_dir/case_associations_backfill.csv)
            edges_only: Drop the "no associations" marker records

        Returns:
            Statistics dictionary:
            {
                'scanned': 100,              # Docket files scanned
                'with_associations': 30,     # Dockets listing associated cases
                'without_associations': 65,  # Dockets with none
                'failed': 5,                 # Unreadable or malformed dockets
                'associations': 120          # Rows written
            }

        Example:
            >>> stats = BackfillService("pacer_xml_output").backfill()
            >>> print(f"Scanned {stats['scanned']} dockets")
        """
        output_path = Path(output_path) if output_path else self.xml_dir / BACKFILL_FILE

        logger.info(f"Starting backfill from {self.xml_dir}")
        frame = self.collect_associations(edges_only=edges_only)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(output_path, index=False, encoding='utf-8')

        stats = dict(self._stats)
        stats['associations'] = len(frame)

        logger.info(
            f"Backfill complete: {stats['scanned']} scanned, "
            f"{stats['with_associations']} with associations, "
            f"{stats['without_associations']} without, {stats['failed']} failed"
        )
        logger.info(f"✓ Saved {stats['associations']} rows to {output_path}")
        return stats
