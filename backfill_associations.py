"""
Backfill Script: Re-extract associations from existing XML dockets

Use this script when:
- A discovery run stopped before case_associations.csv was written
- Dockets were collected with retrieve_cases() and never parsed
- You want to re-parse existing dockets with an updated parser

This script will:
1. Scan docket_*.xml files in the XML directory
2. Extract associated cases from each docket
3. Write case_associations_backfill.csv
4. Print a network summary

No PACER requests are made.
"""

import logging
import sys

from pacer_network import BackfillService, build_case_graph, network_metrics, rank_central_cases
from pacer_network.config import get_app_config

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

print("=" * 80)
print("BACKFILL SCRIPT: Re-extract case associations from existing XMLs")
print("=" * 80)

# === Step 1: Load Configuration ===
print("\n[Step 1] Loading configuration...")
config = get_app_config()
XML_DIR = f"{config.default_network_output_dir}/xml_files"
EDGES_ONLY = False  # Set to True to drop "no associations" marker rows
print(f"  ✓ Config loaded")
print(f"    - XML directory: {XML_DIR}")
print(f"    - Edges only: {EDGES_ONLY}")

# === Step 2: Initialize Backfill Service ===
print("\n[Step 2] Initializing BackfillService...")
try:
    backfill = BackfillService(XML_DIR)
except ValueError as e:
    print(f"  ✗ {e}")
    print()
    print("  Run collect_network.py first, or point XML_DIR at a docket directory.")
    print()
    sys.exit(1)
print(f"  ✓ BackfillService ready ({len(backfill.xml_files())} docket files)")

# === Step 3: Run Backfill ===
print("\n[Step 3] Extracting associations...")
stats = backfill.backfill(edges_only=EDGES_ONLY)

# === Step 4: Network Summary ===
print("\n[Step 4] Network summary...")
associations = backfill.collect_associations(edges_only=True)
graph = build_case_graph(associations)
metrics = network_metrics(graph)

print("\n" + "=" * 80)
print("BACKFILL COMPLETE")
print("=" * 80)
print()
print("📊 Statistics:")
print(f"    ✓ Dockets scanned: {stats['scanned']}")
print(f"    ✓ With associations: {stats['with_associations']}")
print(f"    ✓ Without associations: {stats['without_associations']}")
print(f"    ✗ Failed: {stats['failed']}")
print(f"    ✓ Rows written: {stats['associations']}")
print()
print(f"🔗 Network: {metrics['nodes']} cases, {metrics['edges']} links, "
      f"{metrics['components']} component(s), density {metrics['density']}")
if metrics['nodes']:
    print()
    print("Most connected cases:")
    print(rank_central_cases(graph, top=5).to_string(index=False))
print()
print("=" * 80)
