"""
Network Collection Script

Authenticates with PACER, retrieves XML dockets for the seed cases listed in
a CSV file, and follows associated cases for a fixed number of iterations.

Input: cases.csv with a 'case_number' column
Court: cadc (D.C. Circuit)
Output: pacer_network_output/ (xml_files/, case_associations.csv,
        all_unique_cases.csv, newly_discovered_cases.csv)

Note: Dockets already present in xml_files/ are skipped, so the script is
      safe to re-run after an interruption. Every retrieved docket may be
      billed to the PACER account.
"""

import logging
import sys
from datetime import datetime

from pacer_network import authenticate, discover_network, build_case_graph, network_metrics
from pacer_network.config import get_app_config
from pacer_network.exceptions import PacerNetworkError

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

INPUT_CSV = "cases.csv"
CASE_COLUMN = "case_number"
CIRCUIT = "cadc"
RECURSIVE = True
MAX_ITERATIONS = 2

print("=" * 80)
print("NETWORK COLLECTION: PACER appellate case associations")
print("=" * 80)

# === Step 1: Load Configuration ===
print("\n[Step 1] Loading configuration...")
config = get_app_config()
print(f"  ✓ Config loaded")
print(f"    - Login URL: {config.login_url}")
print(f"    - Court host: {config.base_url_for(CIRCUIT)}")
print(f"    - Output: {config.default_network_output_dir}")
print(f"    - Rate limit: {config.default_rate_limit} seconds")

# === Step 2: Authenticate ===
print("\n[Step 2] Authenticating with PACER...")
try:
    token = authenticate()
    print(f"  ✓ Authenticated")
except PacerNetworkError as e:
    print(f"  ✗ Authentication failed!")
    print(f"    Error: {e}")
    print()
    print("  Please set PACER_USERNAME and PACER_PASSWORD in your .env file")
    print()
    sys.exit(1)

# === Step 3: Discover Network ===
print("\n[Step 3] Starting network discovery...")
print(f"  Input: {INPUT_CSV} (column '{CASE_COLUMN}')")
print(f"  Court: {CIRCUIT}")
print(f"  Recursive: {RECURSIVE} (max {MAX_ITERATIONS} iterations)")
print()
print("  This may take a while... Processing continues even if individual cases fail.")
print()

start_time = datetime.now()

result = discover_network(
    INPUT_CSV,
    circuit=CIRCUIT,
    case_column=CASE_COLUMN,
    auth_token=token,
    recursive=RECURSIVE,
    max_iterations=MAX_ITERATIONS
)

elapsed = (datetime.now() - start_time).total_seconds()

# === Step 4: Analyse Network ===
print("\n[Step 4] Analysing network...")
metrics = network_metrics(build_case_graph(result.associations))
print(f"  ✓ {metrics['nodes']} cases, {metrics['edges']} links, {metrics['components']} component(s)")

# === Step 5: Display Results ===
summary = result.summary()
status_counts = result.retrieval_log['status'].value_counts()

print("\n" + "=" * 80)
print("NETWORK COLLECTION COMPLETE")
print("=" * 80)
print()
print(f"⏱️  Total Time: {elapsed:.1f} seconds ({elapsed/60:.1f} minutes)")
print()
print("📊 Statistics:")
print(f"    ✓ Iterations: {summary['iterations']}")
print(f"    ✓ Original cases: {summary['original_cases']}")
print(f"    ✓ Newly discovered: {summary['discovered_cases']}")
print(f"    ✓ Associations: {summary['associations']}")
print(f"    ✓ Retrieved: {status_counts.get('SUCCESS', 0)}")
print(f"    ⏭️  Skipped (existing): {status_counts.get('SKIPPED_EXISTS', 0)}")
print(f"    ✗ Not found / no docket / error: "
      f"{status_counts.get('NOT_FOUND', 0)} / {status_counts.get('NO_DOCKET', 0)} / "
      f"{status_counts.get('ERROR', 0)}")
print()
print("=" * 80)
