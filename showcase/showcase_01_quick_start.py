"""
Showcase 01: Quick Start

This showcase walks through the public API end to end:
1. Authenticate with PACER
2. Retrieve a few cases (list input)
3. Retrieve from CSV
4. Extract associations from the downloaded XML
5. Discover a network (one hop), then recursively (two hops)
6. Analyse the network graph

Court: cadc (D.C. Circuit)

Requirements:
- PACER_USERNAME / PACER_PASSWORD in .env file
- Internet connection
- PACER fee exemption recommended: every retrieved docket may be billed

Status: Live smoke test with high-level API
"""

import logging
from pathlib import Path

import pandas as pd

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

print("=" * 80)
print("SHOWCASE 01: Quick Start")
print("=" * 80)

# === Step 1: Authenticate ===

print("\n[Step 1] Importing modules and authenticating...")
from pacer_network import (
    authenticate,
    retrieve_cases,
    extract_associations,
    discover_network,
    build_case_graph,
    network_metrics,
    rank_central_cases,
    Circuits,
)
from pacer_network.parsers import associations_to_frame

print(f"  ✓ Tested courts: {', '.join(Circuits.list_tested())}")
token = authenticate()
print(f"  ✓ Authenticated")

# === Step 2: Retrieve a Few Cases ===

CASES = ["20-1234", "20-1235"]

print("\n[Step 2] Retrieving specific cases...")
log = retrieve_cases(CASES, circuit="cadc", output_dir="showcase_output",
                     auth_token=token, rate_limit=(5, 10))
print(log[['case_number', 'status']].to_string(index=False))

# === Step 3: Retrieve from CSV ===

print("\n[Step 3] Retrieving from CSV...")
pd.DataFrame({'case_number': CASES, 'note': ["first", "second"]}).to_csv(
    "example_cases.csv", index=False
)
log = retrieve_cases("example_cases.csv", case_column="case_number",
                     output_dir="showcase_output", auth_token=token)
print(f"  ✓ Statuses: {log['status'].value_counts().to_dict()}")
print("    (cases from Step 2 are skipped: their XML already exists)")

# === Step 4: Extract Associations ===

print("\n[Step 4] Extracting associations from downloaded XML...")
associations = []
for xml_path in sorted(Path("showcase_output").glob("docket_*.xml")):
    associations.extend(extract_associations(xml_path))

frame = associations_to_frame(associations)
print(f"  ✓ Total associations: {len(frame)}")
if not frame.empty:
    print(frame['association_type'].value_counts(dropna=False).to_string())

# === Step 5: Network Discovery ===

print("\n[Step 5] Discovering network (no recursion)...")
network = discover_network(CASES, circuit="cadc", output_dir="showcase_network",
                           auth_token=token, recursive=False)
print(f"  ✓ {network.summary()}")

print("\n[Step 5b] Discovering network (recursive, 2 iterations)...")
network_recursive = discover_network(
    "example_cases.csv",
    case_column="case_number",
    circuit="cadc",
    output_dir="showcase_network_recursive",
    auth_token=token,
    recursive=True,
    max_iterations=2
)
print(f"  ✓ Original: {len(network_recursive.original_cases)}")
print(f"  ✓ New discoveries: {len(network_recursive.discovered_cases)}")
print(f"  ✓ Total network: {len(network_recursive.all_unique_cases)}")

# === Step 6: Network Analysis ===

print("\n[Step 6] Network analysis...")
graph = build_case_graph(network_recursive.associations)
metrics = network_metrics(graph)
print(f"  Nodes: {metrics['nodes']}")
print(f"  Edges: {metrics['edges']}")
print(f"  Density: {metrics['density']}")
print(f"  Components: {metrics['components']}")

if metrics['nodes']:
    print("\nMost connected cases:")
    print(rank_central_cases(graph, top=10).to_string(index=False))

print("\n" + "=" * 80)
print("SHOWCASE COMPLETE")
print("=" * 80)
