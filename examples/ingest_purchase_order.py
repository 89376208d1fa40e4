#!/usr/bin/env python3
"""Example: ingest a local purchase-order file into PostgreSQL.

Runs the same pipeline as the HTTP endpoint (checksum, validation, conflict
check, insert) against the database configured in the environment or .env.
The input file is left in place.
"""

import json
import logging

from pokit import PurchaseOrderParser
from pokit.config import IngestConfig
from pokit.ingest import IngestCoordinator
from pokit.ingest.postgres_client import PostgresRepository


def ingest_file(input_file: str, order_date: str, vendor_name: str):
    """Ingest one purchase-order file and print the response body.

    Args:
        input_file: Path to a .csv, .tsv or .xlsx purchase-order file
        order_date: Submission date sent alongside the file
        vendor_name: Submission vendor name sent alongside the file
    """
    config = IngestConfig.from_env()
    logging.basicConfig(level=config.log_level)

    # Show how the file's columns map onto record fields
    report = PurchaseOrderParser.with_default_adapters().get_mapping_report(input_file)
    print("Column Mapping Report:")
    for field_name, header in report["mapped"].items():
        print(f"  {field_name:14s} <- {header}")
    if report["unmapped"]:
        print(f"  Unmapped: {', '.join(str(h) for h in report['unmapped'])}")
    if report["missing"]:
        print(f"  Missing: {', '.join(report['missing'])}")

    repository = PostgresRepository.from_config(config)
    try:
        repository.create_table()
        coordinator = IngestCoordinator.from_config(config, repository)
        outcome = coordinator.ingest(input_file, order_date, vendor_name, remove_file=False)
    finally:
        repository.close()

    print(f"\nHTTP {outcome.http_status} ({outcome.status.value})")
    print(json.dumps(outcome.to_response(), indent=2))
    return outcome


if __name__ == "__main__":
    import sys

    if len(sys.argv) < 4:
        print("Usage: python ingest_purchase_order.py <input_file> <date> <vendor_name>")
        print("\nExample:")
        print("  python ingest_purchase_order.py po_march.csv 2024-03-01 Acme")
        sys.exit(1)

    outcome = ingest_file(sys.argv[1], sys.argv[2], sys.argv[3])
    sys.exit(0 if outcome.accepted else 1)
