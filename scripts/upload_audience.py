"""
Create a custom audience from a local customer file.

The file is either a JSON array of `{email, phone, fn, ln}` objects or a CSV
with those column headers.
"""

from __future__ import annotations

import argparse
import csv
import json
import sys
from pathlib import Path

from app.config import get_audience_upload_settings, get_external_http_settings, get_meta_api_settings
from app.connectors import MetaGraphConnector
from app.schemas.custom_audience import CustomerPayload
from app.services.custom_audience_service import (
    AudienceCreationError,
    CustomAudienceInputError,
    CustomAudienceService,
)


def _load_customers(path: Path) -> list[CustomerPayload]:
    if path.suffix.lower() == ".csv":
        with path.open(newline="", encoding="utf-8") as handle:
            rows = list(csv.DictReader(handle))
    else:
        rows = json.loads(path.read_text(encoding="utf-8"))
    return [CustomerPayload.model_validate(row) for row in rows]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create and populate a Meta custom audience.")
    parser.add_argument("name", help="Audience name.")
    parser.add_argument("customers_file", type=Path, help="JSON or CSV file of customers.")
    args = parser.parse_args(argv)

    connector = MetaGraphConnector(
        settings=get_meta_api_settings(),
        http_settings=get_external_http_settings(),
    )
    service = CustomAudienceService(
        connector=connector,
        batch_size=get_audience_upload_settings().batch_size,
    )
    try:
        result = service.create_and_populate(
            name=args.name,
            customers=[customer.to_record() for customer in _load_customers(args.customers_file)],
        )
    except (CustomAudienceInputError, AudienceCreationError) as exc:
        print(f"Audience upload failed: {exc}", file=sys.stderr)
        return 1
    finally:
        connector.close()

    payload = {
        "audienceId": result.audience_id,
        "uploaded": result.uploaded,
        "failed_batches": result.failed_batches,
        "batches": [
            {
                "group": outcome.group_key,
                "batch_seq": outcome.batch_seq,
                "rows_sent": outcome.rows_sent,
                "num_received": outcome.num_received,
                "error": outcome.error,
            }
            for outcome in result.batches
        ],
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
