"""
Sample API Client

Uploads the bundled sample CSV to a running server, or downloads the current
property list as JSON for inspection.

Usage:
    python scripts/sample_client.py upload
    python scripts/sample_client.py download --output data/sample/japanese_properties.json
"""
import sys
import json
import argparse
from pathlib import Path

# Add parent directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import requests

from config.settings import settings
from src.japanese_properties.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

SAMPLE_DIR = Path(__file__).parent.parent / "data" / "sample"


def upload(base_url: str, csv_path: Path) -> int:
    """POST a CSV file to the upload endpoint."""
    with csv_path.open("rb") as f:
        response = requests.post(
            f"{base_url}/properties/upload",
            files={"file": (csv_path.name, f, "text/csv")},
            timeout=30,
        )

    if response.status_code != 200:
        logger.error("upload_failed", status=response.status_code, body=response.json())
        return 1

    result = response.json()
    logger.info("upload_succeeded", count=result["count"], generation=result["generation"])
    return 0


def download(base_url: str, output_path: Path) -> int:
    """GET the property list and write it to a JSON file."""
    response = requests.get(f"{base_url}/properties", timeout=30)
    response.raise_for_status()

    properties = response.json()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(properties, f, indent=2, ensure_ascii=False)

    logger.info("properties_downloaded", count=len(properties), path=str(output_path))
    return 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sample client for the Japanese Properties API")
    parser.add_argument(
        "--base-url",
        default=f"http://localhost:{settings.port}",
        help="Server base URL",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    upload_parser = subparsers.add_parser("upload", help="Upload a CSV file")
    upload_parser.add_argument(
        "--file",
        type=Path,
        default=SAMPLE_DIR / "japanese_properties.csv",
        help="CSV file to upload",
    )

    download_parser = subparsers.add_parser("download", help="Download properties as JSON")
    download_parser.add_argument(
        "--output",
        type=Path,
        default=SAMPLE_DIR / "japanese_properties.json",
        help="Where to write the JSON",
    )
    return parser.parse_args()


def main() -> int:
    setup_logging()
    args = parse_args()
    base_url = args.base_url.rstrip("/")

    if args.command == "upload":
        return upload(base_url, args.file)
    return download(base_url, args.output)


if __name__ == "__main__":
    sys.exit(main())
