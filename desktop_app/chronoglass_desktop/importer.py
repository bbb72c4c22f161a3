"""Kommandozeilenwerkzeug zum Einspielen einer exportierten Datendatei."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence

from .api_client import ApiClient, ApiError
from .config import load_config


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Liest eine JSON-Datei und ersetzt damit den kompletten Datenbestand."""

    parser = argparse.ArgumentParser(prog="chronoglass-import", description=main.__doc__)
    parser.add_argument("file", type=Path, help="exportierte ChronoGlass JSON-Datei")
    parser.add_argument("--base-url", default=None, help="Adresse der lokalen API")
    args = parser.parse_args(argv)

    config = load_config()
    client = ApiClient(args.base_url or config.api_base_url, timeout=config.timeout_seconds)

    try:
        document = json.loads(args.file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        print(f"Datei konnte nicht gelesen werden: {exc}", file=sys.stderr)
        return 1
    if not isinstance(document, dict) or not isinstance(document.get("sessions"), list):
        print("Datei enthält keine Liste 'sessions'", file=sys.stderr)
        return 1

    try:
        client.overwrite(document)
    except ApiError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(f"{len(document['sessions'])} Sitzungen importiert")
    return 0


if __name__ == "__main__":
    sys.exit(main())
