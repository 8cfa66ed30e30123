#!/usr/bin/env python3

import json
import sys
from pathlib import Path

from app.core.analysis import analyze_detection
from app.services.vision_client import parse_detection_text


def analyze_file(path: str) -> dict:
    text = Path(path).read_text()
    payload = parse_detection_text(text)
    result = analyze_detection(payload)
    return result.model_dump(mode="json", by_alias=True)


def main():
    if len(sys.argv) != 2:
        print(f"Usage: python {sys.argv[0]} <detection.json>", file=sys.stderr)
        sys.exit(1)

    try:
        result = analyze_file(sys.argv[1])
        print(json.dumps(result, indent=2))
    except Exception as exc:
        print(json.dumps({"error": str(exc)}), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
