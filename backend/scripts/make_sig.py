#!/usr/bin/env python3

import json
import sys

from stripe_relay.services.stripe_verify import sign_header


def main(argv: list[str]) -> int:
    if len(argv) != 3:
        print("Usage: make_sig.py <secret> <payload>", file=sys.stderr)
        return 1

    secret = argv[1]
    payload = argv[2]

    # Validate payload is valid JSON
    try:
        json.loads(payload)
    except json.JSONDecodeError:
        print("Error: Payload must be valid JSON", file=sys.stderr)
        return 1

    print(sign_header(payload, secret))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
