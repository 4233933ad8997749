"""
Print a bcrypt hash for a password, for provisioning rows in `users` by hand.

    python api/generate_hash.py <password>
"""

from __future__ import annotations

import sys

from auth import security


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args or not args[0]:
        print("Usage: python api/generate_hash.py <password>", file=sys.stderr)
        print("Example: python api/generate_hash.py mypassword", file=sys.stderr)
        return 1

    print(security.hash_password(args[0]))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
