"""Print a service bearer token.

Usage: ``python scripts/issue_token.py <service-name> [ttl-hours]``
"""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from negotiator.auth.jwt import create_service_token
from negotiator.core.config import get_config


def main(argv: list[str]) -> int:
    if not argv:
        print("usage: issue_token.py <service-name> [ttl-hours]", file=sys.stderr)
        return 2
    config = get_config()
    ttl_hours = int(argv[1]) if len(argv) > 1 else config.JWT_M2M_TTL_HOURS
    print(create_service_token(argv[0], secret=config.JWT_M2M_SECRET, ttl_hours=ttl_hours))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
