"""
Export entrypoint.

Operator notes:
- This file should remain extremely small and boring.
- Configuration comes from the environment / .env (see parish_admin.config).
- If this file crashes, the error should be immediately obvious to the operator.
"""

import logging
import sys

from parish_admin.cli import main as cli_main


def main() -> None:
    try:
        code = cli_main()
    except Exception:
        logging.basicConfig(level=logging.ERROR)
        logging.exception("Parish admin export failed.")
        print("\n❌ Parish admin export failed.")
        print("   See error above. Most common causes:")
        print("   - PARISH_API_BASE unreachable or wrong")
        print("   - PARISH_API_TOKEN missing or expired")
        print("   - EXPORT_DIR not writable\n")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
