#!/usr/bin/env python3
"""
Dashboard entrypoint - terminal users dashboard backed by the user sync API.
"""

import sys
from pathlib import Path

# Load environment variables from .env file first
import dotenv
dotenv.load_dotenv()

# Add project root to path for imports (usersync/ and tui/ are both in project root)
sys.path.insert(0, str(Path(__file__).parent.parent))


def main():
    """Validate configuration and launch the TUI dashboard."""
    from usersync.core.config import API_BASE_URL

    print(f"Users dashboard connecting to {API_BASE_URL}")
    try:
        from tui.main import main as tui_main
    except ImportError as e:
        print(f"Failed to import TUI dashboard: {e}")
        print("   Make sure textual is installed: pip install textual")
        return 1

    tui_main()
    return 0


if __name__ == "__main__":
    sys.exit(main())
