#!/usr/bin/env python3
"""
Banking Ledger Entry Point

Starts the interactive console for the banking ledger.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from banking_ledger.console import main


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nShutting down...")
