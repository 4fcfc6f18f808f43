#!/usr/bin/env python3
"""
Deltacloud API Client - Entry Point
Command-line access to instances, images, keys, realms and hardware profiles.
"""

import sys

# Add package directory to path for proper imports
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent))

from deltacloud_client.cli import main

if __name__ == '__main__':
    sys.exit(main())
