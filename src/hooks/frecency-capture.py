#!/usr/bin/env python3
"""
Frecency Capture - PostToolUse Hook

Standalone entry for editors that invoke hook scripts by path.
Records accessed files into the frecency history. Never blocks.
"""

from frecency.observer import main

if __name__ == "__main__":
    main()
