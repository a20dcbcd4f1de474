#!/usr/bin/env python3

"""Run hypervisor-stats from a source checkout: ./show_hypervisor_stats.py -u admin"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from hypervisor_stats.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
