#!/usr/bin/env python3
"""Thin wrapper to run the FDC attestation workflow from a checkout.

Argument parsing and execution live in ``fdc_runner.cli``.
"""

from __future__ import annotations

import sys

from fdc_runner.cli import main


if __name__ == "__main__":
    sys.exit(main())
