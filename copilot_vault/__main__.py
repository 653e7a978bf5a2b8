# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Module entry point for ``python -m copilot_vault``."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
