# SPDX-License-Identifier: MIT
import sys

from cprobe.cli import main

sys.exit(main())
