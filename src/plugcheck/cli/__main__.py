# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from plugcheck.cli.check_launch import main

if __name__ == "__main__":
    main()
