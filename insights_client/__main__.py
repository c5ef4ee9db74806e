"""Run the CLI with ``python -m insights_client``."""

from __future__ import annotations

from insights_client.cli import main

raise SystemExit(main())
