"""Allow ``python -m runnersync``."""

from __future__ import annotations

from runnersync.cli import main

raise SystemExit(main())
