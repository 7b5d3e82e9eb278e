"""Keep organization self-hosted runner groups in sync with glob rules.

runnersync reads a YAML file mapping runner group names to repository-name
globs, compares it with the organization's runner groups on GitHub, and sets
each group's selected repositories to the ones the globs match.

Run it from a workflow or a shell::

    RUNNERSYNC_ORG=my-org GITHUB_TOKEN=... python -m runnersync --dry-run

"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
