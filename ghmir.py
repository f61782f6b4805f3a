#!/usr/bin/env python3
"""
ghmir - Back up GitHub users and organizations and mirror them to GitLab.

For every requested entity, ghorg clones (or refreshes) all repositories
into a local backup directory. With --push, each local clone is given a
``gitlab`` remote with mirror refspecs and pushed with ``git push --mirror``
into the entity's GitLab group. A per-entity summary can be posted to a
Discord webhook.

License: MIT
"""

from __future__ import annotations

import sys
from typing import NoReturn

from argument_parser import parse_arguments
from run_coordinator import RunCoordinator


def main() -> NoReturn:
    cfg = parse_arguments()
    coordinator = RunCoordinator(cfg)
    sys.exit(coordinator.run())


if __name__ == "__main__":
    main()
