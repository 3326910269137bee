"""Module entrypoint: ``python -m preflight``."""

import sys

from preflight import cli

sys.exit(cli.main())
