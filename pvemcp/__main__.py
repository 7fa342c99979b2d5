"""Allow ``python -m pvemcp``."""

from pvemcp.cli.main import main

main()
