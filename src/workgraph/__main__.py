"""Allow ``python -m workgraph``."""

from workgraph.cli import main

main()
