"""Allow ``python -m doerfy``."""

from .cli.main import main

main()
