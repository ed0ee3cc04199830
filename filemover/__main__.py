"""Allow ``python -m filemover``."""
import sys

from .cli import main

sys.exit(main())
