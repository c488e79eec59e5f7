import sys

from extendable.cli import main

sys.exit(main())
