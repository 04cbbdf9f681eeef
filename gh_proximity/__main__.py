import sys

from gh_proximity.cli import main

sys.exit(main())
