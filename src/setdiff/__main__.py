import sys

from setdiff.cli import main

sys.exit(main())
