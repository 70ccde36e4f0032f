import sys

from simlink.cli import main

sys.exit(main())
