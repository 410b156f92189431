import sys

from pastens.cli import main

sys.exit(main())
