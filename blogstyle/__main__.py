"""python -m blogstyle"""

import sys

from blogstyle.cli import main

sys.exit(main())
