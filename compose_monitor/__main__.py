import sys

from compose_monitor.cli import main

sys.exit(main())
