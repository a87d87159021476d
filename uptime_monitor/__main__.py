import sys

from uptime_monitor.cli import main

sys.exit(main())
