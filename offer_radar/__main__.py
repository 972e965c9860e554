import sys

from offer_radar.cli import main

sys.exit(main())
