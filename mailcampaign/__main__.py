import sys

from mailcampaign.cli import main

sys.exit(main())
