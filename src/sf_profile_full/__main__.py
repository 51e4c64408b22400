import sys

from sf_profile_full.cli import main

sys.exit(main())
