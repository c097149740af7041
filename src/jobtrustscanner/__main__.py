import sys

from jobtrustscanner.cli import main

sys.exit(main())
