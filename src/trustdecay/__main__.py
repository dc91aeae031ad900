import sys

from trustdecay.cli.main import main

sys.exit(main())
