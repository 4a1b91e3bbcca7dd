import sys

from drawnumber.main import main

sys.exit(main())
