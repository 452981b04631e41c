import sys

from stockwatch.main import main

sys.exit(main())
