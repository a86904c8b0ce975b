import sys

from contribcity.main import main

sys.exit(main())
