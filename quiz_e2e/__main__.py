import sys

from quiz_e2e.main import main

sys.exit(main())
