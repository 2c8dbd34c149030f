import sys

from dotpkg.main import main

sys.exit(main())
