# Allow running as python -m secretguard
import sys

from secretguard.cli import main

sys.exit(main())
