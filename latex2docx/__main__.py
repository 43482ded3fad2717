import sys

from latex2docx.cli import main

sys.exit(main())
