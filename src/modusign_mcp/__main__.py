import sys

from modusign_mcp.cli import main

sys.exit(main())
