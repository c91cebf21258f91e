"""Run the fileshell terminal: python -m fileshell"""

from .terminal import main

raise SystemExit(main())
