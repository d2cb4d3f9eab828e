import sys

from pluginassets.cli.main import main

sys.exit(main())
