import sys

from inbox_triage.app.run import main

if __name__ == "__main__":
    sys.exit(main())
