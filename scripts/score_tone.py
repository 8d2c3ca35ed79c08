import sys

from inbox_triage.app.tone_check import main

if __name__ == "__main__":
    sys.exit(main())
