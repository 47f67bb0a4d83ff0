import sys

from corpus_search.cli import main


sys.exit(main())
