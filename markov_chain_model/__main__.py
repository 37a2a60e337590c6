import sys

from markov_chain_model.cli import main

sys.exit(main())
