# main.py - run the interactive Markov model shell from a source checkout

from markov_chain_model.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
