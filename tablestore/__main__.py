#!/usr/bin/env python3
"""
tablestore entry point

Run the REPL:
    python -m tablestore

Run the demonstration:
    python -m tablestore --demo
"""

from tablestore.core.repl import main

if __name__ == '__main__':
    main()
