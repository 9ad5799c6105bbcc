"""lox interpreter.

Basic program flow:
    1. Scanner: turns source text into tokens (see lang/scanner.py)
    2. Parser: recursive descent from tokens to a list of statement trees (see core/parser.py)
        - for loops are desugared into while loops here
        - syntax errors are reported and skipped, so one bad statement doesn't hide the others
    3. Evaluator: walks the statement trees against a chain of scopes (see core/evaluator.py)
        - not a compiler, so values are computed on the fly
        - the first runtime error stops the run

lang/session.py ties the three together; lang/shell.py and main.py are the interactive and file front ends.
"""
