"""
arithc Command-Line Interface
=============================

This package provides the `arithc` command-line tool, a Click-based
front end to the compiler and interpreter. The command itself is
`arithc.cli.arithc.main`.
"""
