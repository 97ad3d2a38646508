"""Runtime values, tokens, syntax tree, JSON serialization and a bytecode virtual machine
for the address language."""

__version__ = "0.1.0"