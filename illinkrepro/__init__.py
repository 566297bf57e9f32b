"""illinkrepro - turn a recorded ILLink invocation into a portable repro."""

__version__ = "0.1.0"
