"""Command-line parsing, task selection and repro materialization."""
