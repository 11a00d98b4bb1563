"""Command line interface and batch file schema."""
