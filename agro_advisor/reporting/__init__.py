"""
agro_advisor.reporting — Terminal formatting for CLI output.

It does NOT compute advice — all inputs are finished models.

Modules:
  formatters — confidence labels plus ASCII advisory, rule-table and
               options formatters for Typer CLI commands.
"""
