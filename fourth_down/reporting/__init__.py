"""
fourth_down.reporting — display formatting for decision service responses.

Modules:
  formatters — ``render_recommendation()`` (dashboard card strings) and
               ``format_recommendation_report()`` (ASCII block for the CLI).
"""
