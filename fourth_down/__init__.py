"""
fourth_down — fourth-down decision dashboard.

Describe a fourth-down situation, ask the decision service whether to go
for it, punt or kick, and render the answer.

Entry points:
  fourth-down ...                 Typer CLI (``fourth_down.cli``)
  streamlit run dashboard/app.py  Browser dashboard
"""

__version__ = "0.1.0"
