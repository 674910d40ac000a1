"""
logpair - request/response transaction correlation for free-text logs

raw text → LogRecord stream → Transactions
"""

__version__ = "1.0.0"
