"""Lane Rush - three-lane arcade dodger."""

__version__ = "0.1.0"
