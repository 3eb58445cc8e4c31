"""NewsBrief - scheduled tech/science news collection with AI summaries."""

__version__ = "0.1.0"
