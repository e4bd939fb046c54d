"""Zoo Console: a Streamlit client for the zoo-management REST service."""

__version__ = "1.0.0"
