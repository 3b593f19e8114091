"""frontgen: generate front-end artifacts from prompts and iterate on them."""

__version__ = "0.1.0"
