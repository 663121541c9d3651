"""A small streaming array language: values, expression tree, context, chunked adverbs and evaluator."""

__version__ = "0.1.0"