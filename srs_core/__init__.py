"""
srs_core - spaced-repetition scheduling for learnable items.

Subpackages:
- scheduling: rating vocabulary, the classic and FSRS-style engines,
  the scheduler service and its storage adapters
- analytics: review dashboard statistics
"""
