"""Static input corpora (names, surnames, villages, occupations, titles).

Treated as opaque, read-only lists indexed by position.
"""

from .loader import Corpora, load_corpora, DEFAULT_CORPORA_PATH

__all__ = ["Corpora", "load_corpora", "DEFAULT_CORPORA_PATH"]
