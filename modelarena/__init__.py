"""
Model Arena - Prompt testing and model ranking demo

Selected models answer a prompt, cross-evaluate each other's responses, and
an arbiter re-ranks the top three. All scores are synthetic and derived
deterministically from the run's seed strings.
"""

from . import config  # noqa: F401
from . import models  # noqa: F401
from . import scoring  # noqa: F401
from . import runner  # noqa: F401
from . import media  # noqa: F401
from . import report  # noqa: F401

__all__ = ["config", "models", "scoring", "runner", "media", "report"]
__version__ = "1.0.0"
