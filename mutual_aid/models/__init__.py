"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - HelpRequest is the aggregate root; articles are owned inline

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from mutual_aid.models.user import User  # noqa: F401
from mutual_aid.models.help_request import HelpRequest  # noqa: F401
from mutual_aid.models.help_request_article import HelpRequestArticle  # noqa: F401
