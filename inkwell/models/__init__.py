#!/usr/bin/env python
#
#
# -----------------------------------------------------------------------------
"""ORM models package — import all to register with Base.metadata."""
# -----------------------------------------------------------------------------

from .user import User
from .workspace import Workspace
from .article import Article, ArticleVersion
from .attachment import Attachment
from .comment import Comment

__all__ = ["User", "Workspace", "Article", "ArticleVersion", "Attachment", "Comment"]
