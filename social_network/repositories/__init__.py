# Repository package.
#
# One class per table, each wrapping the request's AsyncSession:
#
#   account_repository  — Account rows and their unique-field lookups
#   post_repository     — Post rows
#   comment_repository  — Comment rows, filtered listings
#   follow_repository   — AccountFollow relationship rows
#
# Repositories flush but never commit; the transaction boundary belongs to
# the ``get_db`` dependency.
from social_network.repositories.account_repository import AccountRepository
from social_network.repositories.comment_repository import CommentRepository
from social_network.repositories.follow_repository import FollowRepository
from social_network.repositories.post_repository import PostRepository

__all__ = [
    "AccountRepository",
    "CommentRepository",
    "FollowRepository",
    "PostRepository",
]
