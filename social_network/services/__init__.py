# Services package.
#
# Each module exposes a focused set of async functions that validate
# references, enforce ownership and call the repositories for a single
# aggregate:
#
#   account_service  — accounts, login tokens and follow relationships
#   post_service     — posts with author-only update / soft removal
#   comment_service  — comments and threaded replies, same ownership rules
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.  Failures are raised as ``AppError`` subclasses.
