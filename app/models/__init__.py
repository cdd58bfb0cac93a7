# Importing the declarative base registers every model on Base.metadata,
# whichever model module is imported first.
import app.db.base  # noqa: F401
